from app.config import get_settings
from app.core.realtime import RoomRegistry


class AppState:
    def __init__(self) -> None:
        self.rooms = RoomRegistry(send_timeout=get_settings().ws_send_timeout_seconds)


state = AppState()
