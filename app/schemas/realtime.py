"""
WebSocket envelope and event payloads for the realtime channel.

Frames are ``{"type": ..., "data": {...}}`` in both directions. Payload field
names are camelCase because they are the wire format browser clients bind to.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

JOIN_ROOM = "join-room"
SEND_MESSAGE = "send-message"
RECEIVE_MESSAGE = "receive-message"
ROOM_JOINED = "room-joined"
ERROR = "error"


class WsInbound(BaseModel):
    """Client -> server."""

    type: str
    data: Any = None


class WsOutbound(BaseModel):
    """Server -> client."""

    type: str
    data: dict[str, Any] = {}


class JoinRoomPayload(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    roomId: str = Field(..., min_length=1)


class SendMessagePayload(BaseModel):
    """Realtime-only message; extra client fields are carried through untouched."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    roomId: str = Field(..., min_length=1)


class ReceiveMessageEvent(BaseModel):
    roomId: str
    sender: str
    senderName: Optional[str] = None
    message: str
    timestamp: datetime
