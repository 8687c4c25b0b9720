"""
Room-based publish/subscribe over live WebSocket connections.

One room per conversation id. The registry is process-wide and holds only
live connections: joining is idempotent, disconnecting drops every
subscription, and publishing is fire-and-forget (no persistence, no
acknowledgement, no replay for late joiners).
"""

from __future__ import annotations

import asyncio
import logging
import threading
import uuid
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class Connection(Protocol):
    id: str
    loop: Optional[asyncio.AbstractEventLoop]

    async def send_json(self, data: Any) -> None: ...


class ClientConnection:
    """A live WebSocket plus the identity it was opened with.

    Starlette's WebSocket is not hashable, so the registry keys connections by
    ``id``. ``loop`` is the event loop the socket lives on; publishes coming
    from worker threads are handed back to it.
    """

    def __init__(self, websocket: Any, user_id: Optional[uuid.UUID] = None) -> None:
        self.id = uuid.uuid4().hex
        self.websocket = websocket
        self.user_id = user_id
        self.loop = asyncio.get_running_loop()

    async def send_json(self, data: Any) -> None:
        await self.websocket.send_json(data)


class RoomRegistry:
    def __init__(self, send_timeout: float = 5.0) -> None:
        self._send_timeout = send_timeout
        self._lock = threading.RLock()
        self._rooms: Dict[str, Dict[str, Connection]] = {}
        self._memberships: Dict[str, set[str]] = {}
        self._tasks: set[asyncio.Task] = set()

    def join(self, connection: Connection, room_id: str) -> bool:
        """Subscribe ``connection`` to ``room_id``. Returns False if it already was."""
        room_id = str(room_id)
        with self._lock:
            room = self._rooms.setdefault(room_id, {})
            if connection.id in room:
                return False
            room[connection.id] = connection
            self._memberships.setdefault(connection.id, set()).add(room_id)
        logger.info("Connection %s joined room %s", connection.id, room_id)
        return True

    def leave(self, connection: Connection, room_id: str) -> None:
        room_id = str(room_id)
        with self._lock:
            self._discard(connection.id, room_id)
            rooms = self._memberships.get(connection.id)
            if rooms is not None:
                rooms.discard(room_id)
                if not rooms:
                    del self._memberships[connection.id]

    def disconnect(self, connection: Connection) -> None:
        """Drop every subscription held by ``connection``."""
        with self._lock:
            for room_id in self._memberships.pop(connection.id, set()):
                self._discard(connection.id, room_id)

    def _discard(self, connection_id: str, room_id: str) -> None:
        room = self._rooms.get(room_id)
        if room is None:
            return
        room.pop(connection_id, None)
        if not room:
            del self._rooms[room_id]

    def subscribers(self, room_id: str) -> list[Connection]:
        with self._lock:
            return list(self._rooms.get(str(room_id), {}).values())

    def publish(self, room_id: str, event: dict[str, Any]) -> int:
        """
        Fan ``event`` out to the current subscribers of ``room_id``.

        Returns immediately with the number of deliveries scheduled; sends run
        on each connection's event loop and a failing connection is dropped.
        Safe to call from a coroutine or from a worker thread.
        """
        scheduled = 0
        for connection in self.subscribers(room_id):
            if self._schedule(connection, event):
                scheduled += 1
        logger.debug("Published to room %s: %d deliveries", room_id, scheduled)
        return scheduled

    def _schedule(self, connection: Connection, event: dict[str, Any]) -> bool:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        loop = getattr(connection, "loop", None) or running
        if loop is None or loop.is_closed():
            logger.warning("No event loop for connection %s; dropping it", connection.id)
            self.disconnect(connection)
            return False

        coro = self._deliver(connection, event)
        if loop is running:
            task = loop.create_task(coro)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        else:
            asyncio.run_coroutine_threadsafe(coro, loop)
        return True

    async def _deliver(self, connection: Connection, event: dict[str, Any]) -> None:
        try:
            await asyncio.wait_for(connection.send_json(event), self._send_timeout)
        except Exception as e:
            logger.warning(
                "Send to connection %s failed, dropping it: %s", connection.id, e
            )
            self.disconnect(connection)

    async def drain(self) -> None:
        """Wait for deliveries scheduled from this loop (used on shutdown and in tests)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
