"""
WebSocket endpoint for the room-based realtime channel.

Clients ``join-room`` with a conversation id and receive every
``receive-message`` published to that room while they stay connected.
A ``send-message`` from a client is re-broadcast to the room as-is; it is not
stored, so clients reconcile by refetching history over HTTP.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from app.core.app_state import state
from app.core.realtime import ClientConnection
from app.schemas.realtime import (
    ERROR,
    JOIN_ROOM,
    RECEIVE_MESSAGE,
    ROOM_JOINED,
    SEND_MESSAGE,
    JoinRoomPayload,
    SendMessagePayload,
    WsInbound,
    WsOutbound,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


def _room_payload(data: Any) -> Any:
    """Clients may send a bare room id instead of ``{"roomId": ...}``."""
    if isinstance(data, (str, int)):
        return {"roomId": str(data)}
    return data


def _frame(event_type: str, **data: Any) -> dict:
    return WsOutbound(type=event_type, data=data).model_dump(mode="json")


@router.websocket("/ws")
async def realtime_socket(
    websocket: WebSocket,
    user_id: Optional[UUID] = Query(None),
) -> None:
    await websocket.accept()
    connection = ClientConnection(websocket, user_id=user_id)
    rooms = state.rooms
    logger.info("WebSocket %s connected (user=%s)", connection.id, user_id)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            if raw is None:
                await websocket.send_json(
                    _frame(ERROR, detail="Binary frames are not supported")
                )
                continue
            try:
                frame = WsInbound.model_validate_json(raw)
            except ValidationError:
                await websocket.send_json(_frame(ERROR, detail="Malformed frame"))
                continue

            if frame.type == JOIN_ROOM:
                try:
                    payload = JoinRoomPayload.model_validate(_room_payload(frame.data))
                except ValidationError:
                    await websocket.send_json(_frame(ERROR, detail="roomId is required"))
                    continue
                rooms.join(connection, payload.roomId)
                await websocket.send_json(_frame(ROOM_JOINED, roomId=payload.roomId))

            elif frame.type == SEND_MESSAGE:
                try:
                    payload = SendMessagePayload.model_validate(frame.data)
                except ValidationError:
                    await websocket.send_json(_frame(ERROR, detail="roomId is required"))
                    continue
                event = payload.model_dump(mode="json")
                if not event.get("sender") and connection.user_id is not None:
                    event["sender"] = str(connection.user_id)
                event.setdefault(
                    "timestamp", datetime.now(timezone.utc).isoformat()
                )
                rooms.publish(
                    payload.roomId,
                    WsOutbound(type=RECEIVE_MESSAGE, data=event).model_dump(mode="json"),
                )

            else:
                await websocket.send_json(
                    _frame(ERROR, detail=f"Unknown event type: {frame.type}")
                )
    except WebSocketDisconnect:
        logger.info("WebSocket %s disconnected", connection.id)
    finally:
        rooms.disconnect(connection)
