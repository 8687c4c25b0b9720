"""
Command to send a chat message over HTTP.

Persists the message through the conversation store, then publishes a
``receive-message`` event to the conversation's room. Publishing is
fire-and-forget: a realtime failure never undoes or fails the stored message.
"""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.app_state import state
from app.core.realtime import RoomRegistry
from app.models.conversation import ChatMessage
from app.models.user import User
from app.schemas.realtime import RECEIVE_MESSAGE, ReceiveMessageEvent, WsOutbound
from app.services.conversation_service import ConversationService


class SendChatMessageCommand:
    def __init__(self, db: Session, rooms: Optional[RoomRegistry] = None) -> None:
        self.db = db
        self.conversation_service = ConversationService(db)
        self.rooms = rooms if rooms is not None else state.rooms
        self.logger = logging.getLogger(__name__)

    def execute(self, conversation_id: UUID, sender: User, body: str) -> ChatMessage:
        """
        Append ``body`` to the conversation as ``sender`` and notify the room.

        Raises:
            NotFoundError: the conversation does not exist.
            ForbiddenError: the sender is not a participant.
        """
        message = self.conversation_service.append(conversation_id, sender.id, body)
        self._publish(message, sender)
        return message

    def _publish(self, message: ChatMessage, sender: User) -> None:
        room_id = str(message.conversation_id)
        event = ReceiveMessageEvent(
            roomId=room_id,
            sender=str(sender.id),
            senderName=sender.name,
            message=message.body,
            timestamp=message.created_at,
        )
        frame = WsOutbound(type=RECEIVE_MESSAGE, data=event.model_dump(mode="json"))
        try:
            delivered = self.rooms.publish(room_id, frame.model_dump(mode="json"))
        except Exception as e:
            self.logger.warning("Realtime publish for room %s failed: %s", room_id, e)
            return
        self.logger.info(
            "Message %s stored in %s, %d realtime deliveries scheduled",
            message.id,
            room_id,
            delivered,
        )
