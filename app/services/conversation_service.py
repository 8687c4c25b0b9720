"""
Conversation store: get-or-create by unordered pair, append, list by activity.

Every mutation is a single transaction. The pair key's unique constraint makes
get-or-create safe under concurrent first contact, and the last-message summary
only ever moves forward in time.
"""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from app.core.pair_key import build_pair_key
from app.exceptions import ForbiddenError, InvalidRequestError, NotFoundError
from app.models.conversation import ChatMessage, Conversation
from app.models.mixins import utcnow

logger = logging.getLogger(__name__)


class ConversationService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_conversation(self, conversation_id: UUID) -> Optional[Conversation]:
        return (
            self.db.query(Conversation)
            .filter(Conversation.id == conversation_id)
            .first()
        )

    def get_conversation_for_participant(
        self, conversation_id: UUID, user_id: UUID
    ) -> Conversation:
        """Fetch a conversation the user takes part in; NotFound / Forbidden otherwise."""
        conversation = self.get_conversation(conversation_id)
        if conversation is None:
            raise NotFoundError("Chat not found")
        if not conversation.has_participant(user_id):
            raise ForbiddenError("Not authorized")
        return conversation

    def get_by_pair(self, user_a: UUID, user_b: UUID) -> Optional[Conversation]:
        return (
            self.db.query(Conversation)
            .filter(Conversation.pair_key == build_pair_key(user_a, user_b))
            .first()
        )

    def get_or_create(self, user_a: UUID, user_b: UUID) -> Conversation:
        """
        Return the conversation between two users, creating it on first contact.

        The insert is conditional on the pair key: if a concurrent request wins
        the race, the unique constraint rejects our row and we return theirs.
        """
        if user_a == user_b:
            raise InvalidRequestError("Cannot start a conversation with yourself")

        existing = self.get_by_pair(user_a, user_b)
        if existing is not None:
            return existing

        first, second = sorted((user_a, user_b), key=lambda u: u.hex)
        conversation = Conversation(
            pair_key=build_pair_key(user_a, user_b),
            user_a_id=first,
            user_b_id=second,
        )
        self.db.add(conversation)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            winner = self.get_by_pair(user_a, user_b)
            if winner is None:
                raise
            logger.info("Lost create race for pair %s; using %s", winner.pair_key, winner.id)
            return winner
        self.db.refresh(conversation)
        logger.info("Created conversation %s", conversation.id)
        return conversation

    def append(self, conversation_id: UUID, sender_id: UUID, body: str) -> ChatMessage:
        """Append a message and bump the conversation's last-message summary."""
        conversation = self.get_conversation(conversation_id)
        if conversation is None:
            raise NotFoundError("Chat not found")
        if not conversation.has_participant(sender_id):
            raise ForbiddenError("Not authorized")

        sent_at = utcnow()
        message = ChatMessage(
            conversation_id=conversation.id,
            sender_id=sender_id,
            body=body,
            created_at=sent_at,
        )
        self.db.add(message)
        self.db.flush()
        self.db.execute(
            update(Conversation)
            .where(Conversation.id == conversation.id)
            .where(
                or_(
                    Conversation.last_message_at.is_(None),
                    Conversation.last_message_at <= sent_at,
                )
            )
            .values(last_message=body, last_message_at=sent_at)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        self.db.refresh(message)
        return message

    def list_for_user(self, user_id: UUID) -> List[Conversation]:
        """Conversations of ``user_id``, most recently active first."""
        activity = func.coalesce(Conversation.last_message_at, Conversation.created_at)
        return (
            self.db.query(Conversation)
            .filter(
                or_(Conversation.user_a_id == user_id, Conversation.user_b_id == user_id)
            )
            .order_by(activity.desc(), Conversation.id)
            .all()
        )

    def get_messages_query(self, conversation_id: UUID) -> Query[ChatMessage]:
        """Messages in insertion order (for pagination)."""
        return (
            self.db.query(ChatMessage)
            .filter(ChatMessage.conversation_id == conversation_id)
            .order_by(ChatMessage.id)
        )

    def get_messages(
        self, conversation_id: UUID, limit: int = 100, offset: int = 0
    ) -> List[ChatMessage]:
        return self.get_messages_query(conversation_id).offset(offset).limit(limit).all()

    def get_message_count(self, conversation_id: UUID) -> int:
        return (
            self.db.query(ChatMessage)
            .filter(ChatMessage.conversation_id == conversation_id)
            .count()
        )
