"""Conversation model: one row per unordered pair of users, with its message log."""

from __future__ import annotations

import uuid

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import TimestampMixin, UTCDateTime, utcnow


class Conversation(Base, TimestampMixin):
    """Two-party conversation. ``pair_key`` is unique, so a pair has at most one row."""

    __tablename__ = "conversations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    pair_key = Column(String(80), unique=True, nullable=False, index=True)
    user_a_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_b_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Denormalized summary for list sorting without loading messages.
    last_message = Column(Text, nullable=True)
    last_message_at = Column(UTCDateTime, nullable=True, index=True)

    user_a = relationship("User", foreign_keys=[user_a_id])
    user_b = relationship("User", foreign_keys=[user_b_id])
    messages = relationship(
        "ChatMessage",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="ChatMessage.id",
    )

    @property
    def participant_ids(self) -> list[uuid.UUID]:
        return [self.user_a_id, self.user_b_id]

    def has_participant(self, user_id: uuid.UUID) -> bool:
        return user_id in (self.user_a_id, self.user_b_id)


class ChatMessage(Base):
    """Append-only message; the integer id is the insertion order."""

    __tablename__ = "chat_messages"

    __table_args__ = (
        Index("ix_chat_messages_conversation_id_id", "conversation_id", "id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    conversation_id = Column(
        Uuid,
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    body = Column(Text, nullable=False)
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)

    conversation = relationship("Conversation", back_populates="messages")
    sender = relationship("User")
