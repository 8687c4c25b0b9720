"""Pydantic schemas for conversations and their messages."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.user import UserSummary

MESSAGE_MAX_LENGTH = 4000


class MessageCreate(BaseModel):
    """Body of ``POST /chat/{conversation_id}/message``."""

    message: str = Field(..., min_length=1, max_length=MESSAGE_MAX_LENGTH)

    @field_validator("message")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v


class MessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    conversation_id: UUID
    sender_id: UUID
    body: str
    created_at: datetime


class ConversationRead(BaseModel):
    """Conversation without its message log (list views)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    participant_ids: list[UUID]
    user_a: UserSummary
    user_b: UserSummary
    last_message: Optional[str] = None
    last_message_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ConversationDetail(ConversationRead):
    """Conversation with its full message log, oldest first."""

    messages: list[MessageRead] = []
