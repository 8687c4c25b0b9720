"""Chat API: list conversations, get-or-create with a user, history, send."""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi_pagination import Page, Params
from fastapi_pagination.ext.sqlalchemy import paginate
from sqlalchemy.orm import Session

from app.commands.send_chat_message_command import SendChatMessageCommand
from app.db import get_db
from app.models.user import User
from app.routers.utils.dependencies import get_current_user, get_user_by_id
from app.schemas.chat import (
    ConversationDetail,
    ConversationRead,
    MessageCreate,
    MessageRead,
)
from app.services.conversation_service import ConversationService

router = APIRouter(
    prefix="/chat",
    tags=["chat"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[ConversationRead])
def list_conversations(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[ConversationRead]:
    """List the caller's conversations, most recently active first."""
    svc = ConversationService(db)
    return svc.list_for_user(current_user.id)


@router.get("/{user_id}", response_model=ConversationDetail)
def get_or_create_conversation(
    other: User = Depends(get_user_by_id),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ConversationDetail:
    """Get the conversation with another user, creating it on first contact."""
    svc = ConversationService(db)
    return svc.get_or_create(current_user.id, other.id)


@router.get("/{conversation_id}/messages", response_model=Page[MessageRead])
def list_messages(
    conversation_id: UUID,
    params: Params = Depends(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Page[MessageRead]:
    """Message history in insertion order; clients refetch this after reconnecting."""
    svc = ConversationService(db)
    svc.get_conversation_for_participant(conversation_id, current_user.id)
    return paginate(svc.get_messages_query(conversation_id), params=params)


@router.post(
    "/{conversation_id}/message",
    response_model=MessageRead,
    status_code=201,
)
def send_message(
    conversation_id: UUID,
    data: MessageCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageRead:
    """Store a message and broadcast it to the conversation's room."""
    command = SendChatMessageCommand(db)
    return command.execute(conversation_id, current_user, data.message)
