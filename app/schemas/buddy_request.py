"""Pydantic schemas for buddy requests."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.buddy_request import BuddyRequestStatus
from app.schemas.user import UserSummary

RequestDirection = Literal["sent", "received", "both"]


class BuddyRequestCreate(BaseModel):
    to_user: UUID
    plan_id: Optional[UUID] = None
    message: Optional[str] = Field(None, max_length=1000)


class BuddyRequestResolve(BaseModel):
    """A decision is one of the terminal states; Pending is not accepted here."""

    status: Literal["Accepted", "Rejected"]


class BuddyRequestRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    from_user_id: UUID
    to_user_id: UUID
    plan_id: Optional[UUID] = None
    message: Optional[str] = None
    status: BuddyRequestStatus
    from_user: UserSummary
    to_user: UserSummary
    created_at: datetime
    updated_at: datetime
