"""Pydantic schemas for users as the core exposes them."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserSummary(BaseModel):
    """Public view of a user embedded in chats and requests."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    is_online: bool = False


class UserRead(UserSummary):
    university: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
