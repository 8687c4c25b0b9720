"""Pydantic schemas for plans and packages (roster-facing fields only)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PlanCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=256)
    description: Optional[str] = None
    destination: str = Field(..., min_length=1, max_length=256)
    max_buddies: int = Field(1, ge=1)


class PlanUpdate(BaseModel):
    """Allow-listed plan fields; anything else in the body is a 422."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1, max_length=256)
    description: Optional[str] = None
    destination: Optional[str] = Field(None, min_length=1, max_length=256)
    max_buddies: Optional[int] = Field(None, ge=1)

    @field_validator("title", "destination", "max_buddies")
    @classmethod
    def reject_null(cls, v):
        # Omit a field to leave it unchanged; these columns cannot be cleared.
        if v is None:
            raise ValueError("must not be null")
        return v


class PackageCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=256)
    description: Optional[str] = None
    destination: str = Field(..., min_length=1, max_length=256)


class RosterMemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    joined_at: datetime


class RosterRead(BaseModel):
    """Fields shared by plan and package responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: Optional[str] = None
    destination: str
    member_count: int
    members: list[RosterMemberRead] = []
    created_at: datetime
    updated_at: datetime


class PlanRead(RosterRead):
    max_buddies: int


class PackageRead(RosterRead):
    pass
