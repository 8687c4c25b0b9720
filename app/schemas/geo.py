"""Pydantic schemas for proximity query results."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.place import PLACE_TYPES
from app.schemas.user import UserRead


class NearbyUserRead(UserRead):
    distance: float = Field(..., description="Kilometres from the query point")


class PlaceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    type: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: str = Field(..., min_length=1, max_length=512)
    description: Optional[str] = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        if v not in PLACE_TYPES:
            raise ValueError(f"type must be one of {', '.join(PLACE_TYPES)}")
        return v


class PlaceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    type: str
    latitude: float
    longitude: float
    address: str
    description: Optional[str] = None


class NearbyPlaceRead(PlaceRead):
    distance: float = Field(..., description="Kilometres from the query point")
