"""Place model: a geo-tagged point of interest for nearby place discovery."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, Float, ForeignKey, String, Text, Uuid

from app.db import Base
from app.models.mixins import TimestampMixin

PLACE_TYPES = ("Lodge", "Restaurant", "Tourist Spot", "Other")


class Place(Base, TimestampMixin):
    __tablename__ = "places"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(256), nullable=False)
    type = Column(String(32), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String(512), nullable=False)
    description = Column(Text, nullable=True)
    added_by_id = Column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
