"""User model: identity and location owned by the profile subsystem.

The core only reads users by id (display name, coordinates for proximity).
"""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, Float, String, Uuid

from app.db import Base
from app.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(256), nullable=False)
    email = Column(String(320), unique=True, nullable=False, index=True)
    university = Column(String(256), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    is_online = Column(Boolean, nullable=False, default=False)
