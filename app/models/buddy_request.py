"""
BuddyRequest model: a directed connection proposal, optionally scoped to a plan.

``plan_key`` mirrors ``plan_id`` with the "no plan" context stored as an empty
string, so the (from, to, plan) uniqueness also covers requests without a plan
(NULLs never collide in a SQL unique constraint).
"""

from __future__ import annotations

import uuid
from enum import Enum

from sqlalchemy import Column, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import TimestampMixin

NO_PLAN_KEY = ""


class BuddyRequestStatus(str, Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


def plan_key_for(plan_id: uuid.UUID | None) -> str:
    return str(plan_id) if plan_id is not None else NO_PLAN_KEY


class BuddyRequest(Base, TimestampMixin):
    __tablename__ = "buddy_requests"

    __table_args__ = (
        UniqueConstraint(
            "from_user_id",
            "to_user_id",
            "plan_key",
            name="uq_buddy_requests_from_to_plan",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    from_user_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    to_user_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    plan_id = Column(
        Uuid, ForeignKey("plans.id", ondelete="SET NULL"), nullable=True
    )
    plan_key = Column(String(64), nullable=False, default=NO_PLAN_KEY)
    message = Column(Text, nullable=True)
    status = Column(
        String(16), nullable=False, default=BuddyRequestStatus.PENDING.value
    )

    from_user = relationship("User", foreign_keys=[from_user_id])
    to_user = relationship("User", foreign_keys=[to_user_id])
    plan = relationship("Plan")
