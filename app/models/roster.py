"""Plans and packages with their participant rosters.

The creator (``user_id``) is an implicit member and never appears in the member
tables. ``member_count`` mirrors the member rows and is the value capacity
checks compare-and-set against.
"""

from __future__ import annotations

import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import TimestampMixin, UTCDateTime, utcnow


class Plan(Base, TimestampMixin):
    __tablename__ = "plans"

    __table_args__ = (
        CheckConstraint("max_buddies >= 1", name="ck_plans_max_buddies_positive"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    destination = Column(String(256), nullable=False)
    max_buddies = Column(Integer, nullable=False, default=1)
    member_count = Column(Integer, nullable=False, default=0)

    creator = relationship("User")
    members = relationship(
        "PlanBuddy",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="PlanBuddy.joined_at",
    )


class PlanBuddy(Base):
    __tablename__ = "plan_buddies"

    __table_args__ = (
        UniqueConstraint("plan_id", "user_id", name="uq_plan_buddies_plan_user"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    plan_id = Column(
        Uuid, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    joined_at = Column(UTCDateTime, default=utcnow, nullable=False)

    plan = relationship("Plan", back_populates="members")


class Package(Base, TimestampMixin):
    __tablename__ = "packages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    destination = Column(String(256), nullable=False)
    member_count = Column(Integer, nullable=False, default=0)

    creator = relationship("User")
    members = relationship(
        "PackageParticipant",
        back_populates="package",
        cascade="all, delete-orphan",
        order_by="PackageParticipant.joined_at",
    )


class PackageParticipant(Base):
    __tablename__ = "package_participants"

    __table_args__ = (
        UniqueConstraint(
            "package_id", "user_id", name="uq_package_participants_package_user"
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    package_id = Column(
        Uuid,
        ForeignKey("packages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    joined_at = Column(UTCDateTime, default=utcnow, nullable=False)

    package = relationship("Package", back_populates="members")
