"""
Roster capacity manager shared by plans (capped by ``max_buddies``) and
packages (uncapped).

Join and leave are single transactions keyed on stored state: capacity is a
compare-and-set on ``member_count`` and duplicate membership is caught by the
member table's unique constraint, so two users racing for the last seat
cannot both get it.
"""

from __future__ import annotations

import logging
from typing import ClassVar, Generic, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    NotMemberError,
    RosterFullError,
)
from app.models.roster import Package, PackageParticipant, Plan, PlanBuddy

logger = logging.getLogger(__name__)

OwnerT = TypeVar("OwnerT", Plan, Package)


class RosterService(Generic[OwnerT]):
    owner_model: ClassVar[Type]
    member_model: ClassVar[Type]
    owner_fk: ClassVar[str]
    capacity_column: ClassVar[Optional[str]] = None
    label: ClassVar[str]

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_owner(self, roster_id: UUID) -> Optional[OwnerT]:
        return (
            self.db.query(self.owner_model)
            .filter(self.owner_model.id == roster_id)
            .first()
        )

    def _require_owner(self, roster_id: UUID) -> OwnerT:
        owner = self.get_owner(roster_id)
        if owner is None:
            raise NotFoundError(f"{self.label.capitalize()} not found")
        return owner

    def _member_filter(self, roster_id: UUID, user_id: UUID):
        return (
            getattr(self.member_model, self.owner_fk) == roster_id,
            self.member_model.user_id == user_id,
        )

    def is_member(self, roster_id: UUID, user_id: UUID) -> bool:
        return (
            self.db.query(self.member_model)
            .filter(*self._member_filter(roster_id, user_id))
            .first()
            is not None
        )

    def member_ids(self, roster_id: UUID) -> List[UUID]:
        rows = (
            self.db.query(self.member_model.user_id)
            .filter(getattr(self.member_model, self.owner_fk) == roster_id)
            .order_by(self.member_model.joined_at)
            .all()
        )
        return [row.user_id for row in rows]

    def join(self, roster_id: UUID, user_id: UUID) -> OwnerT:
        """
        Add ``user_id`` to the roster.

        Raises NotFoundError for an unknown roster, ConflictError for the creator
        or an existing member, RosterFullError when the capacity is reached.
        """
        owner = self._require_owner(roster_id)
        if owner.user_id == user_id:
            raise ConflictError(f"You created this {self.label}.")
        if self.is_member(roster_id, user_id):
            raise ConflictError(f"You already joined this {self.label}.")

        model = self.owner_model
        stmt = update(model).where(model.id == roster_id)
        if self.capacity_column is not None:
            stmt = stmt.where(model.member_count < getattr(model, self.capacity_column))
        result = self.db.execute(
            stmt.values(member_count=model.member_count + 1).execution_options(
                synchronize_session=False
            )
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise RosterFullError(f"{self.label.capitalize()} is full.")

        self.db.add(self.member_model(**{self.owner_fk: roster_id, "user_id": user_id}))
        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent join by the same user; the count bump rolls back with it.
            self.db.rollback()
            raise ConflictError(f"You already joined this {self.label}.")

        self.db.refresh(owner)
        logger.info("User %s joined %s %s", user_id, self.label, roster_id)
        return owner

    def leave(self, roster_id: UUID, user_id: UUID) -> OwnerT:
        """
        Remove ``user_id`` from the roster.

        Raises NotFoundError for an unknown roster, ForbiddenError for the
        creator, NotMemberError when the user is not on the roster.
        """
        owner = self._require_owner(roster_id)
        if owner.user_id == user_id:
            raise ForbiddenError(f"Creators cannot leave their own {self.label}.")

        result = self.db.execute(
            delete(self.member_model)
            .where(*self._member_filter(roster_id, user_id))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise NotMemberError(f"You are not part of this {self.label}.")

        model = self.owner_model
        self.db.execute(
            update(model)
            .where(model.id == roster_id)
            .values(member_count=model.member_count - 1)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        self.db.refresh(owner)
        logger.info("User %s left %s %s", user_id, self.label, roster_id)
        return owner


class PlanRosterService(RosterService[Plan]):
    owner_model = Plan
    member_model = PlanBuddy
    owner_fk = "plan_id"
    capacity_column = "max_buddies"
    label = "plan"


class PackageRosterService(RosterService[Package]):
    owner_model = Package
    member_model = PackageParticipant
    owner_fk = "package_id"
    label = "package"
