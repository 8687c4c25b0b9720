"""Creation and allow-listed updates for plans and packages."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.exceptions import ForbiddenError, InvalidRequestError, NotFoundError
from app.models.roster import Package, Plan
from app.schemas.roster import PackageCreate, PlanCreate, PlanUpdate

logger = logging.getLogger(__name__)


class PlanService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_plan(self, plan_id: UUID) -> Optional[Plan]:
        return self.db.query(Plan).filter(Plan.id == plan_id).first()

    def create_plan(self, creator_id: UUID, data: PlanCreate) -> Plan:
        plan = Plan(user_id=creator_id, member_count=0, **data.model_dump())
        self.db.add(plan)
        self.db.commit()
        self.db.refresh(plan)
        return plan

    def update_plan(self, plan_id: UUID, acting_user_id: UUID, data: PlanUpdate) -> Plan:
        """
        Apply the fields set in ``data``. Only the creator may update, and
        ``max_buddies`` may not drop below the current number of buddies.
        """
        plan = self.get_plan(plan_id)
        if plan is None:
            raise NotFoundError("Plan not found")
        if plan.user_id != acting_user_id:
            raise ForbiddenError("Not authorized")

        update_data = data.model_dump(exclude_unset=True)
        new_max = update_data.pop("max_buddies", None)
        for key, value in update_data.items():
            setattr(plan, key, value)

        if new_max is not None:
            # Conditional on the stored count so a concurrent join cannot overfill.
            result = self.db.execute(
                update(Plan)
                .where(Plan.id == plan_id, Plan.member_count <= new_max)
                .values(max_buddies=new_max)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                raise InvalidRequestError(
                    "max_buddies cannot be lower than the current number of buddies"
                )

        self.db.commit()
        self.db.refresh(plan)
        return plan


class PackageService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_package(self, package_id: UUID) -> Optional[Package]:
        return self.db.query(Package).filter(Package.id == package_id).first()

    def create_package(self, creator_id: UUID, data: PackageCreate) -> Package:
        package = Package(user_id=creator_id, member_count=0, **data.model_dump())
        self.db.add(package)
        self.db.commit()
        self.db.refresh(package)
        return package
