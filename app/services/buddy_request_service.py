"""
Buddy request state machine: Pending -> Accepted | Rejected, terminal once resolved.

A (from, to, plan) triple can be requested once, whatever the outcome. The
resolve step is a compare-and-set on ``status`` so two concurrent decisions
cannot both apply. Accepting a plan-scoped request also tries to put the sender
on the plan's roster; a full roster or an existing membership does not undo
the acceptance.
"""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidRequestError,
    InvalidStateError,
    NotFoundError,
    RosterFullError,
)
from app.models.buddy_request import BuddyRequest, BuddyRequestStatus, plan_key_for
from app.models.roster import Plan
from app.models.user import User
from app.services.roster_service import PlanRosterService

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = (BuddyRequestStatus.ACCEPTED, BuddyRequestStatus.REJECTED)


class BuddyRequestService:
    def __init__(
        self, db: Session, plan_roster: Optional[PlanRosterService] = None
    ) -> None:
        self.db = db
        self.plan_roster = plan_roster or PlanRosterService(db)

    def get_request(self, request_id: UUID) -> Optional[BuddyRequest]:
        return self.db.query(BuddyRequest).filter(BuddyRequest.id == request_id).first()

    def find_request(
        self, from_user_id: UUID, to_user_id: UUID, plan_id: Optional[UUID] = None
    ) -> Optional[BuddyRequest]:
        return (
            self.db.query(BuddyRequest)
            .filter(
                BuddyRequest.from_user_id == from_user_id,
                BuddyRequest.to_user_id == to_user_id,
                BuddyRequest.plan_key == plan_key_for(plan_id),
            )
            .first()
        )

    def create_request(
        self,
        from_user_id: UUID,
        to_user_id: UUID,
        plan_id: Optional[UUID] = None,
        message: Optional[str] = None,
    ) -> BuddyRequest:
        """Create a Pending request. Raises InvalidRequest, NotFound or Conflict."""
        if from_user_id == to_user_id:
            raise InvalidRequestError("Cannot send request to yourself")
        if self.db.query(User).filter(User.id == to_user_id).first() is None:
            raise NotFoundError("User not found")
        if plan_id is not None:
            if self.db.query(Plan).filter(Plan.id == plan_id).first() is None:
                raise NotFoundError("Plan not found")

        if self.find_request(from_user_id, to_user_id, plan_id) is not None:
            raise ConflictError("Request already sent")

        request = BuddyRequest(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            plan_id=plan_id,
            plan_key=plan_key_for(plan_id),
            message=message.strip() if message else None,
            status=BuddyRequestStatus.PENDING.value,
        )
        self.db.add(request)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against an identical request.
            self.db.rollback()
            raise ConflictError("Request already sent")
        self.db.refresh(request)
        logger.info(
            "Buddy request %s created: %s -> %s (plan=%s)",
            request.id,
            from_user_id,
            to_user_id,
            plan_id,
        )
        return request

    def resolve_request(
        self,
        request_id: UUID,
        acting_user_id: UUID,
        decision: BuddyRequestStatus,
    ) -> BuddyRequest:
        """
        Move a Pending request to Accepted or Rejected.

        Raises:
            NotFoundError: unknown request.
            ForbiddenError: the actor is not the recipient.
            InvalidStateError: the request was already resolved.
        """
        decision = BuddyRequestStatus(decision)
        if decision not in TERMINAL_STATUSES:
            raise InvalidRequestError("Decision must be Accepted or Rejected")

        request = self.get_request(request_id)
        if request is None:
            raise NotFoundError("Request not found")
        if request.to_user_id != acting_user_id:
            raise ForbiddenError("Not authorized")

        result = self.db.execute(
            update(BuddyRequest)
            .where(
                BuddyRequest.id == request_id,
                BuddyRequest.status == BuddyRequestStatus.PENDING.value,
            )
            .values(status=decision.value)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            self.db.refresh(request)
            raise InvalidStateError(f"Request already {request.status}")
        self.db.commit()
        self.db.refresh(request)
        logger.info("Buddy request %s %s", request.id, decision.value)

        if decision == BuddyRequestStatus.ACCEPTED and request.plan_id is not None:
            self._add_sender_to_plan(request)
        return request

    def _add_sender_to_plan(self, request: BuddyRequest) -> None:
        try:
            self.plan_roster.join(request.plan_id, request.from_user_id)
        except (RosterFullError, ConflictError, NotFoundError) as e:
            logger.info(
                "Request %s accepted without roster change for plan %s: %s",
                request.id,
                request.plan_id,
                e.detail,
            )

    def list_for(self, user_id: UUID, direction: str = "both") -> List[BuddyRequest]:
        """Requests sent, received, or both, newest first."""
        query = self.db.query(BuddyRequest)
        if direction == "sent":
            query = query.filter(BuddyRequest.from_user_id == user_id)
        elif direction == "received":
            query = query.filter(BuddyRequest.to_user_id == user_id)
        elif direction == "both":
            query = query.filter(
                or_(
                    BuddyRequest.from_user_id == user_id,
                    BuddyRequest.to_user_id == user_id,
                )
            )
        else:
            raise InvalidRequestError("direction must be sent, received or both")
        return query.order_by(BuddyRequest.created_at.desc(), BuddyRequest.id).all()
