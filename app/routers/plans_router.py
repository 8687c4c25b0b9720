"""Plans API: create, read, allow-listed update, and roster join/leave."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.user import User
from app.routers.utils.dependencies import get_current_user
from app.schemas.roster import PlanCreate, PlanRead, PlanUpdate
from app.services.plan_service import PlanService
from app.services.roster_service import PlanRosterService

router = APIRouter(
    prefix="/plans",
    tags=["plans"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=PlanRead, status_code=201)
def create_plan(
    data: PlanCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PlanRead:
    """Create a plan owned by the caller."""
    return PlanService(db).create_plan(current_user.id, data)


@router.get("/{plan_id}", response_model=PlanRead)
def get_plan(
    plan_id: UUID,
    _current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PlanRead:
    """Get a plan with its roster."""
    plan = PlanService(db).get_plan(plan_id)
    if plan is None:
        raise HTTPException(status_code=404, detail="Plan not found")
    return plan


@router.patch("/{plan_id}", response_model=PlanRead)
def update_plan(
    plan_id: UUID,
    data: PlanUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PlanRead:
    """Update allow-listed plan fields. Creator only."""
    return PlanService(db).update_plan(plan_id, current_user.id, data)


@router.post("/{plan_id}/join", response_model=PlanRead)
def join_plan(
    plan_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PlanRead:
    """Join a plan's roster."""
    return PlanRosterService(db).join(plan_id, current_user.id)


@router.delete("/{plan_id}/join", response_model=PlanRead)
def leave_plan(
    plan_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PlanRead:
    """Leave a plan's roster. The creator cannot leave."""
    return PlanRosterService(db).leave(plan_id, current_user.id)
