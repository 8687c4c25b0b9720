"""Buddies API: buddy requests and nearby buddy discovery."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.proximity import GeoPoint
from app.db import get_db
from app.models.buddy_request import BuddyRequestStatus
from app.models.user import User
from app.routers.utils.dependencies import get_current_user
from app.schemas.buddy_request import (
    BuddyRequestCreate,
    BuddyRequestRead,
    BuddyRequestResolve,
    RequestDirection,
)
from app.schemas.geo import NearbyUserRead
from app.schemas.user import UserRead
from app.services.buddy_request_service import BuddyRequestService
from app.services.discovery_service import DiscoveryService

router = APIRouter(
    prefix="/buddies",
    tags=["buddies"],
    responses={404: {"description": "Not found"}},
)


@router.post("/requests", response_model=BuddyRequestRead, status_code=201)
def create_buddy_request(
    data: BuddyRequestCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> BuddyRequestRead:
    """Send a buddy request, optionally scoped to a plan."""
    svc = BuddyRequestService(db)
    return svc.create_request(
        current_user.id,
        data.to_user,
        plan_id=data.plan_id,
        message=data.message,
    )


@router.get("/requests", response_model=List[BuddyRequestRead])
def list_buddy_requests(
    direction: RequestDirection = Query("both", alias="type"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[BuddyRequestRead]:
    """List requests the caller sent, received, or both; newest first."""
    svc = BuddyRequestService(db)
    return svc.list_for(current_user.id, direction)


@router.put("/requests/{request_id}", response_model=BuddyRequestRead)
def resolve_buddy_request(
    request_id: UUID,
    data: BuddyRequestResolve,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> BuddyRequestRead:
    """Accept or reject a pending request addressed to the caller."""
    svc = BuddyRequestService(db)
    return svc.resolve_request(
        request_id, current_user.id, BuddyRequestStatus(data.status)
    )


@router.get("/nearby", response_model=List[NearbyUserRead])
def find_nearby_buddies(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    max_distance: Optional[float] = Query(None, ge=0, alias="maxDistance"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[NearbyUserRead]:
    """Users within ``maxDistance`` km of the given point, nearest first."""
    svc = DiscoveryService(db)
    found = svc.nearby_buddies(
        current_user.id,
        GeoPoint(latitude, longitude),
        max_distance_km=max_distance,
    )
    return [
        NearbyUserRead(
            **UserRead.model_validate(n.item).model_dump(), distance=n.distance
        )
        for n in found
    ]
