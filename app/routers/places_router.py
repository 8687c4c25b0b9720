"""Places API: add a place and find places near a point."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.proximity import GeoPoint
from app.db import get_db
from app.models.user import User
from app.routers.utils.dependencies import get_current_user
from app.schemas.geo import NearbyPlaceRead, PlaceCreate, PlaceRead
from app.services.discovery_service import DiscoveryService

router = APIRouter(prefix="/places", tags=["places"])


@router.post("", response_model=PlaceRead, status_code=201)
def create_place(
    data: PlaceCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PlaceRead:
    return DiscoveryService(db).create_place(current_user.id, data)


@router.get("/nearby", response_model=List[NearbyPlaceRead])
def find_nearby_places(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    max_distance: Optional[float] = Query(None, ge=0, alias="maxDistance"),
    place_type: Optional[str] = Query(None, alias="type"),
    _current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[NearbyPlaceRead]:
    """Places within ``maxDistance`` km (default 10), nearest first."""
    found = DiscoveryService(db).nearby_places(
        GeoPoint(latitude, longitude),
        max_distance_km=max_distance,
        place_type=place_type,
    )
    return [
        NearbyPlaceRead(
            **PlaceRead.model_validate(n.item).model_dump(), distance=n.distance
        )
        for n in found
    ]
