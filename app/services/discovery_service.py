"""Nearby buddy and place discovery on top of the proximity index."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.proximity import GeoPoint, Nearby, find_within
from app.models.place import Place
from app.models.user import User
from app.schemas.geo import PlaceCreate
from app.services.user_service import UserService


class DiscoveryService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.settings = get_settings()

    def nearby_buddies(
        self,
        user_id: UUID,
        origin: GeoPoint,
        max_distance_km: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> List[Nearby[User]]:
        """Other users with a location within the radius, nearest first."""
        candidates = UserService(self.db).get_users_with_location()
        return find_within(
            origin,
            candidates,
            self.settings.buddy_search_radius_km
            if max_distance_km is None
            else max_distance_km,
            limit=self.settings.buddy_search_limit if limit is None else limit,
            exclude_id=user_id,
        )

    def nearby_places(
        self,
        origin: GeoPoint,
        max_distance_km: Optional[float] = None,
        place_type: Optional[str] = None,
    ) -> List[Nearby[Place]]:
        query = self.db.query(Place)
        if place_type:
            query = query.filter(Place.type == place_type)
        candidates = query.order_by(Place.created_at, Place.id).all()
        return find_within(
            origin,
            candidates,
            self.settings.place_search_radius_km
            if max_distance_km is None
            else max_distance_km,
        )

    def create_place(self, added_by_id: UUID, data: PlaceCreate) -> Place:
        place = Place(added_by_id=added_by_id, **data.model_dump())
        self.db.add(place)
        self.db.commit()
        self.db.refresh(place)
        return place
