"""
Radius-bounded, distance-sorted search over geo-tagged entities.

Pure functions over a candidate snapshot supplied by the caller; nothing here
touches the database.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Optional, TypeVar

EARTH_RADIUS_KM = 6371.0

T = TypeVar("T")


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Nearby(Generic[T]):
    """A candidate plus its query-time distance from the origin, in km."""

    item: T
    distance: float


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points given in decimal degrees."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def _coordinates(candidate: Any) -> Optional[GeoPoint]:
    lat = getattr(candidate, "latitude", None)
    lon = getattr(candidate, "longitude", None)
    if lat is None or lon is None:
        return None
    return GeoPoint(float(lat), float(lon))


def find_within(
    origin: GeoPoint,
    candidates: Iterable[T],
    max_distance_km: float,
    limit: Optional[int] = None,
    exclude_id: Any = None,
) -> list[Nearby[T]]:
    """
    Return the candidates within ``max_distance_km`` of ``origin``, nearest first.

    Candidates without coordinates are skipped, as is the candidate whose ``id``
    equals ``exclude_id`` (the querying entity itself). Ties keep input order.
    ``limit`` caps the result after sorting.
    """
    if max_distance_km < 0:
        raise ValueError("max_distance_km must not be negative")

    found: list[Nearby[T]] = []
    for candidate in candidates:
        if exclude_id is not None and getattr(candidate, "id", None) == exclude_id:
            continue
        point = _coordinates(candidate)
        if point is None:
            continue
        distance = haversine_km(
            origin.latitude, origin.longitude, point.latitude, point.longitude
        )
        if distance <= max_distance_km:
            found.append(Nearby(item=candidate, distance=distance))

    # sorted() is stable, so equal distances keep their input order.
    found = sorted(found, key=lambda n: n.distance)
    if limit is not None:
        found = found[: max(limit, 0)]
    return found
