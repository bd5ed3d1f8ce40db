# src/services/geo.py

"""Great-circle distance and nearest-candidate lookup."""

import math
from collections.abc import Iterable
from typing import Protocol, TypeVar

from src.models.price_record import Coordinate

EARTH_RADIUS_KM = 6371.0


class _Located(Protocol):
    @property
    def latitude(self) -> float | None: ...

    @property
    def longitude(self) -> float | None: ...


T = TypeVar("T", bound=_Located)


def calculate_distance(
    lat1: float, lon1: float, lat2: float, lon2: float,
) -> float:
    """Haversine distance in kilometres between two points."""
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


def find_nearest(
    target: Coordinate, candidates: Iterable[T],
) -> T | None:
    """Return the candidate closest to *target*.

    Candidates missing either coordinate are skipped.  The first
    candidate wins on equal distances.  Returns ``None`` when no
    candidate has usable coordinates.
    """
    nearest: T | None = None
    min_distance = math.inf

    for candidate in candidates:
        lat, lon = candidate.latitude, candidate.longitude
        if lat is None or lon is None:
            continue
        distance = calculate_distance(
            target.latitude, target.longitude, lat, lon
        )
        if distance < min_distance:
            min_distance = distance
            nearest = candidate

    return nearest
