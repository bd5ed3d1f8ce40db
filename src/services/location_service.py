# src/services/location_service.py

"""Resolve a coordinate to the nearest locality with a station."""

import logging
import math
from typing import Any

from src.config.settings import Settings
from src.errors import NotFoundError, ValidationError
from src.models.price_record import Coordinate
from src.services.geo import find_nearest
from src.services.price_service import load_price_source
from src.sources.base_source import PriceSource

logger = logging.getLogger("naftas.location")

_INVALID_COORDS = (
    "Parameters 'lat' and 'long' are required and must be valid numbers"
)


def parse_coordinates(lat: Any, lon: Any) -> Coordinate:
    """Validate raw lat/long values (strings or numbers).

    Raises ``ValidationError`` for missing, non-numeric, non-finite or
    out-of-range values.
    """
    if isinstance(lat, bool) or isinstance(lon, bool):
        raise ValidationError(_INVALID_COORDS)
    try:
        latitude = float(lat)
        longitude = float(lon)
    except (TypeError, ValueError) as exc:
        raise ValidationError(_INVALID_COORDS) from exc
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise ValidationError(_INVALID_COORDS)
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        raise ValidationError(_INVALID_COORDS)
    return Coordinate(latitude, longitude)


class LocationService:
    """Nearest-locality lookup over one brand's station records."""

    def __init__(self, source: PriceSource | None = None) -> None:
        self.source = source or load_price_source()

    def resolve_zone(self, target: Coordinate) -> str:
        """Locality of the station closest to *target*."""
        records = self.source.fetch_raw_records(
            brand=Settings.LOCATION_BRAND
        )
        nearest = find_nearest(target, records)
        if nearest is None:
            logger.warning(
                "No station with coordinates among %d records", len(records)
            )
            raise NotFoundError("No nearby station found")
        logger.info(
            "Nearest locality to (%.4f, %.4f) is %s",
            target.latitude,
            target.longitude,
            nearest.locality,
        )
        return nearest.locality
