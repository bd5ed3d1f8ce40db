# src/services/station_service.py

"""Per-station price view built from the station aggregator.

For a zone centre every fuel code is fetched concurrently, stations are
merged by company id, unreliable (stale) prices are dropped and one
station per brand is returned, newest first.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from src.config.settings import Settings
from src.filters.brand_filter import normalise_brand
from src.models.price_record import parse_effective_date
from src.models.station import Station, StationPrice
from src.services.fuel_names import get_fuel_name
from src.services.geo import calculate_distance
from src.sources.surtidor_source import SurtidorSource

logger = logging.getLogger("naftas.stations")

RELIABILITY_HIGH = "high"
RELIABILITY_LIMITED = "limited"
RELIABILITY_LOW = "low"


def zone_center(zone: str | None) -> tuple[float, float]:
    """Coordinates for a zone name; unknown zones fall back to the default."""
    key = (zone or Settings.DEFAULT_ZONE).strip().lower()
    return Settings.ZONES.get(key, Settings.ZONES[Settings.DEFAULT_ZONE])


def reliability_level(
    effective_date: str, now: datetime | None = None,
) -> str:
    """Classify a price by age: high (<20 days), limited, low (>=75 days)."""
    if not effective_date:
        return RELIABILITY_LOW
    try:
        date = parse_effective_date(effective_date)
    except ValueError:
        return RELIABILITY_LOW
    age_days = ((now or datetime.now(timezone.utc)) - date).total_seconds() / 86400
    if age_days >= Settings.RELIABILITY_LOW_DAYS:
        return RELIABILITY_LOW
    if age_days >= Settings.RELIABILITY_LIMITED_DAYS:
        return RELIABILITY_LIMITED
    return RELIABILITY_HIGH


def _timestamp(date_str: str) -> float | None:
    try:
        return parse_effective_date(date_str).timestamp()
    except ValueError:
        return None


def _is_newer(candidate: str, current: str) -> bool:
    new_ts, old_ts = _timestamp(candidate), _timestamp(current)
    return new_ts is not None and old_ts is not None and new_ts > old_ts


def _positive_price(value: Any) -> float | None:
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if price > 0 else None


def merge_station_batches(
    batches: list[tuple[int, list[dict[str, Any]]]],
    now: datetime | None = None,
) -> list[Station]:
    """Merge per-fuel station listings into one Station per company id.

    Only positive prices are kept; for each fuel code the strictly newer
    effective date wins.
    """
    stations: dict[str, Station] = {}
    for fuel_code, rows in batches:
        for row in rows:
            company_id = str(row.get("idempresa", ""))
            station = stations.get(company_id)
            if station is None:
                station = Station(
                    company_id=company_id,
                    cuit=str(row.get("cuit", "")),
                    brand=str(row.get("empresabandera", "")),
                    address=str(row.get("direccion", "")),
                    lat=str(row.get("lat", "")),
                    lon=str(row.get("lon", "")),
                    business_name=str(row.get("razonsocial", "")),
                    locality=str(row.get("localidad", "")),
                )
                stations[company_id] = station

            prices = row.get("precios") or {}
            entry = prices.get(str(fuel_code)) or prices.get(fuel_code)
            if not isinstance(entry, dict):
                continue
            price = _positive_price(entry.get("precio"))
            if price is None:
                continue
            date = str(entry.get("fechavigencia") or "")

            current = station.prices.get(fuel_code)
            if current is None or _is_newer(date, current.effective_date):
                station.prices[fuel_code] = StationPrice(
                    fuel_type_code=fuel_code,
                    price=price,
                    effective_date=date,
                    reliability=reliability_level(date, now),
                    name=get_fuel_name(
                        fuel_code, normalise_brand(station.brand)
                    ),
                )
    return list(stations.values())


def keep_reliable_per_brand(stations: list[Station]) -> list[Station]:
    """Keep high-reliability prices and one station per brand.

    A station borrows high-reliability prices from other stations of the
    same brand when it lacks that fuel or the other price is newer.  The
    first station seen for each brand is kept.
    """
    filtered: list[Station] = []
    for station in stations:
        prices = {
            code: p
            for code, p in station.prices.items()
            if p.reliability == RELIABILITY_HIGH
        }
        for other in stations:
            if other.brand != station.brand or other is station:
                continue
            for code, p in other.prices.items():
                if p.reliability != RELIABILITY_HIGH:
                    continue
                current = prices.get(code)
                if current is None or _is_newer(
                    p.effective_date, current.effective_date
                ):
                    prices[code] = p
        filtered.append(
            Station(
                company_id=station.company_id,
                cuit=station.cuit,
                brand=station.brand,
                address=station.address,
                lat=station.lat,
                lon=station.lon,
                business_name=station.business_name,
                locality=station.locality,
                prices=prices,
            )
        )

    seen_brands: set[str] = set()
    unique: list[Station] = []
    for station in filtered:
        if station.brand not in seen_brands:
            seen_brands.add(station.brand)
            unique.append(station)
    return unique


def sort_stations(
    stations: list[Station], center: tuple[float, float],
) -> list[Station]:
    """Attach distances, then sort newest price first, nearest second."""
    for station in stations:
        try:
            station.distance_km = calculate_distance(
                float(station.lat), float(station.lon), *center
            )
        except ValueError:
            station.distance_km = None

    def sort_key(station: Station) -> tuple[float, float]:
        stamps = [
            ts
            for ts in (
                _timestamp(p.effective_date) for p in station.prices.values()
            )
            if ts is not None
        ]
        newest = max(stamps) if stamps else float("-inf")
        distance = (
            station.distance_km
            if station.distance_km is not None
            else float("inf")
        )
        return (-newest, distance)

    return sorted(stations, key=sort_key)


class StationService:
    """Fetches every fuel code concurrently for a zone."""

    def __init__(self, source: SurtidorSource | None = None) -> None:
        self.source = source or SurtidorSource()

    def close(self) -> None:
        self.source.close()

    async def _fetch_all(
        self, lat: float, lng: float,
    ) -> list[tuple[int, list[dict[str, Any]]]]:
        codes = Settings.SURTIDOR_FUEL_CODES

        async def fetch_one(code: int) -> tuple[int, list[dict[str, Any]]]:
            rows = await asyncio.to_thread(
                self.source.fetch_stations, code, lat, lng
            )
            return code, rows

        # A single failing fuel code fails the whole request
        return list(await asyncio.gather(*(fetch_one(c) for c in codes)))

    async def stations_for_zone(self, zone: str | None) -> list[Station]:
        """Best station per brand around the zone centre."""
        center = zone_center(zone)
        batches = await self._fetch_all(*center)
        merged = merge_station_batches(batches)
        stations = sort_stations(keep_reliable_per_brand(merged), center)
        logger.info(
            "Zone %s: %d stations merged, %d brands returned",
            zone or Settings.DEFAULT_ZONE,
            len(merged),
            len(stations),
        )
        return stations
