# src/api/routes.py

"""HTTP endpoints consumed by the front end."""

import asyncio
import logging
from collections.abc import Iterator
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, StrictFloat, StrictInt

from src.config.settings import Settings
from src.errors import NotFoundError, ValidationError
from src.services.health_checker import HealthChecker
from src.services.location_service import LocationService, parse_coordinates
from src.services.price_service import PriceService, load_price_source
from src.services.station_service import StationService
from src.sources.base_source import PriceSource
from src.sources.city_directory import CityDirectory
from src.sources.increases_client import IncreasesClient

logger = logging.getLogger("naftas.api")

router = APIRouter(prefix="/api")

# Process-wide: the city file is read once, predictions are cached
_city_directory = CityDirectory()
_increases_client: IncreasesClient | None = None


# ── Request bodies ───────────────────────────────────────


class LocationBody(BaseModel):
    """``POST /api/location`` body. Numeric strings are rejected."""

    lat: StrictFloat | StrictInt
    long: StrictFloat | StrictInt


class PrecioBaseBody(BaseModel):
    ciudad: str | None = None
    zona: str | None = None


# ── Dependencies ─────────────────────────────────────────


def get_price_source(request: Request) -> Iterator[PriceSource]:
    source = load_price_source(request.app.state.price_source_id)
    try:
        yield source
    finally:
        source.close()


def get_price_service(request: Request) -> Iterator[PriceService]:
    # The source is only loaded when a city is requested
    service = PriceService(source_id=request.app.state.price_source_id)
    try:
        yield service
    finally:
        service.close()


def get_location_service(
    source: PriceSource = Depends(get_price_source),
) -> LocationService:
    return LocationService(source)


def get_station_service() -> Iterator[StationService]:
    service = StationService()
    try:
        yield service
    finally:
        service.close()


def get_city_directory() -> CityDirectory:
    return _city_directory


def get_increases_client() -> IncreasesClient:
    global _increases_client
    if _increases_client is None:
        _increases_client = IncreasesClient()
    return _increases_client


def close_increases_client() -> None:
    """Drop the shared predictions client and its session."""
    global _increases_client
    if _increases_client is not None:
        _increases_client.close()
        _increases_client = None


# ── /api/location ────────────────────────────────────────


@router.get("/location")
async def location_from_query(
    lat: str | None = Query(None),
    long: str | None = Query(None),
    service: LocationService = Depends(get_location_service),
) -> dict[str, str]:
    """Nearest locality to ``?lat=&long=``."""
    target = parse_coordinates(lat, long)
    zone = await asyncio.to_thread(service.resolve_zone, target)
    return {"zone": zone}


@router.post("/location")
async def location_from_body(
    body: LocationBody,
    service: LocationService = Depends(get_location_service),
) -> dict[str, str]:
    """Nearest locality to a JSON body ``{"lat": n, "long": n}``."""
    target = parse_coordinates(body.lat, body.long)
    zone = await asyncio.to_thread(service.resolve_zone, target)
    return {"zone": zone}


# ── /api/precio-base ─────────────────────────────────────


async def _precio_base(
    ciudad: str | None,
    zona: str | None,
    prices: PriceService,
    stations: StationService,
) -> Any:
    if ciudad is not None:
        localities = await asyncio.to_thread(
            prices.prices_for_locality, ciudad
        )
        return {name: loc.to_dict() for name, loc in localities.items()}
    result = await stations.stations_for_zone(zona)
    return [station.to_dict() for station in result]


@router.get("/precio-base")
async def precio_base_from_query(
    ciudad: str | None = Query(None),
    zona: str | None = Query(None),
    prices: PriceService = Depends(get_price_service),
    stations: StationService = Depends(get_station_service),
) -> Any:
    """Locality price mapping (``?ciudad=``) or zone stations (``?zona=``)."""
    return await _precio_base(ciudad, zona, prices, stations)


@router.post("/precio-base")
async def precio_base_from_body(
    body: PrecioBaseBody | None = Body(None),
    ciudad: str | None = Query(None),
    zona: str | None = Query(None),
    prices: PriceService = Depends(get_price_service),
    stations: StationService = Depends(get_station_service),
) -> Any:
    """Same as GET; ``ciudad``/``zona`` may also come in a JSON body."""
    if body is not None:
        ciudad = ciudad if ciudad is not None else body.ciudad
        zona = zona if zona is not None else body.zona
    return await _precio_base(ciudad, zona, prices, stations)


# ── /api/search ──────────────────────────────────────────


@router.get("/search")
async def search_cities(
    q: str = Query(""),
    directory: CityDirectory = Depends(get_city_directory),
) -> dict[str, list[dict[str, object]]]:
    """Cities whose name contains ``q``."""
    query = q.strip()
    if len(query) < Settings.MIN_SEARCH_LENGTH:
        raise ValidationError(
            f"Query must be at least {Settings.MIN_SEARCH_LENGTH} characters"
        )
    cities = directory.search(query)
    logger.debug("City search '%s': %d matches", query, len(cities))
    if not cities:
        raise NotFoundError("No cities match the search")
    return {"cities": [city.to_dict() for city in cities]}


# ── /api/increases ───────────────────────────────────────


@router.get("/increases")
async def increases(
    client: IncreasesClient = Depends(get_increases_client),
) -> JSONResponse:
    """Pass-through of the price-increase predictions."""
    data = await asyncio.to_thread(client.fetch)
    return JSONResponse(
        content=data,
        headers={
            "Cache-Control": (
                f"public, s-maxage={Settings.INCREASES_REVALIDATE}"
            )
        },
    )


# ── /api/health ──────────────────────────────────────────


@router.get("/health")
async def health() -> dict[str, list[dict[str, object]]]:
    """Connectivity of every upstream."""
    results = await HealthChecker().check_all()
    return {"sources": [r.to_dict() for r in results]}
