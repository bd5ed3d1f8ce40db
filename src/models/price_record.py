# src/models/price_record.py

"""Raw price record model shared by every data source."""

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any
from zoneinfo import ZoneInfo

from src.config.settings import Settings

_DATASET_TZ = ZoneInfo(Settings.DATASET_TIMEZONE)


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


def parse_effective_date(value: Any) -> datetime:
    """Parse a dataset date (``2024-02-01`` or ``2024-02-01 10:30:00``).

    The feeds publish Argentine local times without an offset, so naive
    values get the dataset time zone.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value or "").strip()
        if not text:
            raise ValueError("empty effective date")
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=_DATASET_TZ)
    return parsed


def parse_coordinate(value: Any) -> float | None:
    """Return a finite float, or None for blank/invalid values."""
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _parse_price(value: Any) -> Decimal:
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"invalid price: {value!r}") from exc
    if not price.is_finite():
        raise ValueError(f"invalid price: {value!r}")
    return price


@dataclass(frozen=True)
class PriceRecord:
    """One price observation for a fuel product at a station."""

    locality: str
    brand: str
    fuel_type_code: int
    price: Decimal
    effective_date: datetime
    latitude: float | None = None
    longitude: float | None = None
    province: str = ""
    address: str = ""
    company: str = ""

    @property
    def coordinate(self) -> Coordinate | None:
        """The station position, when both coordinates are known."""
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(self.latitude, self.longitude)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "PriceRecord":
        """Build a record from a dataset row (JSON API or CSV).

        Both feeds share the dataset column names (``localidad``,
        ``empresabandera``, ``idproducto``, ``precio``,
        ``fecha_vigencia``, ``latitud``, ``longitud``).

        Raises ``ValueError`` when a required field cannot be parsed.
        """
        try:
            code = int(str(row["idproducto"]).strip())
        except (KeyError, ValueError) as exc:
            raise ValueError(
                f"invalid fuel type code: {row.get('idproducto')!r}"
            ) from exc

        locality = str(row.get("localidad") or "").strip()
        if not locality:
            raise ValueError("missing locality")

        return cls(
            locality=locality,
            brand=str(row.get("empresabandera") or "").strip(),
            fuel_type_code=code,
            price=_parse_price(row.get("precio")),
            effective_date=parse_effective_date(row.get("fecha_vigencia")),
            latitude=parse_coordinate(row.get("latitud")),
            longitude=parse_coordinate(row.get("longitud")),
            province=str(row.get("provincia") or "").strip(),
            address=str(row.get("direccion") or "").strip(),
            company=str(row.get("empresa") or "").strip(),
        )
