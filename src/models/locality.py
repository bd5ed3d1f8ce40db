# src/models/locality.py

"""Aggregated per-locality price model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from src.models.price_record import Coordinate


@dataclass
class FuelPrice:
    """The retained (most recent) price for one brand and fuel."""

    price: Decimal
    effective_date: datetime
    fuel_type_code: int
    fuel_name: str

    def to_dict(self) -> dict[str, object]:
        return {
            "precio": float(self.price),
            "fecha_vigencia": self.effective_date.isoformat(),
            "nombre_combustible": self.fuel_name,
            "tipo_combustible": self.fuel_type_code,
        }


@dataclass
class AggregatedLocality:
    """Prices of one locality grouped by brand, then by fuel name."""

    coordinates: Coordinate | None = None
    brands: dict[str, dict[str, FuelPrice]] = field(default_factory=dict)
    scores: dict[str, float] = field(default_factory=dict)

    def fuel_prices(self) -> list[FuelPrice]:
        """Every retained price across all brands."""
        return [
            fuel
            for fuels in self.brands.values()
            for fuel in fuels.values()
        ]

    def to_dict(self) -> dict[str, object]:
        coords = (
            {
                "latitud": self.coordinates.latitude,
                "longitud": self.coordinates.longitude,
            }
            if self.coordinates is not None
            else None
        )
        payload: dict[str, object] = {
            "coordenadas": coords,
            "empresas": {
                brand: {
                    name: fuel.to_dict() for name, fuel in fuels.items()
                }
                for brand, fuels in self.brands.items()
            },
        }
        if self.scores:
            payload["indicadores"] = {
                brand: round(score, 2)
                for brand, score in self.scores.items()
            }
        return payload
