# src/models/station.py

"""Station model for the aggregator-backed (per station) price view."""

from dataclasses import dataclass, field


@dataclass
class StationPrice:
    """A single fuel price reported by a station."""

    fuel_type_code: int
    price: float
    effective_date: str
    reliability: str
    name: str


@dataclass
class Station:
    """A fuel station with its latest price per fuel code."""

    company_id: str
    cuit: str
    brand: str
    address: str
    lat: str
    lon: str
    business_name: str
    locality: str
    prices: dict[int, StationPrice] = field(default_factory=dict)
    distance_km: float | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "idempresa": self.company_id,
            "cuit": self.cuit,
            "nombre": self.brand,
            "direccion": self.address,
            "lat": self.lat,
            "lon": self.lon,
            "razonSocial": self.business_name,
            "localidad": self.locality,
            "precios": {
                str(code): {
                    "tipoCombustible": p.fuel_type_code,
                    "precio": p.price,
                    "fechaVigencia": p.effective_date,
                    "confiabilidad": p.reliability,
                    "nombre": p.name,
                }
                for code, p in self.prices.items()
            },
            "distancia": self.distance_km,
        }
