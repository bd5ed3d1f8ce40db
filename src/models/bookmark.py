# src/models/bookmark.py

"""Saved fuel price (bookmark) model."""

from dataclasses import asdict, dataclass, field
from typing import Any


def bookmark_id(brand: str, fuel_type: str, city: str) -> str:
    """Derive the stable bookmark id from brand, fuel type and city."""
    return "|".join(
        part.strip().lower() for part in (brand, fuel_type, city)
    )


@dataclass
class Bookmark:
    """A price the user saved, optionally with a fill-up estimate."""

    brand: str
    fuel_type: str
    price: float
    date: str
    city: str
    liters: float | None = None
    total: float | None = None
    id: str = field(default="")

    def __post_init__(self) -> None:
        if not self.id:
            self.id = bookmark_id(self.brand, self.fuel_type, self.city)
        if self.liters is not None and self.total is None:
            self.total = round(self.liters * self.price, 2)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Bookmark":
        return cls(
            brand=str(data["brand"]),
            fuel_type=str(data["fuel_type"]),
            price=float(data["price"]),
            date=str(data["date"]),
            city=str(data["city"]),
            liters=data.get("liters"),
            total=data.get("total"),
            id=str(data.get("id") or ""),
        )
