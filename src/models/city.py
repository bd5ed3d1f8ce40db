# src/models/city.py

"""City entry from the bundled city list."""

from dataclasses import dataclass


@dataclass
class City:
    """A searchable city, optionally with coordinates."""

    name: str
    latitude: float | None = None
    longitude: float | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"nombre": self.name}
        if self.latitude is not None:
            data["latitud"] = self.latitude
        if self.longitude is not None:
            data["longitud"] = self.longitude
        return data
