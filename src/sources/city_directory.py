# src/sources/city_directory.py

"""Search over the bundled static city list."""

import json
import logging
import unicodedata
from pathlib import Path

from src.config.settings import Settings
from src.errors import DataSourceError
from src.models.city import City
from src.models.price_record import parse_coordinate

logger = logging.getLogger("naftas.sources.cities")


def fold_text(text: str) -> str:
    """Lower-case and strip accents so ``Junín`` matches ``junin``."""
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


class CityDirectory:
    """Loads ``cities.json`` (``{"cities": [...]}``) on first use."""

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path or Settings.CITIES_PATH
        self._cities: list[City] | None = None

    def load(self) -> list[City]:
        """Read and cache the city list."""
        if self._cities is not None:
            return self._cities
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            raw_cities = data["cities"]
            cities = [
                City(
                    name=str(entry["nombre"]),
                    latitude=parse_coordinate(entry.get("latitud")),
                    longitude=parse_coordinate(entry.get("longitud")),
                )
                for entry in raw_cities
            ]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.error(
                "Failed to load city list from %s: %s",
                self.path,
                exc,
                exc_info=True,
            )
            raise DataSourceError("could not load the city list") from exc

        logger.debug("Loaded %d cities from %s", len(cities), self.path)
        self._cities = cities
        return cities

    def search(self, query: str) -> list[City]:
        """Cities whose name contains *query* (case/accent-insensitive)."""
        needle = fold_text(query.strip())
        return [
            city for city in self.load() if needle in fold_text(city.name)
        ]
