# src/sources/surtidor_source.py

"""Client for the "precios en surtidor" station aggregator endpoint."""

import json
from typing import Any

from curl_cffi import CurlMime

from src.errors import DataSourceError
from src.sources.base_source import BaseSource


class SurtidorSource(BaseSource):
    """Per-fuel station listings inside a bounding box.

    The aggregator takes one multipart form POST per fuel code and
    answers ``{"resultado": [station, ...]}`` where every station carries a
    ``precios`` mapping keyed by fuel code.
    """

    def __init__(self) -> None:
        super().__init__("surtidor")

    def health_url(self) -> str:
        return self.settings.SURTIDOR_URL

    def _build_form(
        self, fuel_code: int, lat: float, lng: float,
    ) -> dict[str, str]:
        delta = self.settings.SURTIDOR_BOUNDS_DELTA
        bounds = {
            "so": {"lat": lat - delta, "lng": lng - delta},
            "ne": {"lat": lat + delta, "lng": lng + delta},
        }
        return {
            "method": self.settings.SURTIDOR_METHOD,
            "banderas": json.dumps(self.settings.SURTIDOR_BANDERAS),
            "combustible": str(fuel_code),
            "bounds": json.dumps(bounds),
        }

    def fetch_stations(
        self, fuel_code: int, lat: float, lng: float,
    ) -> list[dict[str, Any]]:
        """Stations selling *fuel_code* around (lat, lng)."""
        mime = _to_multipart(self._build_form(fuel_code, lat, lng))
        try:
            resp = self._fetch_post(
                self.settings.SURTIDOR_URL, multipart=mime
            )
        finally:
            mime.close()
        data = self._decode_json(resp)
        stations = data.get("resultado") if isinstance(data, dict) else None
        if not isinstance(stations, list):
            raise DataSourceError(
                f"surtidor: unexpected payload for fuel {fuel_code}"
            )
        self.logger.debug(
            "[surtidor] fuel %d: %d stations", fuel_code, len(stations)
        )
        return stations


def _to_multipart(form: dict[str, str]) -> CurlMime:
    """Encode plain fields as a curl_cffi multipart body."""
    mime = CurlMime()
    for name, value in form.items():
        mime.addpart(name=name, data=value.encode("utf-8"))
    return mime
