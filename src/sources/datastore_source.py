# src/sources/datastore_source.py

"""Price records from the energy open-data CKAN ``datastore_search`` API."""

from typing import Any

from src.errors import DataSourceError
from src.filters.record_validator import RecordValidator
from src.models.price_record import PriceRecord
from src.sources.base_source import PriceSource


class DatastoreSource(PriceSource):
    """JSON API variant of the "precios en surtidor" dataset.

    The datastore answers ``{"success": bool, "result": {"records": [...]}}``;
    filters are applied server-side on exact column values.
    """

    def __init__(self) -> None:
        super().__init__("datastore")

    def health_url(self) -> str:
        return self.settings.DATASTORE_URL.rsplit("/", 1)[0] + "/status_show"

    def _build_payload(
        self, locality: str | None, brand: str | None,
    ) -> dict[str, Any]:
        filters: dict[str, str] = {}
        if locality:
            filters["localidad"] = locality.strip().upper()
        if brand:
            filters["empresabandera"] = brand.strip().upper()
        return {
            "resource_id": self.settings.RESOURCE_ID,
            "filters": filters,
            "limit": self.settings.DATASTORE_LIMIT,
            "offset": 0,
        }

    def fetch_raw_records(
        self,
        locality: str | None = None,
        brand: str | None = None,
    ) -> list[PriceRecord]:
        payload = self._build_payload(locality, brand)
        resp = self._fetch_post(
            self.settings.DATASTORE_URL,
            json=payload,
            headers={"Content-Type": "application/json"},
        )
        data = self._decode_json(resp)

        if not isinstance(data, dict) or not data.get("success"):
            self.logger.error(
                "[datastore] Upstream reported failure for filters %s",
                payload["filters"],
            )
            raise DataSourceError("datastore: upstream reported failure")

        result = data.get("result")
        rows = result.get("records") if isinstance(result, dict) else None
        if not isinstance(rows, list):
            raise DataSourceError("datastore: payload has no records list")

        records, dropped = RecordValidator.parse_rows(rows)
        self.logger.info(
            "[datastore] %d records (%d dropped) for filters %s",
            len(records),
            dropped,
            payload["filters"],
        )
        return records
