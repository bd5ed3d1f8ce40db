# src/sources/csv_source.py

"""Price records from the dataset's CSV download."""

import csv
import io

from src.errors import DataSourceError
from src.filters.brand_filter import normalise_brand
from src.filters.record_validator import RecordValidator
from src.models.price_record import PriceRecord
from src.sources.base_source import PriceSource

REQUIRED_COLUMNS = frozenset(
    {"localidad", "empresabandera", "idproducto", "precio", "fecha_vigencia"}
)


class CsvSource(PriceSource):
    """CSV feed variant of the "precios en surtidor" dataset.

    The whole file is downloaded on every call and filtered locally.
    """

    def __init__(self) -> None:
        super().__init__("csv")

    def health_url(self) -> str:
        return self.settings.CSV_URL

    def parse_csv(
        self,
        text: str,
        locality: str | None = None,
        brand: str | None = None,
    ) -> list[PriceRecord]:
        """Parse CSV text into records matching the optional filters."""
        reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
        columns = {c.strip().lower() for c in reader.fieldnames or []}
        missing = REQUIRED_COLUMNS - columns
        if missing:
            self.logger.error(
                "[csv] Feed is missing columns: %s", sorted(missing)
            )
            raise DataSourceError(
                f"csv: missing columns {', '.join(sorted(missing))}"
            )

        wanted_locality = locality.strip().upper() if locality else None
        wanted_brand = normalise_brand(brand) if brand else None

        def rows():
            for raw in reader:
                row = {
                    (k or "").strip().lower(): v for k, v in raw.items()
                }
                if (
                    wanted_locality
                    and (row.get("localidad") or "").strip().upper()
                    != wanted_locality
                ):
                    continue
                if (
                    wanted_brand
                    and normalise_brand(row.get("empresabandera") or "")
                    != wanted_brand
                ):
                    continue
                yield row

        records, dropped = RecordValidator.parse_rows(rows())
        self.logger.info(
            "[csv] %d records (%d dropped) for locality=%s brand=%s",
            len(records),
            dropped,
            wanted_locality,
            wanted_brand,
        )
        return records

    def fetch_raw_records(
        self,
        locality: str | None = None,
        brand: str | None = None,
    ) -> list[PriceRecord]:
        resp = self._fetch_get(
            self.settings.CSV_URL,
            headers={"Accept": "text/csv"},
        )
        try:
            text = resp.content.decode("utf-8-sig")
        except UnicodeDecodeError:
            text = resp.content.decode("latin-1")
        return self.parse_csv(text, locality, brand)
