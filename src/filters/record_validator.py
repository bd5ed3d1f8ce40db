# src/filters/record_validator.py

"""Row validation: turn raw dataset rows into price records."""

import logging
from collections.abc import Iterable
from typing import Any

from src.models.price_record import PriceRecord

logger = logging.getLogger("naftas.filters")


class RecordValidator:
    """Parse raw rows and drop those that cannot be used."""

    @staticmethod
    def parse_rows(
        rows: Iterable[Any],
    ) -> tuple[list[PriceRecord], int]:
        """Build records from rows, skipping malformed or unpriced ones.

        Returns the valid records and the count of dropped rows.
        """
        valid: list[PriceRecord] = []
        dropped = 0

        for row in rows:
            if not isinstance(row, dict):
                logger.debug("Dropped non-object row: %r", row)
                dropped += 1
                continue
            try:
                record = PriceRecord.from_row(row)
            except ValueError as exc:
                logger.debug("Dropped malformed row (%s): %r", exc, row)
                dropped += 1
                continue
            if record.price <= 0:
                logger.debug(
                    "Dropped zero/negative price "
                    "(locality=%s, brand=%s, code=%d)",
                    record.locality,
                    record.brand,
                    record.fuel_type_code,
                )
                dropped += 1
                continue
            valid.append(record)

        if dropped:
            logger.info("Validation dropped %d invalid rows", dropped)

        return valid, dropped
