# src/filters/brand_filter.py

"""Brand allow-list filtering of price records."""

import logging

from src.config.settings import Settings
from src.models.price_record import PriceRecord

logger = logging.getLogger("naftas.filters")


def normalise_brand(brand: str) -> str:
    """Canonical form used for allow-list matching."""
    return " ".join(brand.split()).upper()


class BrandFilter:
    """Keep only records from the configured fuel brands."""

    @staticmethod
    def filter_allowed(
        records: list[PriceRecord],
        allowed_brands: list[str] | None = None,
    ) -> tuple[list[PriceRecord], int]:
        """Drop records whose brand is not allowed.

        Returns the kept records and the count of discarded ones.
        """
        allowed = {
            normalise_brand(b)
            for b in (allowed_brands or Settings.ALLOWED_BRANDS)
        }

        kept: list[PriceRecord] = []
        excluded = 0
        for record in records:
            if normalise_brand(record.brand) in allowed:
                kept.append(record)
            else:
                excluded += 1

        if excluded:
            logger.info(
                "Brand filter discarded %d records outside the allow-list",
                excluded,
            )

        return kept, excluded
