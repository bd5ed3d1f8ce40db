# src/services/price_service.py

"""Locality price lookups through the configured data-source strategy."""

import importlib
import logging
from typing import Any

from src.config.settings import Settings
from src.errors import ConfigurationError, NotFoundError, ValidationError
from src.models.locality import AggregatedLocality
from src.services.attractiveness import apply_scores
from src.services.price_aggregator import aggregate_prices
from src.sources.base_source import PriceSource

logger = logging.getLogger("naftas.prices")


def _load_source_class(dotted_path: str) -> type[Any]:
    """Dynamically import a source class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


def load_price_source(source_id: str | None = None) -> PriceSource:
    """Instantiate the registered source *source_id* (default: configured).

    An unknown explicit id is a ``ValidationError``; an unknown configured
    ``PRICE_SOURCE`` is a server fault and raises ``ConfigurationError``.
    """
    wanted = source_id or Settings.PRICE_SOURCE
    for source in Settings.AVAILABLE_SOURCES:
        if source["id"] == wanted:
            cls = _load_source_class(source["source"])
            instance: PriceSource = cls()
            logger.debug("Using price source '%s'", wanted)
            return instance
    valid = ", ".join(s["id"] for s in Settings.AVAILABLE_SOURCES)
    message = f"Unknown price source '{wanted}' (available: {valid})"
    if source_id:
        raise ValidationError(message)
    logger.error("Misconfigured NAFTAS_PRICE_SOURCE: %s", message)
    raise ConfigurationError(message)


class PriceService:
    """Fetch, aggregate and score the prices of a locality."""

    def __init__(
        self,
        source: PriceSource | None = None,
        source_id: str | None = None,
    ) -> None:
        self._source = source
        self.source_id = source_id

    @property
    def source(self) -> PriceSource:
        """The strategy, loaded on first use."""
        if self._source is None:
            self._source = load_price_source(self.source_id)
        return self._source

    def close(self) -> None:
        if self._source is not None:
            self._source.close()

    def prices_for_locality(
        self, locality: str,
    ) -> dict[str, AggregatedLocality]:
        """Aggregated prices for *locality*, keyed by locality name.

        Raises ``ValidationError`` on an empty name, ``NotFoundError``
        when the source has no usable records for it, and lets
        ``DataSourceError`` from the source propagate.
        """
        name = locality.strip().upper()
        if not name:
            raise ValidationError("Parameter 'ciudad' must not be empty")

        records = self.source.fetch_raw_records(locality=name)
        localities = {
            key: value
            for key, value in aggregate_prices(records).items()
            if key.strip().upper() == name
        }
        if not localities:
            raise NotFoundError(f"No prices found for '{name}'")

        apply_scores(localities)
        logger.info(
            "Prices for %s: %d brands",
            name,
            sum(len(loc.brands) for loc in localities.values()),
        )
        return localities
