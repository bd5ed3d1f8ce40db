# src/services/price_aggregator.py

"""Group price records by locality, brand and fuel; keep the newest."""

import logging

from src.config.settings import Settings
from src.filters.brand_filter import BrandFilter, normalise_brand
from src.models.locality import AggregatedLocality, FuelPrice
from src.models.price_record import PriceRecord
from src.services.fuel_names import get_fuel_category, get_fuel_name

logger = logging.getLogger("naftas.aggregator")


def order_fuels(
    fuels: dict[str, FuelPrice],
    category_order: list[str] | None = None,
) -> dict[str, FuelPrice]:
    """Reorder a brand's fuels by canonical category.

    Fuels with an unknown category sort last; ``sorted`` is stable so
    equal keys keep their insertion order.
    """
    order = category_order or Settings.FUEL_CATEGORY_ORDER
    rank = {category: idx for idx, category in enumerate(order)}

    def sort_key(item: tuple[str, FuelPrice]) -> int:
        category = get_fuel_category(item[1].fuel_type_code)
        return rank.get(category or "", len(order))

    return dict(sorted(fuels.items(), key=sort_key))


def aggregate_prices(
    records: list[PriceRecord],
    allowed_brands: list[str] | None = None,
    canonical_order: bool = True,
) -> dict[str, AggregatedLocality]:
    """Build ``locality -> brand -> fuel name -> newest price``.

    Within each (locality, brand, fuel name) group the record with the
    strictly latest effective date is kept; on an exact tie the first
    record seen stays.
    """
    allowed, _ = BrandFilter.filter_allowed(records, allowed_brands)

    localities: dict[str, AggregatedLocality] = {}
    for record in allowed:
        brand = normalise_brand(record.brand)
        fuel_name = get_fuel_name(record.fuel_type_code, brand)

        locality = localities.get(record.locality)
        if locality is None:
            locality = AggregatedLocality()
            localities[record.locality] = locality
        if locality.coordinates is None and record.coordinate is not None:
            locality.coordinates = record.coordinate

        fuels = locality.brands.setdefault(brand, {})
        current = fuels.get(fuel_name)
        if current is None or record.effective_date > current.effective_date:
            fuels[fuel_name] = FuelPrice(
                price=record.price,
                effective_date=record.effective_date,
                fuel_type_code=record.fuel_type_code,
                fuel_name=fuel_name,
            )

    if canonical_order:
        for locality in localities.values():
            for brand, fuels in locality.brands.items():
                locality.brands[brand] = order_fuels(fuels)

    logger.debug(
        "Aggregated %d records into %d localities",
        len(allowed),
        len(localities),
    )
    return localities
