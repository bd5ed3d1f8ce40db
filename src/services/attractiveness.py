# src/services/attractiveness.py

"""Heuristic "how attractive is this brand" score.

The score blends two sub-scores, each centred on 50 and clamped to
``[0, 100]``:

* price: how far the brand's average price sits below the global average
  (``SCORE_PRICE_SCALE`` points per percent), weighted by
  ``SCORE_PRICE_WEIGHT``;
* recency: how many days newer the brand's average effective date is than
  the global average (``SCORE_DAY_SCALE`` points per day), weighted by
  ``SCORE_RECENCY_WEIGHT``.

With the default 0.6/0.4 weights the result always lies in ``[0, 100]``.
"""

from collections.abc import Iterable

from src.config.settings import Settings
from src.models.locality import AggregatedLocality, FuelPrice

_MS_PER_DAY = 1000 * 60 * 60 * 24


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _epoch_ms(fuel: FuelPrice) -> float:
    return fuel.effective_date.timestamp() * 1000


def score_bounds() -> tuple[float, float]:
    """The (min, max) score the configured weights can produce."""
    return (
        0.0,
        100.0 * (Settings.SCORE_PRICE_WEIGHT + Settings.SCORE_RECENCY_WEIGHT),
    )


def compute_global_averages(
    localities: Iterable[AggregatedLocality],
) -> tuple[float, float] | None:
    """Average price and average effective date (epoch ms) of all fuels.

    Returns ``None`` when there are no prices at all.
    """
    total_price = 0.0
    total_date = 0.0
    count = 0
    for locality in localities:
        for fuel in locality.fuel_prices():
            total_price += float(fuel.price)
            total_date += _epoch_ms(fuel)
            count += 1
    if not count:
        return None
    return total_price / count, total_date / count


def calculate_brand_score(
    fuels: Iterable[FuelPrice],
    global_avg_price: float,
    global_avg_date_ms: float,
) -> float:
    """Weighted price + recency score for one brand.

    The caller guarantees at least one fuel and a non-zero global
    average price.
    """
    entries = list(fuels)
    brand_avg_price = sum(float(f.price) for f in entries) / len(entries)
    brand_avg_date = sum(_epoch_ms(f) for f in entries) / len(entries)

    price_diff_pct = (
        (global_avg_price - brand_avg_price) / global_avg_price * 100
    )
    price_score = _clamp(50 + price_diff_pct * Settings.SCORE_PRICE_SCALE)

    day_diff = (brand_avg_date - global_avg_date_ms) / _MS_PER_DAY
    recency_score = _clamp(50 + day_diff * Settings.SCORE_DAY_SCALE)

    return (
        price_score * Settings.SCORE_PRICE_WEIGHT
        + recency_score * Settings.SCORE_RECENCY_WEIGHT
    )


def score_brand(
    fuels: dict[str, FuelPrice],
    averages: tuple[float, float] | None,
) -> float | None:
    """Score a brand, or ``None`` when it cannot be computed."""
    if not fuels or averages is None or averages[0] == 0:
        return None
    return calculate_brand_score(fuels.values(), *averages)


def apply_scores(localities: dict[str, AggregatedLocality]) -> None:
    """Fill ``scores`` on every locality using result-wide averages."""
    averages = compute_global_averages(localities.values())
    for locality in localities.values():
        for brand, fuels in locality.brands.items():
            score = score_brand(fuels, averages)
            if score is not None:
                locality.scores[brand] = score


def indicator_tier(score: float) -> str:
    """Bucket a score into the tiers the front end colours."""
    if score >= 50:
        return "high"
    if score >= 40:
        return "medium"
    if score >= 20:
        return "low"
    return "poor"
