"""
Price Statistics (Domain Logic)
===============================

Descriptive statistics for chart overlays. Only actual market prices are
summarized; predicted hours would skew the picture of observed behaviour.
"""

import math
from typing import Optional, Sequence

from domain.energy.models import PriceSeries, Statistics
from domain.energy.units import DEFAULT_TAX_RATE, apply_tax


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """
    Linear-interpolation percentile of an ascending sequence.

    idx = p/100 * (n-1); the result blends values[floor(idx)] and
    values[ceil(idx)] by the fractional part of idx.

    Raises:
        ValueError: If `sorted_values` is empty
    """
    n = len(sorted_values)
    if n == 0:
        raise ValueError("percentile of an empty sequence")

    index = (p / 100) * (n - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    weight = index - lower

    if upper >= n:
        return sorted_values[lower]
    return sorted_values[lower] * (1 - weight) + sorted_values[upper] * weight


def compute_statistics(
    series: PriceSeries,
    include_tax: bool = False,
    tax_rate: float = DEFAULT_TAX_RATE
) -> Optional[Statistics]:
    """
    Summarize the actual prices of a series in cents/kWh.

    Args:
        series: Any price series; predicted points are ignored
        include_tax: Apply `tax_rate` to every value first
        tax_rate: Consumption tax rate

    Returns:
        Statistics, or None when the series holds no actual points
    """
    actual = series.actual()
    if not actual:
        return None

    values = [p.display_price for p in actual]
    if include_tax:
        values = [apply_tax(v, tax_rate) for v in values]
    values.sort()

    return Statistics(
        min=values[0],
        max=values[-1],
        mean=sum(values) / len(values),
        median=percentile(values, 50),
        p75=percentile(values, 75),
        p90=percentile(values, 90),
        p95=percentile(values, 95),
        count=len(values),
    )
