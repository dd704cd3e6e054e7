"""
Energy Domain
=============

Pure price logic: unit conversion, forecasting, statistics and
cheapest-window search.
"""

from .models import CheapestWindow, PriceKind, PricePoint, PriceSeries, Statistics
from .units import DEFAULT_TAX_RATE, apply_tax, as_utc, floor_to_hour, to_display_unit
from .forecaster import PriceForecaster
from .statistics import compute_statistics, percentile
from .windows import find_cheapest_window, resolve_deadline
from .trend import Period, PriceTrend, TrendDirection, classify_period, compute_trend

__all__ = [
    "CheapestWindow",
    "PriceKind",
    "PricePoint",
    "PriceSeries",
    "Statistics",
    "DEFAULT_TAX_RATE",
    "apply_tax",
    "as_utc",
    "floor_to_hour",
    "to_display_unit",
    "PriceForecaster",
    "compute_statistics",
    "percentile",
    "find_cheapest_window",
    "resolve_deadline",
    "Period",
    "PriceTrend",
    "TrendDirection",
    "classify_period",
    "compute_trend",
]
