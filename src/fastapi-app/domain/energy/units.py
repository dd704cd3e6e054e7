"""
Price Unit Conversion (Domain Logic)
====================================

Upstream prices are quoted in EUR/MWh. The dashboard shows cents/kWh:
100 cents/EUR ÷ 1000 kWh/MWh = 1/10.
"""

from datetime import datetime, timezone

DEFAULT_TAX_RATE = 0.22
DISPLAY_UNIT_DIVISOR = 10


def to_display_unit(raw_price: float) -> float:
    """Convert EUR/MWh to cents/kWh."""
    return raw_price / DISPLAY_UNIT_DIVISOR


def apply_tax(price: float, rate: float = DEFAULT_TAX_RATE) -> float:
    """Return the price with consumption tax applied multiplicatively."""
    return price * (1 + rate)


def floor_to_hour(dt: datetime) -> datetime:
    """
    Truncate an instant to the start of its clock hour, in UTC.

    Naive datetimes are taken to be UTC already.
    """
    return as_utc(dt).replace(minute=0, second=0, microsecond=0)


def as_utc(dt: datetime) -> datetime:
    """Express an instant in UTC; naive datetimes are taken to be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
