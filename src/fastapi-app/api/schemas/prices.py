"""
Price Pydantic Schemas
======================

Response models for the spot price endpoints. Prices are cents/kWh unless
the field name says EUR/MWh.
"""

from datetime import datetime, time
from typing import List, Optional

from pydantic import BaseModel, Field


class PricePointSchema(BaseModel):
    """Single hourly price."""
    timestamp: datetime = Field(..., description="Start of the hour (UTC)")
    price_eur_mwh: float = Field(..., description="Raw market price (€/MWh)")
    price_cents_kwh: float = Field(..., description="Price before tax (¢/kWh)")
    price: float = Field(..., description="Price in the requested tax mode (¢/kWh)")
    kind: str = Field(..., description="'actual' or 'predicted'")
    is_predicted: bool
    period: Optional[str] = Field(None, description="'past', 'current' or 'future'")


class StatisticsSchema(BaseModel):
    """Statistics over actual (non-predicted) prices (¢/kWh)."""
    min: float
    max: float
    mean: float
    median: float
    p75: float
    p90: float
    p95: float
    count: int = Field(..., description="Number of actual prices summarized")


class PriceSeriesResponse(BaseModel):
    """Prices for a range, with predicted hours and statistics."""
    start: datetime
    end: datetime
    include_tax: bool
    count: int
    predicted_count: int
    prices: List[PricePointSchema]
    statistics: Optional[StatisticsSchema] = None


class StatisticsResponse(BaseModel):
    """Statistics for a range; null when no actual prices exist."""
    start: datetime
    end: datetime
    include_tax: bool
    statistics: Optional[StatisticsSchema] = None


class TrendSchema(BaseModel):
    """Current price vs previous hour."""
    direction: str = Field(..., description="'up', 'down' or 'flat'")
    difference: float = Field(..., description="Absolute difference (¢/kWh)")


class DashboardResponse(BaseModel):
    """Everything the dashboard renders in one refresh."""
    generated_at: datetime
    include_tax: bool
    prices: List[PricePointSchema]
    current: Optional[PricePointSchema] = None
    previous: Optional[PricePointSchema] = None
    trend: Optional[TrendSchema] = None
    statistics: Optional[StatisticsSchema] = None


class CheapestWindowSchema(BaseModel):
    """Cheapest contiguous window."""
    start: datetime
    end: datetime
    average_price: float = Field(..., description="Average price over the window (¢/kWh)")
    window_hours: int


class CheapestWindowResponse(BaseModel):
    """Cheapest-window query result; window is null when none fits."""
    window_hours: int
    deadline: time
    include_tax: bool
    window: Optional[CheapestWindowSchema] = None
