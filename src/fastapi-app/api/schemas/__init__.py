"""API Schemas Module"""

from .common import (
    HealthResponse,
    VersionResponse
)
from .prices import (
    PricePointSchema,
    StatisticsSchema,
    PriceSeriesResponse,
    StatisticsResponse,
    TrendSchema,
    DashboardResponse,
    CheapestWindowSchema,
    CheapestWindowResponse
)

__all__ = [
    "HealthResponse",
    "VersionResponse",
    "PricePointSchema",
    "StatisticsSchema",
    "PriceSeriesResponse",
    "StatisticsResponse",
    "TrendSchema",
    "DashboardResponse",
    "CheapestWindowSchema",
    "CheapestWindowResponse",
]
