"""
Core Configuration Module
=========================

Centralized configuration management using Pydantic Settings.
All environment variables are loaded and validated here.

Environment Variables (all optional):
- ENVIRONMENT: development | production | testing
- LOG_LEVEL: Root log level
- TZ: Local timezone of the market (used for calendar days and deadlines)
- ELERING_API_BASE_URL: Base URL of the Nord Pool price endpoint
- MARKET_CODE: Price area served by the upstream (single market)
- VAT_RATE: Consumption tax applied when prices are shown tax-inclusive
"""

from datetime import time
from typing import List
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =================================================================
    # APPLICATION SETTINGS
    # =================================================================
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    TZ: str = "Europe/Tallinn"
    API_VERSION: str = "1.0.0"

    # =================================================================
    # UPSTREAM PRICE API (Elering / Nord Pool)
    # =================================================================
    ELERING_API_BASE_URL: str = "https://dashboard.elering.ee/api/nps/price"
    MARKET_CODE: str = "ee"

    # HTTP client settings
    HTTP_TIMEOUT_SECONDS: float = 15.0
    HTTP_MAX_RETRIES: int = 3
    HTTP_BACKOFF_MULTIPLIER: float = 1.0

    # =================================================================
    # PRICING
    # =================================================================
    VAT_RATE: float = 0.22

    # =================================================================
    # FORECAST & DASHBOARD WINDOW
    # =================================================================
    PREDICTION_HISTORY_DAYS: int = 8  # same-hour-last-week needs 7 days + slack
    DASHBOARD_PAST_HOURS: int = 24
    DASHBOARD_FUTURE_DAYS: int = 2
    DASHBOARD_REFRESH_INTERVAL_MINUTES: int = 15

    # Cheapest window defaults
    DEFAULT_WINDOW_HOURS: int = 3
    DEFAULT_DEADLINE: time = time(7, 0)

    # =================================================================
    # CORS
    # =================================================================
    CORS_ORIGINS: List[str] = ["*"]

    @property
    def timezone(self) -> ZoneInfo:
        """Market timezone as a tzinfo object."""
        return ZoneInfo(self.TZ)

    def __repr__(self):
        return (
            f"Settings("
            f"env={self.ENVIRONMENT}, "
            f"market={self.MARKET_CODE}, "
            f"tz={self.TZ}, "
            f"api={self.ELERING_API_BASE_URL})"
        )


# Global settings instance
settings = Settings()
