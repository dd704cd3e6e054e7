"""
Elering API Client (Infrastructure Layer)
==========================================

Client for the Elering Nord Pool spot price API with:
- Automatic retries on network errors using tenacity
- Structured error handling (transport vs. payload errors)
- Normalized records (UTC datetimes, EUR/MWh floats)

API: https://dashboard.elering.ee/api/nps/price

Usage:
    from infrastructure.external_apis.elering_client import EleringAPIClient

    async with EleringAPIClient() as client:
        records = await client.get_prices(start, end)
        current = await client.get_current_price()
"""

import logging
import math
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential
)

from core.config import settings
from core.exceptions import ElectricityPriceAPIError, PriceFormatError
from core.logging_config import log_api_call

logger = logging.getLogger(__name__)


class EleringAPIClient:
    """
    Asynchronous client for the Elering spot price API.

    Raises ElectricityPriceAPIError for HTTP/network failures and
    PriceFormatError for payloads of unexpected shape. Deciding what an
    empty answer means is left to the caller.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        market_code: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_multiplier: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize Elering API client.

        Args:
            base_url: Price endpoint (defaults to settings.ELERING_API_BASE_URL)
            market_code: Price area key, e.g. "ee"
            timeout: Request timeout in seconds
            max_retries: Attempts per request on network errors
            backoff_multiplier: Exponential backoff multiplier (0 disables waiting)
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (base_url or settings.ELERING_API_BASE_URL).rstrip("/")
        self.market_code = (market_code or settings.MARKET_CODE).lower()
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self.max_retries = max_retries if max_retries is not None else settings.HTTP_MAX_RETRIES
        self.backoff_multiplier = (
            backoff_multiplier if backoff_multiplier is not None else settings.HTTP_BACKOFF_MULTIPLIER
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers=self._get_headers(),
            transport=self._transport
        )
        logger.debug("✅ Elering API client initialized")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug("🔒 Elering API client closed")

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": f"SpotPriceDashboard/{settings.API_VERSION}"
        }

    @property
    def current_price_url(self) -> str:
        return f"{self.base_url}/{self.market_code.upper()}/current"

    @staticmethod
    def _format_date(dt: datetime, is_end: bool = False) -> str:
        """
        Format an instant as ISO-8601 UTC with milliseconds (…T10:00:00.000Z).

        End instants on a whole second become …:59.999-style just-below values
        (.000Z → .999Z) so the final hour is included upstream.
        """
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        dt = dt.astimezone(timezone.utc)

        millis = dt.microsecond // 1000
        if is_end and millis == 0:
            millis = 999
        return f"{dt.strftime('%Y-%m-%dT%H:%M:%S')}.{millis:03d}Z"

    async def _make_request(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        GET `url` and decode JSON, retrying network errors.

        Raises:
            ElectricityPriceAPIError: Non-2xx status or network failure
            PriceFormatError: Body is not JSON
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, self.max_retries)),
            wait=wait_exponential(multiplier=self.backoff_multiplier, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        )

        started = time.perf_counter()
        try:
            async for attempt in retrying:
                with attempt:
                    response = await self._client.get(url, params=params)
                    response.raise_for_status()

        except httpx.HTTPStatusError as e:
            log_api_call(logger, "GET", url, e.response.status_code, _elapsed_ms(started))
            raise ElectricityPriceAPIError(e.response.status_code, e.response.text[:200])

        except httpx.RequestError as e:
            logger.error(f"❌ Price API request error: {e!r}")
            raise ElectricityPriceAPIError(0, str(e) or e.__class__.__name__)

        log_api_call(logger, "GET", url, response.status_code, _elapsed_ms(started))

        try:
            return response.json()
        except ValueError as e:
            raise PriceFormatError(f"response body is not JSON ({e})")

    async def get_prices(self, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        """
        Get hourly prices with timestamps in [start, end].

        Returns:
            Records {"timestamp": datetime (UTC), "price_eur_mwh": float},
            sorted ascending by timestamp

        Example:
            >>> async with EleringAPIClient() as client:
            ...     records = await client.get_prices(start, end)
            ...     for record in records:
            ...         print(f"{record['timestamp']}: {record['price_eur_mwh']:.2f} €/MWh")
        """
        params = {
            "start": self._format_date(start),
            "end": self._format_date(end, is_end=True)
        }

        logger.info(f"📊 Fetching {self.market_code.upper()} prices {params['start']} .. {params['end']}")

        data = await self._make_request(self.base_url, params)
        records = self._parse_range_response(data)

        if records:
            logger.info(f"✅ Retrieved {len(records)} price records")
        else:
            logger.warning("⚠️ Price API returned no records for the requested range")

        return records

    async def get_current_price(self) -> Optional[Dict[str, Any]]:
        """
        Get the price of the current market interval.

        Returns:
            Record like get_prices() entries, or None if the API has none
        """
        data = await self._make_request(self.current_price_url)
        return self._parse_current_response(data)

    def _parse_range_response(self, data: Any) -> List[Dict[str, Any]]:
        """
        Parse {success, data: {<market>: [{timestamp, price}]}}.

        Raises:
            PriceFormatError: If the envelope is malformed
        """
        if not isinstance(data, dict) or not data.get("success"):
            raise PriceFormatError("missing or false 'success' flag")

        payload = data.get("data")
        if not isinstance(payload, dict) or not isinstance(payload.get(self.market_code), list):
            raise PriceFormatError(f"missing 'data.{self.market_code}' list")

        records = []
        for item in payload[self.market_code]:
            record = self._parse_entry(item)
            if record is not None:
                records.append(record)

        return sorted(records, key=lambda r: r["timestamp"])

    def _parse_current_response(self, data: Any) -> Optional[Dict[str, Any]]:
        """
        Parse {success, data: [{timestamp, price}]}.

        Raises:
            PriceFormatError: If the envelope is malformed
        """
        if not isinstance(data, dict):
            raise PriceFormatError("current price payload is not an object")

        if not data.get("success"):
            logger.warning("⚠️ Current price API reported success=false")
            return None

        entries = data.get("data")
        if not isinstance(entries, list):
            raise PriceFormatError("missing 'data' list")
        if not entries:
            return None

        return self._parse_entry(entries[0])

    @staticmethod
    def _parse_entry(item: Any) -> Optional[Dict[str, Any]]:
        """Unix-seconds timestamp + finite numeric EUR/MWh price; invalid entries yield None."""
        if not isinstance(item, dict):
            logger.warning(f"⚠️ Invalid price entry: {item!r}")
            return None

        raw_ts = item.get("timestamp")
        raw_price = item.get("price")
        if isinstance(raw_ts, bool) or isinstance(raw_price, bool) or not isinstance(raw_price, (int, float)):
            logger.warning(f"⚠️ Invalid price entry: {item!r}")
            return None

        try:
            timestamp = datetime.fromtimestamp(float(raw_ts), tz=timezone.utc)
            price = float(raw_price)
        except (TypeError, ValueError, OverflowError, OSError) as e:
            logger.warning(f"⚠️ Invalid price data: {e}")
            return None

        # NaN / Infinity are valid JSON to Python's parser
        if not math.isfinite(price):
            logger.warning(f"⚠️ Non-finite price dropped: {item!r}")
            return None

        return {
            "timestamp": timestamp,
            "price_eur_mwh": price
        }


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
