"""
Custom Exceptions Module
=========================

Domain-specific exceptions for the spot price dashboard.

Exception Hierarchy:
    SpotPriceException (base)
    ├── ExternalAPIError
    │   └── ElectricityPriceAPIError
    ├── PriceDataError
    │   └── PriceFormatError
    └── ValidationError
        └── InvalidWindowError

Usage:
    from core.exceptions import ElectricityPriceAPIError, PriceFormatError

    try:
        records = await client.get_prices(start, end)
    except (ElectricityPriceAPIError, PriceFormatError) as e:
        logger.warning(f"Upstream unavailable: {e.error_code}")
        records = []
"""

from functools import wraps
from typing import Any, Callable, Dict, Optional
import logging

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


# =================================================================
# BASE EXCEPTION
# =================================================================

class SpotPriceException(Exception):
    """
    Base exception for all spot price dashboard errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


# =================================================================
# EXTERNAL API EXCEPTIONS
# =================================================================

class ExternalAPIError(SpotPriceException):
    """Base exception for external API errors."""
    pass


class ElectricityPriceAPIError(ExternalAPIError):
    """Upstream price API communication error (HTTP status or network)."""

    def __init__(self, status_code: int, reason: str):
        super().__init__(
            message=f"Price API error [{status_code}]: {reason}",
            details={"status_code": status_code, "api": "Elering"},
            error_code="PRICE_API_ERROR"
        )
        self.status_code = status_code


# =================================================================
# DATA EXCEPTIONS
# =================================================================

class PriceDataError(SpotPriceException):
    """Base exception for unusable price data."""
    pass


class PriceFormatError(PriceDataError):
    """Upstream payload does not have the expected shape."""

    def __init__(self, reason: str):
        super().__init__(
            message=f"Unexpected price payload: {reason}",
            details={"reason": reason},
            error_code="PRICE_FORMAT_ERROR"
        )


# =================================================================
# VALIDATION EXCEPTIONS
# =================================================================

class ValidationError(SpotPriceException):
    """Data validation error."""

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            message=f"Validation failed for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
            error_code="VALIDATION_FAILED"
        )


class InvalidWindowError(ValidationError):
    """Cheapest-window request with a non-positive length."""

    def __init__(self, window_hours: int):
        super().__init__(
            field="window_hours",
            value=window_hours,
            reason="window length must be at least one hour"
        )


# =================================================================
# HTTP EXCEPTION CONVERTERS
# =================================================================

def to_http_exception(exc: SpotPriceException) -> HTTPException:
    """
    Convert custom exception to FastAPI HTTPException.

    Example:
        >>> try:
        ...     raise InvalidWindowError(0)
        ... except SpotPriceException as e:
        ...     raise to_http_exception(e)
    """
    if isinstance(exc, ValidationError):
        status_code = 422
    elif isinstance(exc, (ExternalAPIError, PriceDataError)):
        status_code = status.HTTP_502_BAD_GATEWAY
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    return HTTPException(
        status_code=status_code,
        detail=exc.to_dict()
    )


# =================================================================
# EXCEPTION HANDLER DECORATOR
# =================================================================

def handle_exceptions(func: Callable) -> Callable:
    """
    Decorator to handle exceptions in route handlers.

    Converts custom exceptions to HTTP exceptions and logs errors.

    Example:
        >>> @router.get("/endpoint")
        ... @handle_exceptions
        ... async def endpoint():
        ...     raise InvalidWindowError(0)
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except SpotPriceException as e:
            logger.error(f"Business error in {func.__name__}: {e.message}")
            raise to_http_exception(e)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={"error": "INTERNAL_SERVER_ERROR", "message": str(e)}
            )

    return wrapper
