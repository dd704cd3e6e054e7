"""
Structured Logging Configuration
=================================

Provides centralized logging configuration for the entire application.
Supports both JSON structured logging (for production) and human-readable
format (for development).

Features:
- JSON structured logs for production
- Color-coded console logs for development
- Request ID tracking per HTTP request
- Timing of upstream calls
"""

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from core.config import settings


# =================================================================
# REQUEST ID CONTEXT
# =================================================================

request_id_context: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="no-request-id"
)


# =================================================================
# LOG FORMATTERS
# =================================================================

class StructuredFormatter(logging.Formatter):
    """
    JSON structured logging formatter for production.

    Outputs logs in JSON format with standard fields:
    - timestamp: ISO 8601 format (UTC, "Z" suffix)
    - level, logger, message, module, function, line
    - request_id: Request ID (if attached by RequestIDFilter)
    - exception: Formatted traceback (if present)
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f") + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "request_id"):
            log_data["request_id"] = record.request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """
    Color-coded console formatter for development.
    """

    COLORS = {
        "DEBUG": "\033[37m",      # Gray
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[41m",   # Red background
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[levelname]}{levelname:8}{self.RESET}"
            )

        formatted = super().format(record)

        # Restore for other handlers
        record.levelname = levelname

        return formatted


class RequestIDFilter(logging.Filter):
    """Logging filter that adds request_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_context.get()
        return True


# =================================================================
# LOGGER SETUP
# =================================================================

def get_console_handler() -> logging.StreamHandler:
    """
    Get console handler with appropriate formatter.

    Returns:
        StreamHandler: Console handler for stdout
    """
    handler = logging.StreamHandler(sys.stdout)

    if settings.ENVIRONMENT == "production":
        formatter = StructuredFormatter()
    else:
        formatter = ColoredFormatter(
            fmt="%(asctime)s - %(name)-30s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    handler.setFormatter(formatter)
    handler.addFilter(RequestIDFilter())
    return handler


def setup_logging(log_level: Optional[str] = None) -> None:
    """
    Configure logging for the entire application.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
                   Defaults to settings.LOG_LEVEL

    Example:
        >>> setup_logging(log_level="DEBUG")
        >>> logger = logging.getLogger(__name__)
        >>> logger.info("Application started")
    """
    level = log_level or settings.LOG_LEVEL
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(get_console_handler())

    # Reduce third-party noise
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"🔧 Logging configured: level={level}, environment={settings.ENVIRONMENT}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with request ID tracking.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Processing request")
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIDFilter) for f in logger.filters):
        logger.addFilter(RequestIDFilter())
    return logger


# =================================================================
# PERFORMANCE LOGGING
# =================================================================

class PerformanceLogger:
    """
    Context manager for performance logging.

    Logs execution time of code blocks.

    Example:
        >>> with PerformanceLogger("fetch_range"):
        ...     records = await client.get_prices(start, end)
    """

    def __init__(self, operation_name: str, logger_name: Optional[str] = None):
        self.operation_name = operation_name
        self.logger = get_logger(logger_name or __name__)
        self.start_time = None
        self.elapsed = None

    def __enter__(self):
        self.start_time = datetime.now()
        self.logger.debug(f"⏱️  Started: {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = (datetime.now() - self.start_time).total_seconds()

        if exc_type:
            self.logger.warning(
                f"❌ Failed: {self.operation_name} ({self.elapsed:.2f}s): {exc_val}"
            )
        else:
            self.logger.debug(
                f"✅ Completed: {self.operation_name} ({self.elapsed:.2f}s)"
            )
        return False


# =================================================================
# UTILITY FUNCTIONS
# =================================================================

def log_api_call(
    logger: logging.Logger,
    method: str,
    url: str,
    status_code: int,
    elapsed_ms: float,
    **extra_data
):
    """
    Log external API call with structured data.

    Example:
        >>> log_api_call(
        ...     logger,
        ...     method="GET",
        ...     url="https://dashboard.elering.ee/api/nps/price",
        ...     status_code=200,
        ...     elapsed_ms=234.5,
        ...     records_fetched=48
        ... )
    """
    level = logging.INFO if status_code < 400 else logging.ERROR
    logger.log(
        level,
        f"API Call: {method} {url} [{status_code}] ({elapsed_ms:.1f}ms)",
        extra={"extra_data": {
            "api_call": {
                "method": method,
                "url": url,
                "status_code": status_code,
                "elapsed_ms": elapsed_ms,
                **extra_data
            }
        }}
    )
