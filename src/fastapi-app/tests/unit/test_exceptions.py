"""
Unit Tests for Custom Exceptions
================================
"""

import warnings

import pytest
from fastapi import HTTPException

from core.exceptions import (
    ElectricityPriceAPIError,
    InvalidWindowError,
    PriceFormatError,
    SpotPriceException,
    ValidationError,
    handle_exceptions,
    to_http_exception
)


@pytest.mark.unit
class TestExceptionHierarchy:

    def test_to_dict(self):
        exc = ElectricityPriceAPIError(503, "maintenance")
        data = exc.to_dict()

        assert data["error"] == "PRICE_API_ERROR"
        assert "503" in data["message"]
        assert data["details"]["status_code"] == 503

    def test_default_error_code_is_class_name(self):
        assert SpotPriceException("x").error_code == "SpotPriceException"

    def test_invalid_window_is_validation_error(self):
        exc = InvalidWindowError(0)
        assert isinstance(exc, ValidationError)
        assert exc.details["field"] == "window_hours"

    @pytest.mark.parametrize("exc, expected", [
        (InvalidWindowError(0), 422),
        (ElectricityPriceAPIError(500, "boom"), 502),
        (PriceFormatError("bad"), 502),
        (SpotPriceException("other"), 500),
    ])
    def test_http_status_mapping(self, exc, expected):
        http_exc = to_http_exception(exc)
        assert http_exc.status_code == expected
        assert http_exc.detail["error"] == exc.error_code


    def test_validation_mapping_emits_no_deprecation_warning(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            assert to_http_exception(InvalidWindowError(0)).status_code == 422


@pytest.mark.unit
@pytest.mark.asyncio
class TestHandleExceptions:

    async def test_converts_domain_errors(self):
        @handle_exceptions
        async def endpoint():
            raise InvalidWindowError(-1)

        with pytest.raises(HTTPException) as exc_info:
            await endpoint()
        assert exc_info.value.status_code == 422

    async def test_passes_results_through(self):
        @handle_exceptions
        async def endpoint():
            return {"ok": True}

        assert await endpoint() == {"ok": True}
