"""
API Middleware
==============

Cross-cutting HTTP middleware for FastAPI.
"""

from .request_id import RequestIDMiddleware, REQUEST_ID_HEADER

__all__ = ["RequestIDMiddleware", "REQUEST_ID_HEADER"]
