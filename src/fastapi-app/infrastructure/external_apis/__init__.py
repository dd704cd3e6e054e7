"""
External APIs Infrastructure Module
====================================

Provides clients for external data sources.
"""

from .elering_client import EleringAPIClient

__all__ = [
    "EleringAPIClient",
]
