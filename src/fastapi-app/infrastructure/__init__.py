"""
Infrastructure Layer
====================

External integrations.
"""

from .external_apis import EleringAPIClient

__all__ = [
    "EleringAPIClient",
]
