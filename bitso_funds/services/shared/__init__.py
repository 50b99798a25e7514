"""Shared utilities and base classes for services layer.

- HTTPClient: Base class for external API clients
- TransportError: Exception for HTTP client failures
- TTLCache: In-memory response cache with per-entry expiry
"""

from .http_client import HTTPClient, TransportError
from .ttl_cache import CacheEntry, CacheStore, TTLCache, make_key

__all__ = [
    "CacheEntry",
    "CacheStore",
    "HTTPClient",
    "TTLCache",
    "TransportError",
    "make_key",
]
