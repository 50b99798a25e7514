"""In-memory cache with per-entry expiration.

Entries expire lazily: an expired entry is removed the next time it is read.
There is no background sweep and no capacity bound, so the cache suits a
single process whose key space (entity IDs plus a handful of filter
combinations) stays small.
"""

import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheStore(Protocol):
    """Interface clients depend on, so a bounded or shared store can replace TTLCache."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...

    def clear(self) -> None: ...


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value and the clock reading at which it stops being valid."""

    value: T
    expires_at: float


def make_key(url: str, params: dict | None = None) -> str:
    """Build a cache key from a request path and its filters.

    Filters are serialized with sorted keys and without None values, so
    {"limit": 1, "status": "complete"} and {"status": "complete", "limit": 1}
    share one entry.
    """
    if not params:
        return url
    present = {k: v for k, v in params.items() if v is not None}
    if not present:
        return url
    return url + json.dumps(present, sort_keys=True, separators=(",", ":"), default=str)


class TTLCache(Generic[T]):
    """Key/value store whose entries expire ttl_seconds after being set.

    Usage:
        cache = TTLCache(ttl_seconds=300)
        cache.set(make_key("/api/v3/fundings", {"limit": 100}), response)
        cached = cache.get(make_key("/api/v3/fundings", {"limit": 100}))
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        """Initialize an empty cache.

        Args:
            ttl_seconds: Lifetime of each entry
            clock: Source of the current time in seconds
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> T | None:
        """Return the cached value, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            logger.debug("Cache expired: %s", key)
            return None
        logger.debug("Cache hit: %s", key)
        return entry.value

    def set(self, key: str, value: T) -> None:
        """Store a value, replacing any existing entry for the key."""
        expires_at = self._clock() + self.ttl_seconds
        self._entries[key] = CacheEntry(value=value, expires_at=expires_at)
        logger.debug("Cache set: %s (ttl=%ss)", key, self.ttl_seconds)

    def delete(self, key: str) -> None:
        """Evict a single entry if present."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()
        logger.info("Cache cleared")
