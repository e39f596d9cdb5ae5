"""Thread-safe in-memory key-value store with lazy TTL.

One instance lives for the whole process and is shared by every request
handled by it. Expiry is checked on read only: a stale entry is reported
as a miss but stays in the map until it is overwritten, invalidated or
the store is cleared. ``None`` is stored like any other value so that a
place the providers could not resolve is not looked up again within the
TTL.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from ...domain.models import CacheEntry


@dataclass
class InMemoryCache:
    """Thread-safe in-memory store implementing KeyValueStorePort.

    Attributes:
        ttl_seconds: Age after which an entry is ignored (None = no expiry)
        name: Cache name for logging
        clock: Returns the current epoch time in seconds

    Example:
        cache = InMemoryCache(name="geocode", ttl_seconds=3600)
        cache.put("alfama|lisbon", {"lat": 38.71, "lng": -9.13})
        entry = cache.get("alfama|lisbon")
    """

    ttl_seconds: Optional[float] = 60 * 60
    name: str = "cache"
    clock: Callable[[], float] = field(default=time.time, repr=False)

    _store: Dict[str, CacheEntry] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    # Statistics
    _hits: int = field(default=0, repr=False)
    _misses: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"cache.{self.name}")

    def get(self, key: str) -> Optional[CacheEntry]:
        """Get a fresh entry from the cache.

        Args:
            key: The cache key.

        Returns:
            The entry, or None if not found or expired.
        """
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None

            if (
                self.ttl_seconds is not None
                and self.clock() - entry.timestamp >= self.ttl_seconds
            ):
                self._logger.debug("Cache entry stale", extra={"key": key})
                self._misses += 1
                return None

            self._hits += 1
            return entry

    def put(self, key: str, value: Any) -> None:
        """Store a value, overwriting any previous entry.

        Args:
            key: The cache key.
            value: The value to cache, None included.
        """
        with self._lock:
            self._store[key] = CacheEntry(value=value, timestamp=self.clock())
            self._logger.debug(
                "Cache entry set",
                extra={"key": key, "ttl": self.ttl_seconds},
            )

    def clear(self) -> int:
        """Clear all entries from the cache.

        Returns:
            Number of entries that were cleared.
        """
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._logger.info("Cache cleared", extra={"entries_cleared": count})
            return count

    def invalidate(self, key: str) -> bool:
        """Invalidate a specific cache entry.

        Args:
            key: The cache key to invalidate.

        Returns:
            True if the key existed and was removed.
        """
        with self._lock:
            if key in self._store:
                del self._store[key]
                self._logger.debug("Cache entry invalidated", extra={"key": key})
                return True
            return False

    def size(self) -> int:
        """Return the number of entries, stale ones included."""
        with self._lock:
            return len(self._store)

    def stats(self) -> Dict[str, Any]:
        """Return cache statistics.

        Returns:
            Dictionary with hit/miss counts and size.
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "size": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": round(hit_rate, 1),
            }
