"""Cache port - Injectable key-value store abstraction.

This protocol replaces process-wide module globals for the geocode
result cache: one store is constructed per process and handed to the
services that need it, which keeps the shared lifetime while making the
store swappable in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import CacheEntry


class KeyValueStorePort(Protocol):
    """Port for a TTL-aware key-value store.

    Implementations:
    - adapters/cache/memory_cache.py (InMemoryCache) - Production
    - adapters/cache/null_cache.py (NullCache) - Caching disabled

    ``get`` returns the whole entry rather than the bare value so that a
    cached ``None`` (a confirmed miss at the provider) can be told apart
    from a key that is absent or expired.
    """

    def get(self, key: str) -> Optional[CacheEntry]:
        """Get a fresh entry from the store.

        Args:
            key: The cache key.

        Returns:
            The entry, or None if absent or older than the TTL.
        """
        ...

    def put(self, key: str, value: Any) -> None:
        """Store a value under the current timestamp, overwriting.

        Args:
            key: The cache key.
            value: The value to cache. None is a valid value.
        """
        ...

    def invalidate(self, key: str) -> bool:
        """Remove a specific entry.

        Returns:
            True if the key existed and was removed, False otherwise.
        """
        ...

    def clear(self) -> int:
        """Remove all entries.

        Returns:
            Number of entries that were cleared.
        """
        ...

    def size(self) -> int:
        """Return the number of stored entries, stale ones included."""
        ...
