"""Null cache implementation.

This store always misses. It is wired in when caching is disabled
(``ITR_CACHE_ENABLED=false``) and in tests that must not depend on
state left behind by a previous request.

Example:
    @pytest.fixture
    def geocode_service(null_cache, resolver):
        return GeocodeService(resolver=resolver, cache=null_cache)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ...domain.models import CacheEntry


@dataclass
class NullCache:
    """No-op store - always misses.

    Implements KeyValueStorePort without keeping anything, so every
    geocode request reaches the providers.
    """

    name: str = "null"

    def get(self, key: str) -> Optional[CacheEntry]:
        """Always returns None (cache miss)."""
        return None

    def put(self, key: str, value: Any) -> None:
        pass

    def clear(self) -> int:
        return 0

    def invalidate(self, key: str) -> bool:
        return False

    def size(self) -> int:
        return 0

    def stats(self) -> Dict[str, int]:
        """Return empty stats.

        Returns:
            Dictionary with all zeros.
        """
        return {
            "size": 0,
            "hits": 0,
            "misses": 0,
            "hit_rate_percent": 0,
        }
