"""Geocoding use cases built on the place resolver.

Two call sites share the resolver:

- batch resolution, sequential, with a shared destination context that
  a per-place hint overrides
- single-place geocoding, guarded by a per-client rate limiter and a
  process-wide result cache
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from ..adapters.ratelimit.client_rate_limiter import ClientRateLimiter
from ..domain.models import Coordinates, ResolvedPlace
from ..ports.cache import KeyValueStorePort
from .place_resolver import PlaceResolver


def geocode_cache_key(query: str, destination: Optional[str] = None) -> str:
    """Build the cache key ``lower(query)|lower(destination)``."""
    return f"{query.lower()}|{(destination or '').lower()}"


@dataclass
class GeocodeService:
    """Batch and cached single-place geocoding.

    Attributes:
        resolver: Provider fallback chain
        cache: Store for single-place results (coordinates or None)
        rate_limiter: Per-client request spacing for single-place calls
    """

    resolver: PlaceResolver
    cache: KeyValueStorePort
    rate_limiter: ClientRateLimiter = field(default_factory=ClientRateLimiter)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def resolve_batch(
        self,
        places: Sequence[Mapping[str, Any]],
        destination_context: Optional[str] = None,
    ) -> List[ResolvedPlace]:
        """Resolve places one after the other, preserving input order.

        Args:
            places: Items with a ``name`` and an optional string ``hint``.
                A hint, even an empty one, replaces the context.
            destination_context: Destination shared by all places.

        Returns:
            One ResolvedPlace per input item.
        """
        results: List[ResolvedPlace] = []
        for item in places:
            name = item.get("name")
            name = name if isinstance(name, str) else ""
            if not name.strip():
                results.append(ResolvedPlace.unresolved(name))
                continue

            hint = item.get("hint")
            destination = hint if isinstance(hint, str) else destination_context
            results.append(self.resolver.resolve(name, destination or None))

        self._logger.info(
            "Batch resolution finished",
            extra={
                "count": len(results),
                "resolved": sum(1 for place in results if place.resolved),
            },
        )
        return results

    def geocode(
        self, query: str, destination: Optional[str], client_id: str
    ) -> Optional[Coordinates]:
        """Geocode one place with rate limiting and caching.

        The rate limit is checked before the cache, so a client is
        limited even when its query would be served from cache.

        Args:
            query: Place name.
            destination: Optional destination.
            client_id: Rate limiting identity.

        Returns:
            The coordinates, or None when the place is unresolvable.

        Raises:
            RateLimitExceededError: The client called again too soon.
            ProviderUnavailableError: The last provider was unreachable.
        """
        self.rate_limiter.check(client_id)

        key = geocode_cache_key(query, destination)
        entry = self.cache.get(key)
        if entry is not None:
            self._logger.debug("Geocode cache hit", extra={"key": key})
            return entry.value

        place = self.resolver.resolve(query, destination or None)
        coordinates = place.coordinates
        self.cache.put(key, coordinates)
        return coordinates
