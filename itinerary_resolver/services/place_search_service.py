"""Free-text place search for autocomplete-style pickers.

Places Text Search answers first with up to ``limit`` candidates. When
it is unconfigured or finds nothing, the geocoding stages of the
resolver are asked for a single best match instead.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional
from urllib.parse import quote

from ..adapters.ratelimit.client_rate_limiter import ClientRateLimiter
from ..domain.models import PlaceSearchCandidate, ResolvedPlace
from ..ports.places import PlaceDetailsClientPort
from .place_resolver import PlaceResolver, build_search_query

DEFAULT_SEARCH_LIMIT = 5
MAX_SEARCH_LIMIT = 10
FALLBACK_SOURCES = ("geocoding", "nominatim")


def normalize_search_limit(value: Any) -> int:
    """Clamp a result limit to 1-10. Missing or invalid gives 5."""
    if isinstance(value, bool):
        return DEFAULT_SEARCH_LIMIT
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return DEFAULT_SEARCH_LIMIT
    if not math.isfinite(numeric):
        return DEFAULT_SEARCH_LIMIT
    if numeric < 1:
        return 1
    return int(min(numeric, MAX_SEARCH_LIMIT))


def _as_str(value: Any) -> Optional[str]:
    return value.strip() if isinstance(value, str) and value.strip() else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _display_text(value: Any) -> Optional[str]:
    if isinstance(value, Mapping):
        return _as_str(value.get("text"))
    return _as_str(value)


def candidate_from_place(
    place: Mapping[str, Any], query: str
) -> PlaceSearchCandidate:
    """Build a candidate from one Places API (New) place payload."""
    location = place.get("location")
    location = location if isinstance(location, Mapping) else {}
    types = place.get("types")
    formatted_address = _as_str(place.get("formattedAddress"))

    return PlaceSearchCandidate(
        display_name=(
            _display_text(place.get("displayName"))
            or _display_text(place.get("name"))
            or query
        ),
        source="places",
        provider_place_id=_as_str(place.get("id")),
        secondary_text=formatted_address,
        formatted_address=formatted_address,
        lat=_as_float(location.get("latitude")),
        lng=_as_float(location.get("longitude")),
        categories=(
            tuple(t for t in types if isinstance(t, str)) if isinstance(types, list) else ()
        ),
        maps_uri=_as_str(place.get("googleMapsUri")),
    )


def candidate_from_resolved(place: ResolvedPlace) -> Optional[PlaceSearchCandidate]:
    """Build the fallback candidate of a resolved place, if any."""
    if not place.resolved and not place.display_name:
        return None

    display_name = place.display_name or place.name
    maps_uri = None
    if place.place_id:
        maps_uri = (
            "https://www.google.com/maps/search/?api=1"
            f"&query={quote(display_name, safe='')}"
            f"&query_place_id={quote(place.place_id, safe='')}"
        )

    return PlaceSearchCandidate(
        display_name=display_name,
        source="geocoding",
        provider_place_id=place.place_id or None,
        secondary_text=place.formatted_address or None,
        formatted_address=place.formatted_address or None,
        lat=place.lat,
        lng=place.lng,
        maps_uri=maps_uri,
    )


@dataclass
class PlaceSearchService:
    """Searches places by free text, rate limited per client.

    Attributes:
        client: Places API (New) client
        resolver: Provider chain whose geocoding stages back up search
        rate_limiter: Per-client spacing for search requests
    """

    client: PlaceDetailsClientPort
    resolver: PlaceResolver
    rate_limiter: ClientRateLimiter

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def search(
        self,
        query: str,
        destination_context: Optional[str],
        limit: int,
        client_id: str,
    ) -> List[PlaceSearchCandidate]:
        """Search places matching a query.

        Args:
            query: Trimmed, non-empty search text.
            destination_context: Optional destination appended to the query.
            limit: Maximum number of candidates, already clamped to 1-10.
            client_id: Rate limiting identity.

        Returns:
            Places candidates in provider order, else at most one
            geocoding candidate, else nothing.

        Raises:
            RateLimitExceededError: The client searched again too soon.
            ProviderResponseError: Places Text Search answered with an
                error status (``status_code`` 429 when rate limited).
            ProviderUnavailableError: A provider could not be reached.
        """
        self.rate_limiter.check(client_id)

        if self.client.is_configured:
            places = self.client.search_candidates(
                build_search_query(query, destination_context), limit
            )
            candidates = [candidate_from_place(place, query) for place in places]
            if candidates:
                self._logger.info(
                    "Place search answered by text search",
                    extra={"query": query, "count": len(candidates)},
                )
                return candidates[:limit]

        fallback = self.resolver.restricted_to(*FALLBACK_SOURCES).resolve(
            query, destination_context
        )
        candidate = candidate_from_resolved(fallback)
        self._logger.info(
            "Place search answered by geocoding",
            extra={"query": query, "found": candidate is not None},
        )
        return [candidate] if candidate is not None else []
