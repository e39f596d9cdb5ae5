"""Google Places Text Search adapter.

First stage of the resolution chain. Text Search ranks points of
interest well ("Time Out Market, Lisbon"), and the follow-up Place
Details call gives precise address components and geometry for the
selected result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import requests

from ...config import GoogleConfig, get_config
from ...domain.errors import ProviderError, ProviderResponseError
from ...domain.models import PlaceSource, ProviderCandidate, ResolvedPlace
from ..http_json import request_json
from .address_components import google_address_components, google_location

ACCEPTED_STATUSES = ("OK", "ZERO_RESULTS")
DETAILS_FIELDS = "address_component,formatted_address,name,geometry"


@dataclass
class GooglePlacesAdapter:
    """Places Text Search plus Place Details.

    Implements PlaceProviderPort. Unconfigured without a Places key
    (``GOOGLE_PLACES_API_KEY``, falling back to ``GOOGLE_API_KEY``).

    Attributes:
        config: Google configuration
        session: HTTP session shared by search and details calls
    """

    config: GoogleConfig = field(default_factory=lambda: get_config().google)
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    source: PlaceSource = field(default="places", init=False)
    fallback_to_first: bool = field(default=False, init=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def is_configured(self) -> bool:
        return bool(self.config.resolved_places_key)

    def _get(self, path: str, params: Dict[str, Any], query: str) -> Mapping[str, Any]:
        payload = request_json(
            self.session,
            "GET",
            f"{self.config.places_base_url}/{path}",
            provider=self.source,
            query=query,
            timeout=self.config.timeout_seconds,
            params={
                **params,
                "key": self.config.resolved_places_key,
                "language": self.config.language,
            },
        )
        if not isinstance(payload, Mapping):
            raise ProviderResponseError(
                "places returned a non-object body", provider=self.source, query=query
            )

        status = payload.get("status")
        if isinstance(status, str) and status not in ACCEPTED_STATUSES:
            self._logger.warning(
                "Places API error status",
                extra={
                    "query": query,
                    "status": status,
                    "error_message": payload.get("error_message", ""),
                },
            )
            raise ProviderResponseError(
                f"places returned status {status}", provider=self.source, query=query
            )
        return payload

    def search(self, search_query: str) -> List[ProviderCandidate]:
        """Run a Text Search.

        Args:
            search_query: Free-text query, destination included.

        Returns:
            Candidates in Google's ranking order.
        """
        payload = self._get("textsearch/json", {"query": search_query}, search_query)
        results = payload.get("results")
        if not isinstance(results, list):
            return []
        return [
            ProviderCandidate(source=self.source, raw=result)
            for result in results
            if isinstance(result, Mapping)
        ]

    def fetch_details(self, place_id: str, query: str) -> Optional[Mapping[str, Any]]:
        """Fetch Place Details, or None when the call fails."""
        try:
            payload = self._get(
                "details/json",
                {"place_id": place_id, "fields": DETAILS_FIELDS},
                query,
            )
        except ProviderError as e:
            self._logger.warning(
                "Place details lookup failed, using search fields",
                extra={"place_id": place_id, "query": query, "error": str(e)},
            )
            return None

        result = payload.get("result")
        return result if isinstance(result, Mapping) else None

    def to_resolved_place(
        self,
        candidate: ProviderCandidate,
        query: str,
        destination: Optional[str],
    ) -> ResolvedPlace:
        """Map a Text Search result, enriched with its Place Details.

        Confidence is ``"high"`` when a destination constrained the
        search and ``"medium"`` otherwise. The place is resolved when
        both coordinates are present and non-zero.
        """
        match = candidate.raw
        place_id = match.get("place_id") if isinstance(match.get("place_id"), str) else None
        details = self.fetch_details(place_id, query) if place_id else None

        lat, lng = google_location(details if details and "geometry" in details else match)

        def pick(key: str) -> Optional[str]:
            for source in (details, match):
                if source and isinstance(source.get(key), str):
                    return source[key]
            return None

        components_source = (
            details
            if details and isinstance(details.get("address_components"), list)
            else match
        )
        formatted_address = pick("formatted_address")

        return ResolvedPlace(
            name=query,
            resolved=bool(lat and lng),
            display_name=pick("name") or query,
            place_id=place_id,
            formatted_address=formatted_address,
            address=formatted_address,
            address_components=google_address_components(
                components_source.get("address_components")
            ),
            lat=lat,
            lng=lng,
            source=self.source,
            best_guess=not destination,
            confidence="high" if destination else "medium",
        )
