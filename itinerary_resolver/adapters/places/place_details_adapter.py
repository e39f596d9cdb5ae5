"""Google Places API (New) client for canonical place details.

Place lookups go through ``GET /v1/places/{id}`` and free-text lookups
through ``POST /v1/places:searchText``, with a page size of one for
details and up to ten for place search. Every call carries a short
timeout since it sits on an interactive path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import requests

from ...config import GoogleConfig, get_config
from ...domain.errors import ProviderResponseError
from ..http_json import request_json

PROVIDER = "places_v1"

DETAILS_FIELD_MASK = ",".join(
    (
        "id",
        "displayName",
        "formattedAddress",
        "googleMapsUri",
        "rating",
        "userRatingCount",
        "reviews",
    )
)
SEARCH_FIELD_MASK = "places.id,places.displayName,places.formattedAddress"
CANDIDATES_FIELD_MASK = ",".join(
    f"places.{name}"
    for name in (
        "id",
        "name",
        "displayName",
        "formattedAddress",
        "location",
        "types",
        "googleMapsUri",
    )
)


def to_place_resource(place_id: str) -> str:
    """Return the ``places/{id}`` resource name for an id."""
    return place_id if place_id.startswith("places/") else f"places/{place_id}"


@dataclass
class PlaceDetailsClient:
    """Places API (New) client implementing PlaceDetailsClientPort.

    Attributes:
        config: Google configuration
        session: HTTP session for the API calls
    """

    config: GoogleConfig = field(default_factory=lambda: get_config().google)
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def is_configured(self) -> bool:
        return bool(self.config.resolved_places_key)

    def _headers(self, field_mask: str) -> Dict[str, str]:
        return {
            "X-Goog-Api-Key": self.config.resolved_places_key or "",
            "X-Goog-FieldMask": field_mask,
        }

    def get_place(self, provider_place_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a place by id. An unknown id (HTTP 404) returns None."""
        try:
            payload = request_json(
                self.session,
                "GET",
                f"{self.config.places_v1_base_url}/{to_place_resource(provider_place_id)}",
                provider=PROVIDER,
                query=provider_place_id,
                timeout=self.config.details_timeout_seconds,
                headers=self._headers(DETAILS_FIELD_MASK),
            )
        except ProviderResponseError as e:
            if e.status_code == 404:
                self._logger.info(
                    "Place id not found", extra={"provider_place_id": provider_place_id}
                )
                return None
            raise

        return dict(payload) if isinstance(payload, Mapping) else {}

    def search_text(self, text_query: str) -> Optional[Dict[str, Any]]:
        """Return the first place matching a text query, or None."""
        payload = request_json(
            self.session,
            "POST",
            f"{self.config.places_v1_base_url}/places:searchText",
            provider=PROVIDER,
            query=text_query,
            timeout=self.config.details_timeout_seconds,
            headers=self._headers(SEARCH_FIELD_MASK),
            json={
                "textQuery": text_query,
                "languageCode": self.config.language,
                "pageSize": 1,
            },
        )
        places = payload.get("places") if isinstance(payload, Mapping) else None
        if not isinstance(places, list) or not places:
            return None
        first = places[0]
        return dict(first) if isinstance(first, Mapping) else None

    def search_candidates(self, text_query: str, limit: int) -> List[Dict[str, Any]]:
        """Return up to ``limit`` places matching a text query."""
        payload = request_json(
            self.session,
            "POST",
            f"{self.config.places_v1_base_url}/places:searchText",
            provider=PROVIDER,
            query=text_query,
            timeout=self.config.details_timeout_seconds,
            headers=self._headers(CANDIDATES_FIELD_MASK),
            json={
                "textQuery": text_query,
                "languageCode": self.config.language,
                "pageSize": limit,
            },
        )
        places = payload.get("places") if isinstance(payload, Mapping) else None
        if not isinstance(places, list):
            return []
        return [dict(place) for place in places if isinstance(place, Mapping)]
