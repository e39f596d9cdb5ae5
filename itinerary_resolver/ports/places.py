"""Place details port - Canonical place identity and reviews."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol


class PlaceDetailsClientPort(Protocol):
    """Port for the details provider (Google Places API, new version).

    Implementation: adapters/places/place_details_adapter.py

    Every method returns raw provider place payloads so the services
    own the normalization of reviews and search candidates.
    """

    @property
    def is_configured(self) -> bool:
        ...

    def get_place(self, provider_place_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a place by provider id.

        Returns:
            The place payload, or None when the provider has no such id.

        Raises:
            ProviderResponseError: Any other non-OK response.
            ProviderUnavailableError: The provider could not be reached.
        """
        ...

    def search_text(self, text_query: str) -> Optional[Dict[str, Any]]:
        """Resolve free text to the single best matching place.

        Returns:
            The first matching place payload, or None.

        Raises:
            ProviderResponseError: Non-OK response.
            ProviderUnavailableError: The provider could not be reached.
        """
        ...

    def search_candidates(self, text_query: str, limit: int) -> List[Dict[str, Any]]:
        """Return up to ``limit`` place payloads matching free text.

        Raises:
            ProviderResponseError: Non-OK response (``status_code`` 429
                when the provider rate limits).
            ProviderUnavailableError: The provider could not be reached.
        """
        ...
