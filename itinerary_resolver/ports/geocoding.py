"""Geocoding port - Abstraction over place search providers.

Each provider returns its own JSON shape. Adapters keep those field
paths to themselves: ``search`` returns raw candidates tagged with the
provider name and ``to_resolved_place`` maps one of them into the common
``ResolvedPlace``. The resolver only drives the fallback order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import PlaceSource, ProviderCandidate, ResolvedPlace


class PlaceProviderPort(Protocol):
    """Port for one stage of the place resolution chain.

    Implementations:
    - adapters/geocoding/google_places_adapter.py (Places Text Search)
    - adapters/geocoding/google_geocoding_adapter.py (Geocoding API)
    - adapters/geocoding/nominatim_adapter.py (OpenStreetMap)

    Attributes:
        source: Provider name written to ``ResolvedPlace.source``
        fallback_to_first: Whether the first result is accepted when no
            result matches the destination
    """

    source: PlaceSource
    fallback_to_first: bool

    @property
    def is_configured(self) -> bool:
        """Check if the provider has the credentials it needs."""
        ...

    def search(self, search_query: str) -> List[ProviderCandidate]:
        """Search the provider.

        Args:
            search_query: The query, already combined with the destination.

        Returns:
            Raw candidates in provider ranking order, possibly empty.

        Raises:
            ProviderResponseError: The provider answered with an error.
            ProviderUnavailableError: The provider could not be reached.
        """
        ...

    def to_resolved_place(
        self,
        candidate: ProviderCandidate,
        query: str,
        destination: Optional[str],
    ) -> ResolvedPlace:
        """Map a raw candidate into a ResolvedPlace.

        Args:
            candidate: A candidate returned by this provider's ``search``.
            query: The original place name, used as the fallback name.
            destination: The destination the search was made for.

        Returns:
            The mapped place; ``resolved`` is False without coordinates.
        """
        ...
