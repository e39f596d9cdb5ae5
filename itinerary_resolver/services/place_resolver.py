"""Multi-provider place resolution with explicit fallback handling.

Stages run in order (Places Text Search, Geocoding, Nominatim) and the
first stage producing a resolved place wins. A stage fails when its
provider is unconfigured, returns nothing matching the destination,
maps to an unresolved place, or raises a provider error. Failures are
logged and the next stage runs; only an unreachable provider in the
final stage propagates, since no fallback is left.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..domain.errors import ProviderResponseError, ProviderUnavailableError
from ..domain.models import ResolvedPlace
from ..ports.geocoding import PlaceProviderPort
from .destination_matcher import select_candidate


def build_search_query(query: str, destination: Optional[str]) -> str:
    """Append the destination to the query, comma separated."""
    return f"{query}, {destination}" if destination else query


@dataclass
class PlaceResolver:
    """Resolves a place name to a canonical, geocoded place.

    Attributes:
        providers: Provider stages in fallback order
    """

    providers: Sequence[PlaceProviderPort]

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def is_stage_configured(self, source: str) -> bool:
        """Check whether a stage with the given source can run."""
        return any(p.source == source and p.is_configured for p in self.providers)

    def restricted_to(self, *sources: str) -> PlaceResolver:
        """Return a resolver running only the stages of the given sources."""
        return PlaceResolver([p for p in self.providers if p.source in sources])

    def resolve(self, query: str, destination: Optional[str] = None) -> ResolvedPlace:
        """Resolve a place name through the provider chain.

        Args:
            query: Place name as written by the user.
            destination: Optional destination ("Lisbon, Portugal").

        Returns:
            The first resolved place, or ``ResolvedPlace.unresolved``.

        Raises:
            ProviderUnavailableError: The final stage could not be reached.
        """
        search_query = build_search_query(query, destination)
        last_index = len(self.providers) - 1

        for index, provider in enumerate(self.providers):
            if not provider.is_configured:
                continue

            try:
                candidates = provider.search(search_query)
            except ProviderResponseError as e:
                self._logger.warning(
                    "Provider stage failed, falling through",
                    extra={"provider": provider.source, "query": query, "error": str(e)},
                )
                continue
            except ProviderUnavailableError as e:
                if index == last_index:
                    self._logger.error(
                        "Last provider stage unavailable",
                        extra={"provider": provider.source, "query": query, "error": str(e)},
                    )
                    raise
                self._logger.warning(
                    "Provider unavailable, falling through",
                    extra={"provider": provider.source, "query": query, "error": str(e)},
                )
                continue

            selected = select_candidate(
                [candidate.raw for candidate in candidates],
                destination,
                fallback_to_first=provider.fallback_to_first,
            )
            if selected is None:
                self._logger.debug(
                    "No matching candidate",
                    extra={
                        "provider": provider.source,
                        "query": query,
                        "candidates": len(candidates),
                    },
                )
                continue

            candidate = next(c for c in candidates if c.raw is selected)
            place = provider.to_resolved_place(candidate, query, destination)
            if place.resolved:
                self._logger.debug(
                    "Place resolved",
                    extra={
                        "provider": provider.source,
                        "query": query,
                        "confidence": place.confidence,
                    },
                )
                return place

            self._logger.debug(
                "Candidate has no coordinates",
                extra={"provider": provider.source, "query": query},
            )

        self._logger.info("Place could not be resolved", extra={"query": query})
        return ResolvedPlace.unresolved(query)
