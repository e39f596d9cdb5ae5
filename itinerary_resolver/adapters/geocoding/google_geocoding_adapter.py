"""Google Geocoding adapter.

Second stage of the resolution chain, backed by geopy's ``GoogleV3``
geocoder. Geocoding handles addresses, neighbourhoods and cities that
Text Search misses.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable
from geopy.geocoders import GoogleV3

from ...config import GoogleConfig, get_config
from ...domain.errors import ProviderResponseError, ProviderUnavailableError
from ...domain.models import PlaceSource, ProviderCandidate, ResolvedPlace
from .address_components import google_address_components, google_location


@dataclass
class GoogleGeocodingAdapter:
    """Google Geocoding API through geopy.

    Implements PlaceProviderPort. Unconfigured without a geocoding key
    (``GOOGLE_GEOCODING_API_KEY``, falling back to ``GOOGLE_API_KEY``).

    Attributes:
        config: Google configuration
    """

    config: GoogleConfig = field(default_factory=lambda: get_config().google)

    source: PlaceSource = field(default="geocoding", init=False)
    fallback_to_first: bool = field(default=False, init=False)
    _geolocator: Optional[GoogleV3] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def is_configured(self) -> bool:
        return bool(self.config.resolved_geocoding_key)

    def _get_geocoder(self) -> GoogleV3:
        """Get or initialize the geocoder."""
        if self._geolocator is None:
            self._logger.debug(
                "Initializing Google geocoder",
                extra={"timeout": self.config.timeout_seconds},
            )
            self._geolocator = GoogleV3(
                api_key=self.config.resolved_geocoding_key,
                timeout=self.config.timeout_seconds,
            )
        return self._geolocator

    def search(self, search_query: str) -> List[ProviderCandidate]:
        """Geocode a query.

        Args:
            search_query: Free-text query, destination included.

        Returns:
            Candidates holding the raw Geocoding API results.

        Raises:
            ProviderUnavailableError: Timeout or unreachable service.
            ProviderResponseError: Any other geocoder error status.
        """
        try:
            locations = self._get_geocoder().geocode(
                search_query,
                exactly_one=False,
                language=self.config.language,
            )
        except (GeocoderTimedOut, GeocoderUnavailable) as e:
            self._logger.warning(
                "Geocoding service unavailable",
                extra={"query": search_query, "error": str(e)},
            )
            raise ProviderUnavailableError(
                "geocoding service unavailable",
                cause=e,
                provider=self.source,
                query=search_query,
            )
        except GeocoderServiceError as e:
            self._logger.warning(
                "Geocoding service error",
                extra={"query": search_query, "error": str(e)},
            )
            raise ProviderResponseError(
                "geocoding service error",
                cause=e,
                provider=self.source,
                query=search_query,
            )

        return [
            ProviderCandidate(source=self.source, raw=location.raw)
            for location in locations or []
        ]

    def to_resolved_place(
        self,
        candidate: ProviderCandidate,
        query: str,
        destination: Optional[str],
    ) -> ResolvedPlace:
        """Map a Geocoding result. Resolved iff lat and lng are numeric."""
        raw: Any = candidate.raw
        lat, lng = google_location(raw)
        if lat is None or lng is None:
            return ResolvedPlace.unresolved(query)

        formatted_address = raw.get("formatted_address")
        formatted_address = formatted_address if isinstance(formatted_address, str) else None

        return ResolvedPlace(
            name=query,
            resolved=True,
            display_name=formatted_address or query,
            formatted_address=formatted_address,
            address=formatted_address,
            address_components=google_address_components(raw.get("address_components")),
            lat=lat,
            lng=lng,
            source=self.source,
            best_guess=not destination,
            confidence="high" if destination else "medium",
        )
