"""Nominatim geocoder adapter.

Last stage of the resolution chain. OpenStreetMap needs no key, so this
stage always runs when the Google stages are skipped or fail. Calls go
through geopy's RateLimiter to respect the public endpoint's usage
policy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim

from ...config import NominatimConfig, get_config
from ...domain.errors import ProviderResponseError, ProviderUnavailableError
from ...domain.models import PlaceSource, ProviderCandidate, ResolvedPlace
from .address_components import nominatim_address_components


@dataclass
class NominatimAdapter:
    """Nominatim geocoder adapter with outbound rate limiting.

    Implements PlaceProviderPort. Always configured, and the only stage
    that accepts the first result when nothing matches the destination.

    Attributes:
        config: Nominatim configuration
    """

    config: NominatimConfig = field(default_factory=lambda: get_config().nominatim)

    source: PlaceSource = field(default="nominatim", init=False)
    fallback_to_first: bool = field(default=True, init=False)
    _geolocator: Optional[Nominatim] = field(default=None, repr=False)
    _geocode_fn: Optional[Any] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def is_configured(self) -> bool:
        return True

    def _get_geocoder(self) -> Any:
        """Get or initialize the geocoder with rate limiting."""
        if self._geocode_fn is not None:
            return self._geocode_fn

        self._logger.debug(
            "Initializing Nominatim geocoder",
            extra={
                "user_agent": self.config.user_agent,
                "timeout": self.config.timeout_seconds,
            },
        )

        self._geolocator = Nominatim(
            user_agent=self.config.user_agent,
            timeout=self.config.timeout_seconds,
        )

        self._geocode_fn = RateLimiter(
            self._geolocator.geocode,
            min_delay_seconds=self.config.rate_limit_delay,
            max_retries=self.config.max_retries,
            error_wait_seconds=self.config.error_wait_seconds,
            swallow_exceptions=False,
        )

        return self._geocode_fn

    def search(self, search_query: str) -> List[ProviderCandidate]:
        """Search OpenStreetMap.

        Args:
            search_query: Free-text query, destination included.

        Returns:
            Up to ``result_limit`` candidates with address details.

        Raises:
            ProviderUnavailableError: Timeout or unreachable service.
            ProviderResponseError: Any other geocoder error.
        """
        try:
            locations = self._get_geocoder()(
                search_query,
                exactly_one=False,
                limit=self.config.result_limit,
                addressdetails=True,
                language=self.config.language,
            )
        except (GeocoderTimedOut, GeocoderUnavailable) as e:
            self._logger.warning(
                "Nominatim unavailable",
                extra={"query": search_query, "error": str(e)},
            )
            raise ProviderUnavailableError(
                "nominatim unavailable",
                cause=e,
                provider=self.source,
                query=search_query,
            )
        except GeocoderServiceError as e:
            self._logger.warning(
                "Nominatim service error",
                extra={"query": search_query, "error": str(e)},
            )
            raise ProviderResponseError(
                "nominatim service error",
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
        """Map a Nominatim result.

        Nominatim matches are always best guesses with low confidence.
        ``display_name`` doubles as the formatted address.
        """
        raw = candidate.raw
        lat, lon = raw.get("lat"), raw.get("lon")
        if not lat or not lon:
            return ResolvedPlace.unresolved(query)

        try:
            lat_value, lng_value = float(lat), float(lon)
        except (TypeError, ValueError):
            self._logger.debug(
                "Nominatim result has invalid coordinates",
                extra={"query": query, "lat": lat, "lon": lon},
            )
            return ResolvedPlace.unresolved(query)

        display_name = raw.get("display_name")
        display_name = display_name if isinstance(display_name, str) else None

        return ResolvedPlace(
            name=query,
            resolved=True,
            display_name=display_name or query,
            formatted_address=display_name,
            address=display_name,
            address_components=nominatim_address_components(raw.get("address")),
            lat=lat_value,
            lng=lng_value,
            source=self.source,
            best_guess=True,
            confidence="low",
        )
