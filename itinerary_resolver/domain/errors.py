"""Typed domain errors for the Itinerary Place Resolver.

These error types replace silent exception swallowing with explicit,
typed errors that can be handled appropriately at each layer.

All errors inherit from ItineraryResolverError and can optionally
wrap a root cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ItineraryResolverError(Exception):
    """Base error for the itinerary resolver domain.

    All domain-specific errors inherit from this class.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class ExtractionError(ItineraryResolverError):
    """The language-model place extraction failed.

    Attributes:
        extractor: Name of the extractor that failed
        status_code: Upstream HTTP status, if the call got that far
    """

    extractor: str = ""
    status_code: Optional[int] = None

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429


@dataclass
class ProviderError(ItineraryResolverError):
    """A place provider call failed.

    Attributes:
        provider: Provider source name (places, geocoding, nominatim)
        query: The search query that failed
        status_code: HTTP status returned by the provider, if any
    """

    provider: str = ""
    query: str = ""
    status_code: Optional[int] = None


@dataclass
class ProviderResponseError(ProviderError):
    """The provider answered, but with an error status or a bad body.

    The resolver treats this as a failed stage and moves on.
    """


@dataclass
class ProviderUnavailableError(ProviderError):
    """The provider could not be reached at all.

    Raised past the resolver when no later stage exists.
    """


@dataclass
class RateLimitExceededError(ItineraryResolverError):
    """A client sent requests faster than the allowed spacing.

    Attributes:
        client_id: Best-effort client identity (usually an IP)
        retry_after_seconds: Time left before the next allowed request
    """

    client_id: str = ""
    retry_after_seconds: float = 0.0


@dataclass
class ConfigurationError(ItineraryResolverError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
        expected_type: Expected type or format
    """

    setting_name: str = ""
    expected_type: Optional[str] = None


@dataclass
class PlaceNotFoundError(ItineraryResolverError):
    """No place could be resolved for the given identity.

    Attributes:
        provider_place_id: Provider id that was looked up, if any
        query_text: Free-text query that was looked up, if any
    """

    provider_place_id: Optional[str] = None
    query_text: Optional[str] = None


@dataclass
class InvalidRequestError(ItineraryResolverError):
    """A request is missing a required field or has the wrong shape.

    The message is returned to the client verbatim.

    Attributes:
        field_name: Name of the offending request field
    """

    field_name: str = ""
