"""Domain layer - Core business models and errors.

This module contains immutable domain models and typed errors
used throughout the application. No external dependencies.
"""

from .errors import (
    ConfigurationError,
    ExtractionError,
    InvalidRequestError,
    ItineraryResolverError,
    PlaceNotFoundError,
    ProviderError,
    ProviderResponseError,
    ProviderUnavailableError,
    RateLimitExceededError,
)
from .models import (
    AMBIGUOUS_PLACE_NAME,
    MAX_DURATION_DAYS,
    NO_PLACES_FOUND,
    AddressComponents,
    CacheEntry,
    Coordinates,
    ExtractedPlace,
    ItineraryExtraction,
    LineClassification,
    LineKind,
    ParsedDayGroup,
    ParsedPlace,
    ParseResult,
    PlaceDetails,
    PlaceExtraction,
    PlaceReview,
    PlaceSearchCandidate,
    ProviderCandidate,
    ResolvedPlace,
)

__all__ = [
    # Models
    "LineKind",
    "LineClassification",
    "ParsedPlace",
    "ParsedDayGroup",
    "ParseResult",
    "Coordinates",
    "AddressComponents",
    "ProviderCandidate",
    "ResolvedPlace",
    "CacheEntry",
    "ExtractedPlace",
    "PlaceExtraction",
    "ItineraryExtraction",
    "PlaceReview",
    "PlaceDetails",
    "PlaceSearchCandidate",
    "NO_PLACES_FOUND",
    "AMBIGUOUS_PLACE_NAME",
    "MAX_DURATION_DAYS",
    # Errors
    "ItineraryResolverError",
    "ExtractionError",
    "InvalidRequestError",
    "ProviderError",
    "ProviderResponseError",
    "ProviderUnavailableError",
    "RateLimitExceededError",
    "ConfigurationError",
    "PlaceNotFoundError",
]
