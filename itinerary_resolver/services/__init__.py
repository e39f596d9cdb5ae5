"""Services layer - Application orchestration.

This module contains the application services that orchestrate the
flow of data through adapters to fulfill use cases.

Available services:
- PlaceResolver: Multi-provider place resolution with fallback
- GeocodeService: Batch resolution and cached, rate-limited geocoding
- ItineraryExtractionService: Parser plus optional language model
- PlaceDetailsService: Canonical place identity and reviews
- PlaceSearchService: Free-text place search with a geocoding fallback
"""

from .destination_matcher import matches_destination, select_candidate
from .geocode_service import GeocodeService
from .itinerary_extraction_service import ItineraryExtractionService
from .place_details_service import PlaceDetailsService
from .place_resolver import PlaceResolver, build_search_query
from .place_search_service import PlaceSearchService, normalize_search_limit

__all__ = [
    "GeocodeService",
    "ItineraryExtractionService",
    "PlaceDetailsService",
    "PlaceResolver",
    "PlaceSearchService",
    "build_search_query",
    "matches_destination",
    "normalize_search_limit",
    "select_candidate",
]
