"""Geocoding adapters - Implementations of PlaceProviderPort.

Available implementations, in resolution order:
- GooglePlacesAdapter: Google Places Text Search plus Place Details
- GoogleGeocodingAdapter: Google Geocoding API (geopy GoogleV3)
- NominatimAdapter: OpenStreetMap Nominatim (geopy)
"""

from .google_geocoding_adapter import GoogleGeocodingAdapter
from .google_places_adapter import GooglePlacesAdapter
from .nominatim_adapter import NominatimAdapter

__all__ = ["GooglePlacesAdapter", "GoogleGeocodingAdapter", "NominatimAdapter"]
