"""Place details adapters - Implementations of PlaceDetailsClientPort.

Available implementations:
- PlaceDetailsClient: Google Places API (New)
"""

from .place_details_adapter import PlaceDetailsClient

__all__ = ["PlaceDetailsClient"]
