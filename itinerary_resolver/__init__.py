"""Top-level package for the Itinerary Place Resolver.

Turns messy, human-written itinerary text into day-grouped place
candidates, then resolves each candidate to a canonical, geocoded place
through a Google Places, Google Geocoding and Nominatim fallback chain.
"""
