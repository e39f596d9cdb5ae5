"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the application to external systems like:
- Place providers (Google Places, Google Geocoding, Nominatim)
- Place details (Google Places API New)
- Language-model extraction (Gemini)
- Itinerary parsing (rule-based)
- Caching systems (in-memory, null)
- Per-client rate limiting
"""
