"""Shared fixtures for the itinerary resolver tests."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pytest

from itinerary_resolver.config import reset_config
from itinerary_resolver.container import reset_container
from itinerary_resolver.domain.models import (
    AddressComponents,
    ProviderCandidate,
    ResolvedPlace,
)

PROVIDER_ENV_VARS = (
    "GOOGLE_API_KEY",
    "GOOGLE_PLACES_API_KEY",
    "GOOGLE_GEOCODING_API_KEY",
    "GOOGLE_API_KEY_TEXT_EXTRACT",
    "GEMINI_MODEL",
    "GOOGLE_GEMINI_MODEL",
    "GEMINI_TEXT_EXT_MODEL",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep real credentials out of the tests and reset singletons."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    reset_container()
    yield
    reset_config()
    reset_container()


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@dataclass
class FakeProvider:
    """In-memory PlaceProviderPort.

    Results are flat dicts with ``name``, ``formatted_address``, ``lat``,
    ``lng`` and an optional ``city``.
    """

    source: str
    results: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[Exception] = None
    configured: bool = True
    fallback_to_first: bool = False
    calls: List[str] = field(default_factory=list)

    @property
    def is_configured(self) -> bool:
        return self.configured

    def search(self, search_query: str) -> List[ProviderCandidate]:
        self.calls.append(search_query)
        if self.error is not None:
            raise self.error
        return [ProviderCandidate(source=self.source, raw=raw) for raw in self.results]

    def to_resolved_place(self, candidate, query, destination) -> ResolvedPlace:
        raw = candidate.raw
        if raw.get("lat") is None or raw.get("lng") is None:
            return ResolvedPlace.unresolved(query)
        city = raw.get("city")
        return ResolvedPlace(
            name=query,
            resolved=True,
            display_name=raw.get("name") or query,
            formatted_address=raw.get("formatted_address"),
            address=raw.get("formatted_address"),
            address_components=AddressComponents(city=city) if city else None,
            lat=raw["lat"],
            lng=raw["lng"],
            source=self.source,
            best_guess=not destination,
            confidence="high" if destination else "medium",
        )


@pytest.fixture
def petronas():
    return {
        "name": "Petronas Twin Towers",
        "formatted_address": "Kuala Lumpur City Centre, Kuala Lumpur, Malaysia",
        "lat": 3.1579,
        "lng": 101.7116,
        "city": "Kuala Lumpur",
    }


@pytest.fixture
def make_provider():
    """Factory for FakeProvider stages."""

    def _make(source: str, **kwargs: Any) -> FakeProvider:
        return FakeProvider(source=source, **kwargs)

    return _make
