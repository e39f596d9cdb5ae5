"""Tests for batch and single-place geocoding."""

import pytest

from itinerary_resolver.adapters.cache import InMemoryCache, NullCache
from itinerary_resolver.adapters.ratelimit.client_rate_limiter import ClientRateLimiter
from itinerary_resolver.domain.errors import RateLimitExceededError
from itinerary_resolver.domain.models import Coordinates
from itinerary_resolver.services.geocode_service import GeocodeService, geocode_cache_key
from itinerary_resolver.services.place_resolver import PlaceResolver


@pytest.fixture
def provider(make_provider, petronas):
    return make_provider("nominatim", results=[petronas], fallback_to_first=True)


@pytest.fixture
def service(provider, clock):
    return GeocodeService(
        resolver=PlaceResolver([provider]),
        cache=InMemoryCache(ttl_seconds=3600, name="geocode", clock=clock),
        rate_limiter=ClientRateLimiter(min_interval_seconds=1.1, clock=clock),
    )


def test_cache_key_is_lowercased():
    assert geocode_cache_key("Alfama", "Lisbon") == "alfama|lisbon"
    assert geocode_cache_key("Alfama", None) == "alfama|"


class TestGeocode:
    def test_returns_coordinates(self, service):
        coords = service.geocode("Petronas Twin Towers", "Kuala Lumpur", "1.2.3.4")
        assert coords == Coordinates(lat=3.1579, lng=101.7116)

    def test_cached_result_is_reused_within_ttl(self, service, provider, clock):
        service.geocode("Petronas Twin Towers", "Kuala Lumpur", "a")
        clock.advance(59 * 60)
        service.geocode("PETRONAS twin towers", "kuala lumpur", "a")

        assert len(provider.calls) == 1

    def test_stale_entry_is_refetched(self, service, provider, clock):
        service.geocode("Petronas Twin Towers", "Kuala Lumpur", "a")
        clock.advance(61 * 60)
        service.geocode("Petronas Twin Towers", "Kuala Lumpur", "a")

        assert len(provider.calls) == 2

    def test_unresolvable_place_is_cached_as_none(self, service, provider, clock):
        provider.results = []

        assert service.geocode("Nowhere Cafe", None, "a") is None
        clock.advance(5)
        assert service.geocode("Nowhere Cafe", None, "a") is None
        assert len(provider.calls) == 1

    def test_rate_limit_applies_before_cache(self, service, clock):
        service.geocode("Petronas Twin Towers", None, "a")
        clock.advance(0.5)

        with pytest.raises(RateLimitExceededError) as info:
            service.geocode("Petronas Twin Towers", None, "a")
        assert info.value.retry_after_seconds == pytest.approx(0.6)

    def test_other_clients_are_not_limited(self, service):
        service.geocode("Petronas Twin Towers", None, "a")
        assert service.geocode("Petronas Twin Towers", None, "b") is not None

    def test_null_cache_always_asks_providers(self, provider, clock):
        service = GeocodeService(
            resolver=PlaceResolver([provider]),
            cache=NullCache(),
            rate_limiter=ClientRateLimiter(clock=clock),
        )
        service.geocode("Petronas Twin Towers", None, "a")
        clock.advance(2)
        service.geocode("Petronas Twin Towers", None, "a")

        assert len(provider.calls) == 2


class TestResolveBatch:
    def test_preserves_order_and_uses_context(self, service, provider):
        results = service.resolve_batch(
            [{"name": "Petronas Twin Towers"}, {"name": "KLCC Park"}],
            "Kuala Lumpur",
        )

        assert [place.name for place in results] == ["Petronas Twin Towers", "KLCC Park"]
        assert provider.calls == [
            "Petronas Twin Towers, Kuala Lumpur",
            "KLCC Park, Kuala Lumpur",
        ]

    def test_hint_overrides_context(self, service, provider):
        service.resolve_batch([{"name": "Petronas", "hint": "Malaysia"}], "Japan")
        assert provider.calls == ["Petronas, Malaysia"]

    def test_empty_hint_clears_context(self, service, provider):
        service.resolve_batch([{"name": "Petronas", "hint": ""}], "Japan")
        assert provider.calls == ["Petronas"]

    @pytest.mark.parametrize("item", [{"name": ""}, {"name": "   "}, {}, {"name": 42}])
    def test_blank_names_are_unresolved_without_lookup(self, service, provider, item):
        results = service.resolve_batch([item], "Kuala Lumpur")

        assert len(results) == 1
        assert not results[0].resolved
        assert provider.calls == []

    def test_batch_is_not_rate_limited(self, service):
        results = service.resolve_batch([{"name": "A"}, {"name": "B"}, {"name": "C"}])
        assert all(place.resolved for place in results)
