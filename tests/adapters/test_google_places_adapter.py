"""Tests for the Places Text Search adapter."""

from unittest.mock import MagicMock

import pytest
import requests

from itinerary_resolver.adapters.geocoding import GooglePlacesAdapter
from itinerary_resolver.config import GoogleConfig
from itinerary_resolver.domain.errors import (
    ProviderResponseError,
    ProviderUnavailableError,
)
from itinerary_resolver.domain.models import AddressComponents, ProviderCandidate

TIME_OUT_MARKET = {
    "place_id": "ChIJtimeout",
    "name": "Time Out Market Lisboa",
    "formatted_address": "Av. 24 de Julho 49, Lisboa",
    "geometry": {"location": {"lat": 38.7069, "lng": -9.1459}},
}

DETAILS = {
    "name": "Time Out Market Lisboa",
    "formatted_address": "Av. 24 de Julho 49, 1200-479 Lisboa, Portugal",
    "geometry": {"location": {"lat": 38.70695, "lng": -9.14595}},
    "address_components": [
        {"long_name": "Lisboa", "types": ["locality", "political"]},
        {"long_name": "Lisboa", "types": ["administrative_area_level_1"]},
        {"long_name": "Portugal", "types": ["country", "political"]},
    ],
}


def make_response(payload, status_code=200):
    response = MagicMock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.json.return_value = payload
    response.text = str(payload)
    return response


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def adapter(session):
    return GooglePlacesAdapter(config=GoogleConfig(api_key="test-key"), session=session)


def test_configuration_follows_keys(session):
    assert not GooglePlacesAdapter(config=GoogleConfig(), session=session).is_configured
    config = GoogleConfig(places_api_key="places-only")
    assert GooglePlacesAdapter(config=config, session=session).is_configured


class TestSearch:
    def test_returns_candidates_in_order(self, adapter, session):
        session.request.return_value = make_response(
            {"status": "OK", "results": [TIME_OUT_MARKET, {"name": "Other"}]}
        )

        candidates = adapter.search("Time Out Market, Lisbon")

        assert [c.raw["name"] for c in candidates] == ["Time Out Market Lisboa", "Other"]
        assert all(c.source == "places" for c in candidates)
        _, kwargs = session.request.call_args
        assert kwargs["params"]["query"] == "Time Out Market, Lisbon"
        assert kwargs["params"]["key"] == "test-key"
        assert kwargs["params"]["language"] == "en"

    def test_zero_results(self, adapter, session):
        session.request.return_value = make_response({"status": "ZERO_RESULTS", "results": []})
        assert adapter.search("nothing") == []

    def test_error_status_fails_the_stage(self, adapter, session):
        session.request.return_value = make_response(
            {"status": "REQUEST_DENIED", "error_message": "bad key"}
        )
        with pytest.raises(ProviderResponseError):
            adapter.search("Alfama")

    def test_http_error(self, adapter, session):
        session.request.return_value = make_response({}, status_code=500)
        with pytest.raises(ProviderResponseError) as info:
            adapter.search("Alfama")
        assert info.value.status_code == 500

    def test_unreachable(self, adapter, session):
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(ProviderUnavailableError):
            adapter.search("Alfama")


class TestToResolvedPlace:
    def test_details_enrich_the_match(self, adapter, session):
        session.request.return_value = make_response({"status": "OK", "result": DETAILS})
        candidate = ProviderCandidate(source="places", raw=TIME_OUT_MARKET)

        place = adapter.to_resolved_place(candidate, "Time Out Market", "Lisbon")

        assert place.resolved
        assert place.name == "Time Out Market"
        assert place.display_name == "Time Out Market Lisboa"
        assert place.place_id == "ChIJtimeout"
        assert place.lat == 38.70695
        assert place.formatted_address.endswith("Portugal")
        assert place.address_components == AddressComponents(
            city="Lisboa", region="Lisboa", country="Portugal"
        )
        assert place.confidence == "high"
        assert place.best_guess is False

    def test_failed_details_use_search_fields(self, adapter, session):
        session.request.return_value = make_response({"status": "INVALID_REQUEST"})
        candidate = ProviderCandidate(source="places", raw=TIME_OUT_MARKET)

        place = adapter.to_resolved_place(candidate, "Time Out Market", None)

        assert place.resolved
        assert place.lat == 38.7069
        assert place.address_components is None
        assert place.confidence == "medium"
        assert place.best_guess is True

    def test_zero_coordinates_are_unresolved(self, adapter, session):
        raw = {"name": "Null Island", "geometry": {"location": {"lat": 0, "lng": 0}}}
        place = adapter.to_resolved_place(ProviderCandidate(source="places", raw=raw), "x", None)

        assert not place.resolved
        session.request.assert_not_called()
