"""Tests for the Places API (New) details client."""

from unittest.mock import MagicMock

import pytest

from itinerary_resolver.adapters.places import PlaceDetailsClient
from itinerary_resolver.adapters.places.place_details_adapter import to_place_resource
from itinerary_resolver.config import GoogleConfig
from itinerary_resolver.domain.errors import ProviderResponseError


def make_response(payload, status_code=200):
    response = MagicMock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.json.return_value = payload
    response.text = ""
    return response


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    return PlaceDetailsClient(config=GoogleConfig(api_key="k"), session=session)


@pytest.mark.parametrize(
    "place_id, expected",
    [("ChIJabc", "places/ChIJabc"), ("places/ChIJabc", "places/ChIJabc")],
)
def test_to_place_resource(place_id, expected):
    assert to_place_resource(place_id) == expected


def test_get_place_sends_field_mask(client, session):
    session.request.return_value = make_response({"id": "ChIJabc"})

    assert client.get_place("ChIJabc") == {"id": "ChIJabc"}

    args, kwargs = session.request.call_args
    assert args == ("GET", "https://places.googleapis.com/v1/places/ChIJabc")
    assert kwargs["headers"]["X-Goog-Api-Key"] == "k"
    assert "reviews" in kwargs["headers"]["X-Goog-FieldMask"]
    assert kwargs["timeout"] == 4.5


def test_unknown_id_returns_none(client, session):
    session.request.return_value = make_response({}, status_code=404)
    assert client.get_place("stale") is None


def test_other_errors_propagate(client, session):
    session.request.return_value = make_response({}, status_code=403)
    with pytest.raises(ProviderResponseError):
        client.get_place("ChIJabc")


def test_search_text_returns_first_place(client, session):
    session.request.return_value = make_response(
        {"places": [{"id": "ChIJfirst"}, {"id": "ChIJsecond"}]}
    )

    assert client.search_text("Oratory, Montreal") == {"id": "ChIJfirst"}
    _, kwargs = session.request.call_args
    assert kwargs["json"] == {
        "textQuery": "Oratory, Montreal",
        "languageCode": "en",
        "pageSize": 1,
    }


def test_search_text_without_matches(client, session):
    session.request.return_value = make_response({})
    assert client.search_text("nowhere") is None


def test_search_candidates_returns_every_place(client, session):
    session.request.return_value = make_response(
        {"places": [{"id": "ChIJfirst"}, "bogus", {"id": "ChIJsecond"}]}
    )

    assert client.search_candidates("Oratory, Montreal", 3) == [
        {"id": "ChIJfirst"},
        {"id": "ChIJsecond"},
    ]
    _, kwargs = session.request.call_args
    assert kwargs["json"]["pageSize"] == 3
    assert "places.location" in kwargs["headers"]["X-Goog-FieldMask"]


def test_search_candidates_rate_limited(client, session):
    session.request.return_value = make_response({}, status_code=429)

    with pytest.raises(ProviderResponseError) as info:
        client.search_candidates("Oratory", 5)

    assert info.value.status_code == 429
