"""Tests for canonical place details and review normalization."""

from unittest.mock import MagicMock

import pytest

from itinerary_resolver.domain.errors import (
    ConfigurationError,
    InvalidRequestError,
    PlaceNotFoundError,
)
from itinerary_resolver.services.place_details_service import (
    PlaceDetailsService,
    normalize_review_limit,
    normalize_reviews,
)

ORATORY = {
    "id": "ChIJoratory",
    "displayName": {"text": "St. Joseph's Oratory", "languageCode": "en"},
    "formattedAddress": "3800 Chem. Queen Mary, Montreal, QC",
    "googleMapsUri": "https://maps.google.com/?cid=1",
    "rating": 4.7,
    "userRatingCount": 21000,
    "reviews": [
        {
            "rating": 5,
            "text": {"text": "Stunning dome"},
            "originalText": {"text": "Dôme magnifique"},
            "publishTime": "2024-05-01T10:00:00Z",
            "relativePublishTimeDescription": "a year ago",
            "authorAttribution": {
                "displayName": "Marie",
                "uri": "https://maps.google.com/contrib/1",
                "photoUri": "https://lh3.example/photo.jpg",
            },
        },
        {"rating": 0, "text": {"text": "  "}, "publishTime": "2024-05-02T10:00:00Z"},
        {"rating": 4, "publishTime": "2024-05-03T10:00:00Z"},
    ],
}


@pytest.fixture
def client():
    mock = MagicMock()
    mock.is_configured = True
    mock.get_place.return_value = ORATORY
    mock.search_text.return_value = {"id": "ChIJoratory"}
    return mock


@pytest.fixture
def service(client):
    return PlaceDetailsService(client=client)


@pytest.mark.parametrize(
    "value, expected",
    [(None, 5), ("3", 3), (2.9, 2), (0, 5), (-1, 5), (12, 5), ("abc", 5), (float("nan"), 5)],
)
def test_normalize_review_limit(value, expected):
    assert normalize_review_limit(value) == expected


class TestNormalizeReviews:
    def test_original_text_wins_and_empty_reviews_drop(self):
        reviews = normalize_reviews(ORATORY["reviews"], "ChIJoratory", "https://fallback", 5)

        assert [r.text for r in reviews] == ["Dôme magnifique", ""]
        first = reviews[0]
        assert first.review_id == "ChIJoratory-0-2024-05-01T10:00:00Z"
        assert first.author_name == "Marie"
        assert first.author_avatar_url == "https://lh3.example/photo.jpg"
        assert first.source_url == "https://maps.google.com/contrib/1"
        assert first.relative_time_text == "a year ago"

    def test_rating_only_review_uses_fallbacks(self):
        reviews = normalize_reviews(ORATORY["reviews"], "ChIJoratory", "https://fallback", 5)

        last = reviews[-1]
        assert last.author_name == "Anonymous"
        assert last.source_url == "https://fallback"
        assert last.review_id == "ChIJoratory-2-2024-05-03T10:00:00Z"

    def test_limit_applies_before_filtering(self):
        reviews = normalize_reviews(ORATORY["reviews"], "x", None, 2)
        assert len(reviews) == 1

    def test_non_list_gives_nothing(self):
        assert normalize_reviews(None, "x", None, 5) == []

    def test_missing_publish_time_is_filled(self):
        reviews = normalize_reviews([{"rating": 3}], "x", None, 5)
        assert reviews[0].created_at.endswith("Z")


class TestGetDetails:
    def test_lookup_by_id(self, service, client):
        details = service.get_details(provider_place_id="ChIJoratory", review_limit=1)

        assert details.resolved_by == "provider_place_id"
        assert details.canonical_name == "St. Joseph's Oratory"
        assert details.user_rating_count == 21000
        assert len(details.reviews) == 1
        assert details.review_state == "available"
        client.search_text.assert_not_called()

    def test_unknown_id_falls_back_to_text_search(self, service, client):
        client.get_place.side_effect = [None, ORATORY]

        details = service.get_details(
            provider_place_id="stale-id",
            query_text="Oratory",
            destination_context="Montreal",
        )

        client.search_text.assert_called_once_with("Oratory, Montreal")
        assert details.provider_place_id == "ChIJoratory"
        assert details.resolved_by == "text_query"

    def test_query_only(self, service, client):
        details = service.get_details(query_text="Oratory")

        assert details.resolved_by == "text_query"
        client.get_place.assert_called_once_with("ChIJoratory")

    def test_missing_identity(self, service):
        with pytest.raises(InvalidRequestError):
            service.get_details(provider_place_id="  ", query_text=None)

    def test_unconfigured_client(self, service, client):
        client.is_configured = False
        with pytest.raises(ConfigurationError):
            service.get_details(query_text="Oratory")

    def test_nothing_found(self, service, client):
        client.search_text.return_value = None
        with pytest.raises(PlaceNotFoundError):
            service.get_details(query_text="Nowhere")

    def test_unknown_id_without_query(self, service, client):
        client.get_place.return_value = None
        with pytest.raises(PlaceNotFoundError):
            service.get_details(provider_place_id="stale-id")

    def test_missing_display_name_uses_query(self, service, client):
        client.get_place.return_value = {"id": "ChIJoratory"}

        details = service.get_details(query_text="Oratory")

        assert details.canonical_name == "Oratory"
        assert details.reviews == ()
        assert details.review_state == "empty"
