"""Canonical place identity and reviews.

A place is looked up by provider id first. When the id is missing or
unknown and a free-text query is available, the query (combined with
the destination context) is resolved to an id through text search.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from ..domain.errors import (
    ConfigurationError,
    InvalidRequestError,
    PlaceNotFoundError,
)
from ..domain.models import PlaceDetails, PlaceReview
from ..ports.places import PlaceDetailsClientPort
from .place_resolver import build_search_query

MAX_REVIEWS = 5


def normalize_review_limit(value: Any) -> int:
    """Clamp a review limit to 1-5. Missing, invalid or < 1 gives 5."""
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return MAX_REVIEWS
    if numeric != numeric or numeric < 1:
        return MAX_REVIEWS
    return int(min(numeric, MAX_REVIEWS))


def _as_str(value: Any) -> Optional[str]:
    return value.strip() if isinstance(value, str) and value.strip() else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _display_text(value: Any) -> Optional[str]:
    """Read a plain string or a ``{"text": ...}`` localized text."""
    if isinstance(value, Mapping):
        return _as_str(value.get("text"))
    return _as_str(value)


def _review_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping) and isinstance(value.get("text"), str):
        return value["text"]
    return ""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_reviews(
    reviews: Any,
    provider_place_id: str,
    fallback_source_url: Optional[str],
    limit: int,
) -> List[PlaceReview]:
    """Normalize provider reviews.

    The first ``limit`` reviews are kept when they have text or a
    positive rating. Review ids combine the place id, the position and
    the publish time.
    """
    if not isinstance(reviews, list):
        return []

    normalized: List[PlaceReview] = []
    for index, review in enumerate(reviews[:limit]):
        record = review if isinstance(review, Mapping) else {}
        author = record.get("authorAttribution")
        author = author if isinstance(author, Mapping) else {}

        text = _review_text(record.get("originalText")) or _review_text(record.get("text"))
        published = _as_str(record.get("publishTime")) or _now_iso()
        rating = _as_float(record.get("rating")) or 0.0

        if not text.strip() and rating <= 0:
            continue

        normalized.append(
            PlaceReview(
                review_id=f"{provider_place_id}-{index}-{published}",
                author_name=_as_str(author.get("displayName")) or "Anonymous",
                author_avatar_url=_as_str(author.get("photoUri")),
                rating=rating,
                text=text,
                created_at=published,
                relative_time_text=_as_str(record.get("relativePublishTimeDescription")),
                source_url=_as_str(author.get("uri")) or fallback_source_url,
            )
        )
    return normalized


@dataclass
class PlaceDetailsService:
    """Looks up canonical place details with reviews.

    Attributes:
        client: Places API (New) client
    """

    client: PlaceDetailsClientPort

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def get_details(
        self,
        provider_place_id: Optional[str] = None,
        query_text: Optional[str] = None,
        destination_context: Optional[str] = None,
        review_limit: Any = None,
    ) -> PlaceDetails:
        """Resolve a place and return its details and reviews.

        Args:
            provider_place_id: Google place id, with or without the
                ``places/`` prefix.
            query_text: Free-text fallback when the id is missing or
                unknown.
            destination_context: Appended to ``query_text`` for search.
            review_limit: Requested review count, clamped to 1-5.

        Returns:
            The canonical place details.

        Raises:
            InvalidRequestError: Neither an id nor a query was given.
            ConfigurationError: No Places API key is configured.
            PlaceNotFoundError: Nothing could be resolved.
            ProviderError: The provider call failed.
        """
        provider_place_id = _as_str(provider_place_id)
        query_text = _as_str(query_text)
        destination_context = _as_str(destination_context)
        limit = normalize_review_limit(review_limit)

        if not provider_place_id and not query_text:
            raise InvalidRequestError(
                "providerPlaceId or queryText is required", field_name="providerPlaceId"
            )
        if not self.client.is_configured:
            raise ConfigurationError(
                "Google Places API key is not configured",
                setting_name="GOOGLE_PLACES_API_KEY",
            )

        resolved_by = "provider_place_id" if provider_place_id else "text_query"
        final_place_id = provider_place_id
        details = self.client.get_place(final_place_id) if final_place_id else None

        if not details and query_text:
            match = self.client.search_text(
                build_search_query(query_text, destination_context)
            )
            fallback_id = _as_str(match.get("id")) if match else None
            if fallback_id:
                final_place_id = fallback_id
                details = self.client.get_place(final_place_id)
                resolved_by = "text_query"

        if not final_place_id or not details:
            raise PlaceNotFoundError(
                "Place could not be resolved",
                provider_place_id=provider_place_id,
                query_text=query_text,
            )

        google_maps_uri = _as_str(details.get("googleMapsUri"))
        rating_count = _as_float(details.get("userRatingCount"))
        reviews = normalize_reviews(
            details.get("reviews"), final_place_id, google_maps_uri, limit
        )

        self._logger.debug(
            "Place details resolved",
            extra={
                "provider_place_id": final_place_id,
                "resolved_by": resolved_by,
                "reviews": len(reviews),
            },
        )

        return PlaceDetails(
            provider_place_id=final_place_id,
            canonical_name=_display_text(details.get("displayName"))
            or query_text
            or "Unknown place",
            resolved_by=resolved_by,
            formatted_address=_as_str(details.get("formattedAddress")),
            google_maps_uri=google_maps_uri,
            rating=_as_float(details.get("rating")),
            user_rating_count=int(rating_count) if rating_count is not None else None,
            reviews=tuple(reviews),
        )
