"""Domain models to JSON response bodies.

Wire names are camelCase. The cleaned request and preview text are
also sent under their snake_case names, which older clients read.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..domain.models import (
    AddressComponents,
    Coordinates,
    ExtractedPlace,
    ItineraryExtraction,
    ParsedDayGroup,
    ParsedPlace,
    ParseResult,
    PlaceDetails,
    PlaceReview,
    PlaceSearchCandidate,
    ResolvedPlace,
)

NO_SEARCH_RESULTS = "No matching places found for the query."


def parsed_place_to_dict(place: ParsedPlace) -> Dict[str, Any]:
    data: Dict[str, Any] = {"name": place.name, "source": place.source}
    if place.time_text:
        data["timeText"] = place.time_text
    return data


def day_to_dict(day: ParsedDayGroup) -> Dict[str, Any]:
    return {
        "label": day.label,
        "date": day.date,
        "places": [parsed_place_to_dict(place) for place in day.places],
    }


def parse_result_to_dict(result: ParseResult) -> Dict[str, Any]:
    """Serialize a parse with the dual-cased request fields."""
    return {
        "cleanedRequest": result.cleaned_request,
        "previewText": result.preview_text,
        "cleaned_request": result.cleaned_request,
        "preview_text": result.preview_text,
        "destination": result.destination or None,
        "days": [day_to_dict(day) for day in result.days],
        "warnings": list(result.warnings),
        "success": True,
    }


def extracted_place_to_dict(place: ExtractedPlace) -> Dict[str, Any]:
    return {
        "name": place.name,
        "nameLocal": place.name_local,
        "category": place.category,
        "description": place.description,
        "tips": list(place.tips),
        "latitude": place.latitude,
        "longitude": place.longitude,
    }


def extraction_to_dict(extraction: ItineraryExtraction) -> Dict[str, Any]:
    """Serialize an extraction: model places plus the parse fields."""
    data = parse_result_to_dict(extraction.parse)
    data.update(
        {
            "places": [extracted_place_to_dict(place) for place in extraction.places],
            "summary": extraction.summary,
            "destination": extraction.destination,
        }
    )
    return data


def address_components_to_dict(
    components: Optional[AddressComponents],
) -> Optional[Dict[str, Any]]:
    if components is None:
        return None
    return {
        "city": components.city,
        "region": components.region,
        "country": components.country,
    }


def resolved_place_to_dict(place: ResolvedPlace) -> Dict[str, Any]:
    """Serialize one batch resolution entry.

    An empty input name gives only ``name`` and ``resolved``. Optional
    provider fields are sent as null; ``bestGuess``, ``confidence`` and
    ``source`` are left out when unknown.
    """
    name = place.name
    if not name:
        return {"name": name, "resolved": False}

    data: Dict[str, Any] = {
        "name": name,
        "resolved": place.resolved,
        "displayName": place.display_name or None,
        "placeId": place.place_id or None,
        "formattedAddress": place.formatted_address or None,
        "addressComponents": address_components_to_dict(place.address_components),
        "address": place.address or None,
        "lat": place.lat,
        "lng": place.lng,
    }
    if place.best_guess is not None:
        data["bestGuess"] = place.best_guess
    if place.confidence is not None:
        data["confidence"] = place.confidence
    if place.source is not None:
        data["source"] = place.source
    return data


def coordinates_to_dict(coordinates: Optional[Coordinates]) -> Dict[str, Any]:
    return {
        "coordinates": (
            {"lat": coordinates.lat, "lng": coordinates.lng} if coordinates else None
        ),
        "success": coordinates is not None,
    }


def review_to_dict(review: PlaceReview) -> Dict[str, Any]:
    return {
        "reviewId": review.review_id,
        "authorName": review.author_name,
        "authorAvatarUrl": review.author_avatar_url,
        "rating": review.rating,
        "text": review.text,
        "createdAt": review.created_at,
        "relativeTimeText": review.relative_time_text,
        "source": review.source,
        "sourceUrl": review.source_url,
    }


def place_details_to_dict(details: PlaceDetails) -> Dict[str, Any]:
    return {
        "details": {
            "providerPlaceId": details.provider_place_id,
            "canonicalName": details.canonical_name,
            "formattedAddress": details.formatted_address,
            "googleMapsUri": details.google_maps_uri,
            "rating": details.rating,
            "userRatingCount": details.user_rating_count,
            "resolvedBy": details.resolved_by,
            "source": details.source,
        },
        "reviews": [review_to_dict(review) for review in details.reviews],
        "reviewState": details.review_state,
    }


def search_candidate_to_dict(candidate: PlaceSearchCandidate) -> Dict[str, Any]:
    return {
        "providerPlaceId": candidate.provider_place_id,
        "displayName": candidate.display_name,
        "secondaryText": candidate.secondary_text,
        "formattedAddress": candidate.formatted_address,
        "coordinates": {"lat": candidate.lat, "lng": candidate.lng},
        "categories": list(candidate.categories),
        "mapsUri": candidate.maps_uri,
        "source": candidate.source,
    }


def place_search_to_dict(
    query: str, candidates: Sequence[PlaceSearchCandidate]
) -> Dict[str, Any]:
    """Serialize search results; ``warnings`` is only sent when empty."""
    data: Dict[str, Any] = {
        "query": query,
        "results": [search_candidate_to_dict(candidate) for candidate in candidates],
    }
    if not candidates:
        data["warnings"] = [NO_SEARCH_RESULTS]
    return data
