"""HTTP endpoints.

Handlers stay thin: validate the body, call one service, serialize.
Domain errors are mapped to status codes by the handlers registered
in app.py; the only local mappings are the endpoint-specific provider
failures (500 on geocode-place, 502 on place-details and place-search,
429 on place-search when the search provider rate limits).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse

from ..adapters.ratelimit import client_id_from_headers
from ..container import Container
from ..domain.errors import InvalidRequestError, ProviderError
from ..ports.nlp import ItineraryParserPort
from ..services import (
    GeocodeService,
    ItineraryExtractionService,
    PlaceDetailsService,
    PlaceSearchService,
    normalize_search_limit,
)
from .serialization import (
    coordinates_to_dict,
    extraction_to_dict,
    parse_result_to_dict,
    place_details_to_dict,
    place_search_to_dict,
    resolved_place_to_dict,
)
from .validation import (
    as_object,
    optional_day_count,
    optional_text,
    require_place_list,
    require_text,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_app_container(request: Request) -> Container:
    return request.app.state.container


def get_parser(container: Container = Depends(get_app_container)) -> ItineraryParserPort:
    return container.resolve(ItineraryParserPort)


def get_extraction_service(
    container: Container = Depends(get_app_container),
) -> ItineraryExtractionService:
    return container.resolve(ItineraryExtractionService)


def get_geocode_service(container: Container = Depends(get_app_container)) -> GeocodeService:
    return container.resolve(GeocodeService)


def get_place_details_service(
    container: Container = Depends(get_app_container),
) -> PlaceDetailsService:
    return container.resolve(PlaceDetailsService)


def get_place_search_service(
    container: Container = Depends(get_app_container),
) -> PlaceSearchService:
    return container.resolve(PlaceSearchService)


@router.get("/healthz")
def healthz() -> Dict[str, str]:
    return {"status": "ok"}


@router.post("/extract-places-from-text")
def extract_places_from_text(
    payload: Any = Body(None),
    service: ItineraryExtractionService = Depends(get_extraction_service),
) -> Dict[str, Any]:
    """Extract day-grouped places, falling back to the parser alone."""
    body = as_object(payload)
    text = require_text(body, "text", "Text is required")
    extraction = service.extract(
        text,
        destination=optional_text(body, "destination") or None,
        duration_days=optional_day_count(body, "duration_days", "durationDays"),
    )
    return extraction_to_dict(extraction)


@router.post("/parse-itinerary-text")
def parse_itinerary_text(
    payload: Any = Body(None),
    parser: ItineraryParserPort = Depends(get_parser),
) -> Dict[str, Any]:
    """Run the rule-based parser only."""
    body = as_object(payload)
    raw_text = require_text(body, "raw_text", "raw_text is required")
    result = parser.parse(
        raw_text,
        optional_text(body, "destination_hint") or None,
        optional_day_count(body, "duration_days", "durationDays"),
    )
    return parse_result_to_dict(result)


@router.post("/resolve-places")
def resolve_places(
    payload: Any = Body(None),
    service: GeocodeService = Depends(get_geocode_service),
) -> Dict[str, Any]:
    """Resolve many place names in order against a shared destination."""
    body = as_object(payload)
    places = require_place_list(body)
    results = service.resolve_batch(
        places, optional_text(body, "destination_context", "destinationContext")
    )
    return {"places": [resolved_place_to_dict(place) for place in results]}


@router.post("/geocode-place", response_model=None)
def geocode_place(
    request: Request,
    payload: Any = Body(None),
    service: GeocodeService = Depends(get_geocode_service),
) -> Any:
    """Geocode one place, rate limited per client and cached."""
    body = as_object(payload)
    query = require_text(body, "query", "Query is required")
    client_id = client_id_from_headers(
        request.headers.get("x-forwarded-for"),
        request.client.host if request.client else None,
    )

    try:
        coordinates = service.geocode(query, optional_text(body, "destination"), client_id)
    except ProviderError as e:
        logger.error(
            "Geocoding failed", extra={"query": query, "provider": e.provider, "error": str(e)}
        )
        return JSONResponse(status_code=500, content={"error": "Failed to geocode place"})

    return coordinates_to_dict(coordinates)


@router.get("/place-details", response_model=None)
def place_details(
    provider_place_id: Optional[str] = Query(None, alias="providerPlaceId"),
    query_text: Optional[str] = Query(None, alias="queryText"),
    destination_context: Optional[str] = Query(None, alias="destinationContext"),
    review_limit: Optional[str] = Query(None, alias="reviewLimit"),
    service: PlaceDetailsService = Depends(get_place_details_service),
) -> Any:
    """Canonical place identity and up to five reviews."""
    try:
        details = service.get_details(
            provider_place_id, query_text, destination_context, review_limit
        )
    except ProviderError as e:
        logger.error(
            "Place details provider failed",
            extra={"provider_place_id": provider_place_id, "error": str(e)},
        )
        return JSONResponse(
            status_code=502, content={"error": e.message or "Place details provider unavailable"}
        )

    return place_details_to_dict(details)


@router.post("/place-search", response_model=None)
def place_search(
    request: Request,
    payload: Any = Body(None),
    service: PlaceSearchService = Depends(get_place_search_service),
) -> Any:
    """Autocomplete-style place search, rate limited per client."""
    body = as_object(payload)
    query = (optional_text(body, "query") or "").strip()
    if not query:
        raise InvalidRequestError("query is required", field_name="query")
    destination_context = (optional_text(body, "destinationContext") or "").strip()
    client_id = client_id_from_headers(
        request.headers.get("x-forwarded-for"),
        request.client.host if request.client else None,
    )

    try:
        candidates = service.search(
            query,
            destination_context or None,
            normalize_search_limit(body.get("limit")),
            client_id,
        )
    except ProviderError as e:
        logger.error(
            "Place search provider failed",
            extra={"query": query, "provider": e.provider, "error": str(e)},
        )
        if e.status_code == 429:
            return JSONResponse(
                status_code=429, content={"error": "Rate limited by search provider"}
            )
        return JSONResponse(
            status_code=502, content={"error": "Place search provider unavailable"}
        )

    return place_search_to_dict(query, candidates)
