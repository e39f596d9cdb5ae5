"""Gemini place extractor adapter.

Sends itinerary text to the Gemini ``generateContent`` endpoint and
reads back a JSON object of places. The model is an opaque collaborator:
any failure surfaces as ExtractionError and the caller falls back to
the rule-based parser.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import requests

from ...config import GeminiConfig, get_config
from ...domain.errors import ExtractionError, ProviderError
from ...domain.models import ExtractedPlace, PlaceExtraction
from ..http_json import request_json
from .lenient_json import parse_lenient_json

SYSTEM_PROMPT = """You are a travel assistant that extracts place names and destinations from messy itinerary text.

When given raw itinerary notes, extract:
1. Place names (restaurants, attractions, hotels, shops, temples, etc.)
2. Local names if included
3. Category (food, culture, nature, shop, night, photo, accommodation, transport)
4. Brief description if context is available
5. Any tips or recommendations mentioned
6. Geographic coordinates (latitude and longitude in decimal degrees)
7. If coordinates are unknown, set latitude and longitude to null
8. A concise destination label if the city or region is obvious

You MUST respond with a valid JSON object in this exact format:
{
  "places": [
    {
      "name": "Place name in English",
      "nameLocal": "Local name if known",
      "category": "one of: food, culture, nature, shop, night, photo, accommodation, transport",
      "description": "Brief description",
      "tips": ["tip1", "tip2"],
      "latitude": 35.0116,
      "longitude": 135.7681
    }
  ],
  "summary": "Brief summary of what was found",
  "destination": "City or region name if clear"
}"""

USER_PROMPT_TEMPLATE = """Extract travel places from this itinerary text:

{text}

{destination_line}

Focus on specific named locations and ignore dates/times unless they clarify the place.

Respond ONLY with valid JSON, no markdown or extra text."""


def build_prompt(text: str, destination: Optional[str] = None) -> str:
    destination_line = (
        f"The user is planning a trip to {destination}." if destination else ""
    )
    user_prompt = USER_PROMPT_TEMPLATE.format(
        text=text, destination_line=destination_line
    )
    return f"{SYSTEM_PROMPT}\n\n{user_prompt}"


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _optional_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def place_from_payload(item: Mapping[str, Any]) -> Optional[ExtractedPlace]:
    """Build an ExtractedPlace from one model item, or None without a name."""
    name = item.get("name")
    if not isinstance(name, str) or not name.strip():
        return None

    tips = item.get("tips")
    return ExtractedPlace(
        name=name.strip(),
        category=_optional_str(item.get("category")) or "other",
        name_local=_optional_str(item.get("nameLocal")),
        description=_optional_str(item.get("description")),
        tips=tuple(tip for tip in tips if isinstance(tip, str)) if isinstance(tips, list) else (),
        latitude=_optional_float(item.get("latitude")),
        longitude=_optional_float(item.get("longitude")),
    )


@dataclass
class GeminiPlaceExtractor:
    """Language-model extractor implementing PlaceExtractorPort.

    Attributes:
        config: Gemini configuration
        session: HTTP session for the generateContent calls
    """

    config: GeminiConfig = field(default_factory=lambda: get_config().gemini)
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def is_configured(self) -> bool:
        return bool(self.config.resolved_api_key)

    def extract(self, text: str, destination: Optional[str] = None) -> PlaceExtraction:
        """Extract places from text.

        Args:
            text: Itinerary text, usually the parser's cleaned request.
            destination: Optional destination hint.

        Returns:
            The places, summary and destination returned by the model.

        Raises:
            ExtractionError: Unconfigured, HTTP failure (``status_code``
                429 when rate limited), or unusable model output.
        """
        if not self.is_configured:
            raise ExtractionError("AI service not configured", extractor="gemini")

        model = self.config.resolved_model
        body = {
            "contents": [{"role": "user", "parts": [{"text": build_prompt(text, destination)}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "topK": 40,
                "topP": 0.95,
                "maxOutputTokens": self.config.max_output_tokens,
                "responseMimeType": "application/json",
            },
        }

        self._logger.info("Extracting places from text", extra={"model": model})
        try:
            data = request_json(
                self.session,
                "POST",
                f"{self.config.base_url}/{model}:generateContent",
                provider="gemini",
                timeout=self.config.timeout_seconds,
                params={"key": self.config.resolved_api_key},
                json=body,
            )
        except ProviderError as e:
            raise ExtractionError(
                "Failed to analyze itinerary text",
                cause=e,
                extractor="gemini",
                status_code=e.status_code,
            )

        try:
            response_text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            self._logger.error(
                "Unexpected response format",
                extra={"response": json.dumps(data)[:500]},
            )
            raise ExtractionError(
                "Failed to extract places from text", cause=e, extractor="gemini"
            )
        if not isinstance(response_text, str):
            self._logger.error(
                "Unexpected response format",
                extra={"response": json.dumps(data)[:500]},
            )
            raise ExtractionError("Failed to extract places from text", extractor="gemini")

        try:
            result = parse_lenient_json(response_text)
        except json.JSONDecodeError as e:
            self._logger.error(
                "Failed to parse AI response", extra={"response": response_text[:500]}
            )
            raise ExtractionError("Failed to parse AI response", cause=e, extractor="gemini")

        if not isinstance(result, Mapping):
            raise ExtractionError("AI response is not an object", extractor="gemini")

        raw_places = result.get("places")
        places = tuple(
            place
            for place in (
                place_from_payload(item)
                for item in (raw_places if isinstance(raw_places, list) else [])
                if isinstance(item, Mapping)
            )
            if place is not None
        )

        self._logger.info("Extracted places from text", extra={"count": len(places)})
        return PlaceExtraction(
            places=places,
            summary=_optional_str(result.get("summary")),
            destination=_optional_str(result.get("destination")),
        )
