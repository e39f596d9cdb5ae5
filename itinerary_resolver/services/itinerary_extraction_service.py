"""Itinerary extraction with explicit fallback handling.

The flow always parses the text with the rule-based parser first. The
language-model extractor, when configured, is then seeded with the
parser's cleaned request. Whenever the model is unconfigured, fails or
finds nothing, the parser's own places are used instead, so the caller
always gets a usable, if less polished, result.

Place names are then canonicalized through the Places Text Search stage
of the resolver alone, never the geocoding fallbacks. The destination is
inferred from the most common resolved city when none is known.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Optional

from ..domain.errors import ExtractionError, ProviderError
from ..domain.models import (
    AMBIGUOUS_PLACE_NAME,
    NO_PLACES_FOUND,
    ExtractedPlace,
    ItineraryExtraction,
    ParsedDayGroup,
    ParsedPlace,
    PlaceExtraction,
    ResolvedPlace,
)
from ..nlp.itinerary_parser import build_cleaned_request, distribute_across_days
from ..ports.nlp import ItineraryParserPort, PlaceExtractorPort
from .place_resolver import PlaceResolver

HEDGE_PREFIX_PATTERN = re.compile(r"^\s*(maybe|perhaps|possibly)\b", re.IGNORECASE)


def is_ambiguous_place_name(name: str) -> bool:
    """Check for hedged names such as "Maybe TeamLab?" or "A or B"."""
    return (
        "?" in name
        or HEDGE_PREFIX_PATTERN.match(name) is not None
        or " or " in name.lower()
    )


def most_common_city(places: Iterable[ResolvedPlace]) -> Optional[str]:
    """Return the city shared by most resolved places, if any."""
    counts = Counter(place.city for place in places if place.resolved and place.city)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def _canonical_name(name: str, resolved: Mapping[str, ResolvedPlace]) -> str:
    """Return the Places display name for a resolved name, else the name."""
    place = resolved.get(name)
    if place and place.resolved and place.source == "places" and place.display_name:
        return place.display_name
    return name


def _canonical_place(
    place: ExtractedPlace, resolved: Mapping[str, ResolvedPlace]
) -> ExtractedPlace:
    match = resolved.get(place.name)
    if match is None or not match.resolved:
        return place
    return replace(
        place,
        name=_canonical_name(place.name, resolved),
        latitude=match.lat,
        longitude=match.lng,
    )


@dataclass
class ItineraryExtractionService:
    """Parser plus optional language-model extraction.

    Attributes:
        parser: Rule-based itinerary parser
        extractor: Optional language-model extractor
        resolver: Optional resolver whose Places stage canonicalizes names
        canonicalize: Whether to canonicalize names at all
    """

    parser: ItineraryParserPort
    extractor: Optional[PlaceExtractorPort] = None
    resolver: Optional[PlaceResolver] = None
    canonicalize: bool = True

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _run_extractor(
        self, text: str, destination: Optional[str]
    ) -> Optional[PlaceExtraction]:
        """Call the extractor, returning None whenever it cannot help."""
        if self.extractor is None or not self.extractor.is_configured:
            self._logger.info("Place extractor not configured, using parser places")
            return None

        extractor_name = type(self.extractor).__name__
        try:
            extraction = self.extractor.extract(text, destination)
        except ExtractionError as e:
            self._logger.warning(
                "Place extractor failed, using parser places",
                extra={
                    "extractor": extractor_name,
                    "status_code": e.status_code,
                    "error": str(e),
                },
            )
            return None

        if extraction.is_empty:
            self._logger.warning(
                "Place extractor found no places, using parser places",
                extra={"extractor": extractor_name},
            )
            return None
        return extraction

    @property
    def _can_canonicalize(self) -> bool:
        return (
            self.canonicalize
            and self.resolver is not None
            and self.resolver.is_stage_configured("places")
        )

    def _resolve_names(
        self, resolver: PlaceResolver, names: Iterable[str], destination: Optional[str]
    ) -> Dict[str, ResolvedPlace]:
        resolved: Dict[str, ResolvedPlace] = {}
        for name in names:
            if name in resolved:
                continue
            try:
                resolved[name] = resolver.resolve(name, destination)
            except ProviderError as e:
                self._logger.warning(
                    "Canonicalization failed, keeping name",
                    extra={"name": name, "error": str(e)},
                )
        return resolved

    def extract(
        self,
        text: str,
        destination: Optional[str] = None,
        duration_days: Optional[int] = None,
    ) -> ItineraryExtraction:
        """Extract day-grouped places from itinerary text.

        Args:
            text: Raw itinerary text.
            destination: Optional destination given by the user.
            duration_days: Optional trip length in days.

        Returns:
            The extraction; never raises for extractor or provider
            failures.
        """
        parse = self.parser.parse(text, destination, duration_days)
        seed_text = parse.cleaned_request if parse.has_places else text
        extraction = self._run_extractor(seed_text, destination)

        days: List[ParsedDayGroup] = list(parse.days)
        if extraction is None:
            places = tuple(ExtractedPlace(name=place.name) for place in parse.places)
            summary = f"Found {len(places)} places"
            model_destination = None
        else:
            places = extraction.places
            summary = extraction.summary or f"Found {len(places)} places"
            model_destination = extraction.destination
            if not parse.has_places:
                days = distribute_across_days(
                    [ParsedPlace(name=place.name) for place in places],
                    max(duration_days or 1, 1),
                )

        warnings = [warning for warning in parse.warnings if warning != NO_PLACES_FOUND]
        names = [place.name for place in places] + [
            place.name for day in days for place in day.places
        ]
        if any(is_ambiguous_place_name(name) for name in names):
            warnings.append(AMBIGUOUS_PLACE_NAME)
        if all(day.is_empty for day in days):
            warnings.append(NO_PLACES_FOUND)

        context_destination = destination or model_destination or None
        resolved: Dict[str, ResolvedPlace] = {}
        if self.resolver is not None and self._can_canonicalize:
            resolved = self._resolve_names(
                self.resolver.restricted_to("places"), names, context_destination
            )

        places = tuple(_canonical_place(place, resolved) for place in places)
        days = [
            replace(
                day,
                places=tuple(
                    replace(p, name=_canonical_name(p.name, resolved)) for p in day.places
                ),
            )
            for day in days
        ]

        final_destination = (
            destination or model_destination or most_common_city(resolved.values())
        )
        cleaned_request = build_cleaned_request(days, final_destination)
        final_parse = replace(
            parse,
            cleaned_request=cleaned_request,
            preview_text=cleaned_request,
            destination=final_destination or None,
            days=tuple(days),
            warnings=tuple(warnings),
        )

        self._logger.info(
            "Itinerary extraction finished",
            extra={
                "places": len(places),
                "days": len(days),
                "used_fallback": extraction is None,
                "canonicalized": len(resolved),
                "warnings": warnings,
            },
        )

        return ItineraryExtraction(
            places=places,
            summary=summary,
            destination=final_destination or None,
            parse=final_parse,
            used_fallback=extraction is None,
        )
