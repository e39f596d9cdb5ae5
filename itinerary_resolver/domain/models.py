"""Immutable domain models for the Itinerary Place Resolver.

All models are frozen dataclasses with slots for memory efficiency.
These models have no external dependencies and represent the core
business concepts of the application: parsed itinerary text on one
side, geocoded places on the other.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Literal, Mapping, Optional

PlaceSource = Literal["places", "geocoding", "nominatim"]
Confidence = Literal["high", "medium", "low"]

NO_PLACES_FOUND = "NO_PLACES_FOUND"
AMBIGUOUS_PLACE_NAME = "AMBIGUOUS_PLACE_NAME"

# Longest trip a header-less itinerary is spread over.
MAX_DURATION_DAYS = 30


class LineKind(Enum):
    """Classification of a single line of itinerary text.

    Only ``PLACE`` and ``TRAVEL_PLACE`` produce a place candidate and
    ``DAY_HEADER`` starts a new day group. Every other kind is dropped.
    """

    BLANK = auto()
    DAY_HEADER = auto()
    META = auto()
    NO_LETTERS = auto()
    TRAVEL_PLACE = auto()
    TRAVEL_ONLY = auto()
    EXCLUDED = auto()
    PLACE = auto()


@dataclass(frozen=True, slots=True)
class LineClassification:
    """Result of classifying one raw line.

    Attributes:
        kind: The rule that matched first
        label: Day label, for ``DAY_HEADER`` lines
        place_name: Extracted place name, for place-producing lines
        time_text: Leading time token removed from the line, if any
    """

    kind: LineKind
    label: Optional[str] = None
    place_name: Optional[str] = None
    time_text: Optional[str] = None

    @property
    def is_place(self) -> bool:
        """Check if the line produced a place candidate."""
        return self.kind in (LineKind.PLACE, LineKind.TRAVEL_PLACE)


@dataclass(frozen=True, slots=True)
class ParsedPlace:
    """A place candidate found in the user's text."""

    name: str
    source: Literal["user"] = "user"
    time_text: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ParsedDayGroup:
    """One day of the itinerary with places in visit order."""

    label: str
    date: Optional[str] = None
    places: tuple[ParsedPlace, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        """Check if the day has no places."""
        return len(self.places) == 0


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Result of parsing a free-text itinerary.

    Attributes:
        cleaned_request: Natural-language restatement of the itinerary
        preview_text: Identical to ``cleaned_request``
        destination: The destination hint given by the caller, if any
        days: Day groups in input order
        warnings: Parse-quality warnings such as ``NO_PLACES_FOUND``
    """

    cleaned_request: str
    preview_text: str
    destination: Optional[str]
    days: tuple[ParsedDayGroup, ...]
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def places(self) -> tuple[ParsedPlace, ...]:
        """Return every place across all days, in order."""
        return tuple(place for day in self.days for place in day.places)

    @property
    def has_places(self) -> bool:
        """Check if any day group holds at least one place."""
        return any(not day.is_empty for day in self.days)


@dataclass(frozen=True, slots=True)
class Coordinates:
    """WGS84 coordinates as returned by the providers."""

    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class AddressComponents:
    """City, region and country extracted from a provider result."""

    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ProviderCandidate:
    """A raw provider search result, tagged with its provider.

    The ``raw`` mapping keeps the provider-specific JSON shape
    (``geometry.location.lat`` for Google, ``lat``/``lon`` for
    Nominatim). Only the owning adapter reads its field paths.
    """

    source: PlaceSource
    raw: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class ResolvedPlace:
    """A canonical, geocoded place.

    ``ResolvedPlace.unresolved(name)`` is the canonical "could not
    resolve" value: ``resolved`` is False and only ``name`` is set.
    """

    name: str
    resolved: bool
    display_name: Optional[str] = None
    place_id: Optional[str] = None
    formatted_address: Optional[str] = None
    address: Optional[str] = None
    address_components: Optional[AddressComponents] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    source: Optional[PlaceSource] = None
    best_guess: Optional[bool] = None
    confidence: Optional[Confidence] = None

    @classmethod
    def unresolved(cls, name: str) -> ResolvedPlace:
        return cls(name=name, resolved=False)

    @property
    def coordinates(self) -> Optional[Coordinates]:
        """Return coordinates when the place is resolved."""
        if not self.resolved or self.lat is None or self.lng is None:
            return None
        return Coordinates(lat=self.lat, lng=self.lng)

    @property
    def city(self) -> Optional[str]:
        if self.address_components is None:
            return None
        return self.address_components.city


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A cached value with the epoch timestamp it was written at."""

    value: Any
    timestamp: float


@dataclass(frozen=True, slots=True)
class ExtractedPlace:
    """A place returned by the language-model extractor.

    Attributes:
        name: Place name in English
        category: One of food, culture, nature, shop, night, photo,
            accommodation, transport (free text from the model)
        name_local: Local-script name if known
        description: Short description
        tips: Tips mentioned in the source text
        latitude: Model-estimated latitude, if any
        longitude: Model-estimated longitude, if any
    """

    name: str
    category: str = "other"
    name_local: Optional[str] = None
    description: Optional[str] = None
    tips: tuple[str, ...] = field(default_factory=tuple)
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True, slots=True)
class PlaceExtraction:
    """Output of a language-model place extraction call."""

    places: tuple[ExtractedPlace, ...] = field(default_factory=tuple)
    summary: Optional[str] = None
    destination: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return len(self.places) == 0


@dataclass(frozen=True, slots=True)
class ItineraryExtraction:
    """Combined result of the extract-places-from-text flow."""

    places: tuple[ExtractedPlace, ...]
    summary: str
    destination: Optional[str]
    parse: ParseResult
    used_fallback: bool = False


@dataclass(frozen=True, slots=True)
class PlaceReview:
    """A normalized provider review."""

    review_id: str
    author_name: str
    rating: float
    text: str
    created_at: str
    author_avatar_url: Optional[str] = None
    relative_time_text: Optional[str] = None
    source_url: Optional[str] = None
    source: str = "google"


@dataclass(frozen=True, slots=True)
class PlaceDetails:
    """Canonical place identity plus reviews from the details provider."""

    provider_place_id: str
    canonical_name: str
    resolved_by: Literal["provider_place_id", "text_query"]
    formatted_address: Optional[str] = None
    google_maps_uri: Optional[str] = None
    rating: Optional[float] = None
    user_rating_count: Optional[int] = None
    reviews: tuple[PlaceReview, ...] = field(default_factory=tuple)
    source: str = "google"

    @property
    def review_state(self) -> str:
        return "available" if self.reviews else "empty"


@dataclass(frozen=True, slots=True)
class PlaceSearchCandidate:
    """One autocomplete-style search result.

    ``source`` is ``"places"`` for Places Text Search results and
    ``"geocoding"`` for the single fallback result of the resolver.
    """

    display_name: str
    source: Literal["places", "geocoding"]
    provider_place_id: Optional[str] = None
    secondary_text: Optional[str] = None
    formatted_address: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    categories: tuple[str, ...] = field(default_factory=tuple)
    maps_uri: Optional[str] = None
