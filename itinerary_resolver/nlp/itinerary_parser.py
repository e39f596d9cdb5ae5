"""Day-grouping parser for free-text itineraries.

Drives the line classifier over every line of the input and keeps two
pieces of state: the day group being filled and whether any day header
was seen. Day groups without places survive only when a header created
them or when they are the only group.

Example:
    >>> result = parse_itinerary_text("Day 1\\nAlfama\\nDay 2\\nBelem Tower")
    >>> [day.label for day in result.days]
    ['Day 1', 'Day 2']
    >>> result.cleaned_request.splitlines()[0]
    "I'm planning a trip."
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

from ..domain.models import (
    MAX_DURATION_DAYS,
    NO_PLACES_FOUND,
    LineClassification,
    LineKind,
    ParsedDayGroup,
    ParsedPlace,
    ParseResult,
)
from .line_classifier import classify_line
from .text_cleaning import DEFAULT_DAY_LABEL

logger = logging.getLogger(__name__)

LINE_SPLIT_PATTERN = re.compile(r"\r?\n")
PLACE_SEPARATOR_PATTERN = re.compile(r"\s*[,，]\s*")


@dataclass
class _DayAccumulator:
    """Mutable state of the parser while it walks the lines."""

    days: List[ParsedDayGroup] = field(default_factory=list)
    label: str = DEFAULT_DAY_LABEL
    places: List[ParsedPlace] = field(default_factory=list)
    saw_day_header: bool = False

    def commit(self, force: bool) -> None:
        if force or self.places or not self.days:
            self.days.append(
                ParsedDayGroup(label=self.label, places=tuple(self.places))
            )

    def start_day(self, label: str) -> None:
        if self.saw_day_header:
            self.commit(force=True)
        elif self.places:
            self.commit(force=False)
        self.label = label
        self.places = []
        self.saw_day_header = True


def line_places(
    raw_line: str, classification: LineClassification
) -> List[ParsedPlace]:
    """Return the places named on one classified line.

    A line that reads as a place and holds comma-separated segments
    yields one place per segment that itself reads as a place, so
    ``"2 days in klcc, trx"`` gives ``klcc`` and ``trx``. Day headers
    and every other non-place line give nothing.
    """
    if not classification.is_place or not classification.place_name:
        return []

    segments = [s for s in PLACE_SEPARATOR_PATTERN.split(raw_line) if s.strip()]
    if len(segments) < 2:
        return [
            ParsedPlace(
                name=classification.place_name,
                time_text=classification.time_text,
            )
        ]

    places = []
    for segment in segments:
        part = classify_line(segment)
        if part.is_place and part.place_name:
            places.append(ParsedPlace(name=part.place_name, time_text=part.time_text))
    return places


def build_cleaned_request(
    days: Sequence[ParsedDayGroup], destination_hint: Optional[str] = None
) -> str:
    """Restate day groups as the natural-language request text.

    Day labels are only listed when there is more than one day.

    Args:
        days: Day groups in itinerary order.
        destination_hint: Destination to mention in the opening line.

    Returns:
        The request text, also used verbatim as the preview text.
    """
    hint = (destination_hint or "").strip()
    intro = f"I'm planning a trip to {hint}." if hint else "I'm planning a trip."

    lines = [intro, "", "Places from my itinerary:"]
    include_day_labels = len(days) > 1
    for day in days:
        if include_day_labels:
            lines.append(day.label)
        lines.extend(f"- {place.name}" for place in day.places)
    return "\n".join(lines).strip()


def distribute_across_days(
    places: Sequence[ParsedPlace], duration_days: int
) -> List[ParsedDayGroup]:
    """Spread header-less places over ``duration_days`` day groups.

    Places keep their order and fill days ``ceil(count / duration_days)``
    at a time. Trailing days that receive nothing are kept empty.
    ``duration_days`` is capped at ``MAX_DURATION_DAYS``.
    """
    duration_days = min(duration_days, MAX_DURATION_DAYS)
    per_day = max(1, math.ceil(len(places) / duration_days))
    return [
        ParsedDayGroup(
            label=f"Day {index + 1}",
            places=tuple(places[index * per_day:(index + 1) * per_day]),
        )
        for index in range(duration_days)
    ]


def parse_itinerary_text(
    raw_text: str,
    destination_hint: Optional[str] = None,
    duration_days: Optional[int] = None,
) -> ParseResult:
    """Parse free-text itinerary notes into day groups.

    Args:
        raw_text: Pasted notes, OCR output or chat-style trip text.
        destination_hint: Optional destination, echoed in the result
            and the cleaned request.
        duration_days: Trip length. Only used when the text has no day
            headers, to spread its places across that many days.

    Returns:
        A ParseResult with at least one day group.
    """
    state = _DayAccumulator()

    for raw_line in LINE_SPLIT_PATTERN.split(raw_text or ""):
        classification = classify_line(raw_line)
        if classification.kind is LineKind.DAY_HEADER:
            state.start_day(classification.label or DEFAULT_DAY_LABEL)
        else:
            state.places.extend(line_places(raw_line, classification))

    state.commit(force=state.saw_day_header)
    days = state.days

    if not state.saw_day_header:
        days[0] = replace(days[0], label=DEFAULT_DAY_LABEL)
        if duration_days is not None and duration_days > 1:
            days = distribute_across_days(days[0].places, duration_days)

    warnings: List[str] = []
    if all(day.is_empty for day in days):
        warnings.append(NO_PLACES_FOUND)

    cleaned_request = build_cleaned_request(days, destination_hint)

    logger.debug(
        "Parsed itinerary text",
        extra={
            "day_count": len(days),
            "place_count": sum(len(day.places) for day in days),
            "warnings": warnings,
        },
    )

    return ParseResult(
        cleaned_request=cleaned_request,
        preview_text=cleaned_request,
        destination=destination_hint or None,
        days=tuple(days),
        warnings=tuple(warnings),
    )
