"""Rule-based classification of single itinerary lines.

A line is tested against ``LINE_RULES`` top to bottom and the first rule
returning a classification wins. Each rule is a ``(name, rule)`` pair so
the precedence contract can be exercised rule by rule:

    >>> classify_line("Day 2 - Old Town").label
    'Day 2 - Old Town'
    >>> classify_line("checked in at Neo Grand Hatyai").place_name
    'Neo Grand Hatyai'

Example::

    from itinerary_resolver.nlp.line_classifier import classify_line

    result = classify_line("- 9am Wat Hat Yai Nai 🙏")
    result.kind        # LineKind.PLACE
    result.place_name  # 'Wat Hat Yai Nai'
    result.time_text   # '9am'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ..domain.models import LineClassification, LineKind
from .text_cleaning import (
    clean_line,
    day_label,
    extract_time_prefix,
    has_letters,
    normalize_header_candidate,
    strip_duration_prefix,
    strip_trailing_time,
)

_FLAGS = re.IGNORECASE | re.ASCII

DAY_HEADER_PATTERN = re.compile(
    r"^\s*((?:day\s*\d+|day\d+)\b.*|\d{1,2}/\d{1,2}(?:/\d{2,4})?\b.*)", _FLAGS
)
DATE_RANGE_PATTERN = re.compile(
    r"\b\d{1,2}/\d{1,2}(?:\s*[-–]\s*\d{1,2}/\d{1,2})\b", _FLAGS
)
TRIP_WORD_PATTERN = re.compile(r"\btrip\b", _FLAGS)

META_PATTERNS = (
    re.compile(r"^\s*places from my itinerary\b", _FLAGS),
    re.compile(r"^\s*i['’]m planning a trip to\b", _FLAGS),
    re.compile(r"^\s*i am planning a trip to\b", _FLAGS),
)

EXCLUDED_PATTERNS = (
    re.compile(r"^\s*(notes?|reminder|todo|itinerary|schedule|tips?)\b", _FLAGS),
    re.compile(
        r"\b(arrive|depart|departure|check[- ]?in|check[- ]?out|flight|train|bus"
        r"|transfer|layover|drive|taxi|uber)\b",
        _FLAGS,
    ),
)

TRAVEL_ONLY_PATTERN = re.compile(
    r"\b(take|took|reached|reach|arrive|arrived|depart|departure|flight|train"
    r"|bus|van|taxi|uber|transfer|check[- ]?in|check[- ]?out)\b",
    _FLAGS,
)

ARRIVAL_PATTERN = re.compile(
    r"\b(?:reached|arrived(?:\s+at|\s+in)?|arrive(?:\s+at|\s+in)?"
    r"|check(?:ed)?\s*-?\s*in(?:\s+at)?|checking\s*in(?:\s+at)?"
    r"|stay(?:ing)?\s+at)\s+(.+)",
    _FLAGS,
)
ARRIVAL_VERB_PATTERN = re.compile(r"\barriv(ed|e)?\b", _FLAGS)
LEADING_PREPOSITION_PATTERN = re.compile(r"^(to|at|in)\s+", _FLAGS)
TRAILING_CLOCK_PATTERN = re.compile(r"\b\d{1,2}[:.]\d{2}\s*(am|pm)?\b\s*$", _FLAGS)
TRAILING_HOUR_PATTERN = re.compile(r"\b\d{1,2}\s*(am|pm)\b\s*$", _FLAGS)


@dataclass(frozen=True)
class LineContext:
    """Normalized views of one raw line, computed once per line.

    Attributes:
        raw: The line as it appeared in the input
        header_candidate: Line normalized for day header matching
        text: Cleaned line with any leading time token removed
        time_text: The removed leading time token, if any
    """

    raw: str
    header_candidate: str
    text: str
    time_text: Optional[str]

    @classmethod
    def from_line(cls, raw_line: str) -> LineContext:
        time_text, rest = extract_time_prefix(clean_line(raw_line))
        return cls(
            raw=raw_line,
            header_candidate=normalize_header_candidate(raw_line),
            text=clean_line(rest),
            time_text=time_text,
        )


LineRule = Callable[[LineContext], Optional[LineClassification]]


def is_meta_line(line: str) -> bool:
    """Check for boilerplate such as a previously generated request."""
    if any(pattern.search(line) for pattern in META_PATTERNS):
        return True
    return bool(TRIP_WORD_PATTERN.search(line) and DATE_RANGE_PATTERN.search(line))


def is_excluded_line(line: str) -> bool:
    """Check for note headings and transit vocabulary."""
    return any(pattern.search(line) for pattern in EXCLUDED_PATTERNS)


def is_travel_only_line(line: str) -> bool:
    return TRAVEL_ONLY_PATTERN.search(line) is not None


def extract_place_from_travel_line(line: str) -> Optional[str]:
    """Extract the destination of an arrival or check-in line.

    Args:
        line: A cleaned line.

    Returns:
        The place phrase following the arrival verb, or None when the
        phrase is empty, letterless, itself excluded or meta, or a
        single word right after "arrive(d)".
    """
    match = ARRIVAL_PATTERN.search(line)
    if match is None:
        return None

    candidate = clean_line(match.group(1))
    candidate = LEADING_PREPOSITION_PATTERN.sub("", candidate)
    candidate = TRAILING_CLOCK_PATTERN.sub("", candidate)
    candidate = TRAILING_HOUR_PATTERN.sub("", candidate).strip()

    normalized = strip_trailing_time(candidate)
    if not normalized or not has_letters(normalized):
        return None
    if is_excluded_line(normalized) or is_meta_line(normalized):
        return None
    if len(normalized.split()) <= 1 and ARRIVAL_VERB_PATTERN.search(line):
        return None
    return normalized


def _blank_rule(ctx: LineContext) -> Optional[LineClassification]:
    if ctx.raw.strip():
        return None
    return LineClassification(kind=LineKind.BLANK)


def _day_header_rule(ctx: LineContext) -> Optional[LineClassification]:
    match = DAY_HEADER_PATTERN.match(ctx.header_candidate)
    if match is None:
        return None
    return LineClassification(kind=LineKind.DAY_HEADER, label=day_label(match.group(1)))


def _no_letters_rule(ctx: LineContext) -> Optional[LineClassification]:
    if ctx.text and has_letters(ctx.text):
        return None
    return LineClassification(kind=LineKind.NO_LETTERS, time_text=ctx.time_text)


def _meta_rule(ctx: LineContext) -> Optional[LineClassification]:
    if not is_meta_line(ctx.text):
        return None
    return LineClassification(kind=LineKind.META)


def _travel_place_rule(ctx: LineContext) -> Optional[LineClassification]:
    place_name = extract_place_from_travel_line(ctx.text)
    if place_name is None:
        return None
    return LineClassification(
        kind=LineKind.TRAVEL_PLACE, place_name=place_name, time_text=ctx.time_text
    )


def _travel_only_rule(ctx: LineContext) -> Optional[LineClassification]:
    if not is_travel_only_line(ctx.text):
        return None
    return LineClassification(kind=LineKind.TRAVEL_ONLY, time_text=ctx.time_text)


def _excluded_rule(ctx: LineContext) -> Optional[LineClassification]:
    if not is_excluded_line(ctx.text):
        return None
    return LineClassification(kind=LineKind.EXCLUDED)


def _place_rule(ctx: LineContext) -> Optional[LineClassification]:
    place_name = strip_trailing_time(strip_duration_prefix(ctx.text))
    if not place_name or not has_letters(place_name):
        return LineClassification(kind=LineKind.NO_LETTERS, time_text=ctx.time_text)
    return LineClassification(
        kind=LineKind.PLACE, place_name=place_name, time_text=ctx.time_text
    )


# Precedence order: the first rule returning a classification wins.
LINE_RULES: Tuple[Tuple[str, LineRule], ...] = (
    ("blank", _blank_rule),
    ("day_header", _day_header_rule),
    ("no_letters", _no_letters_rule),
    ("meta", _meta_rule),
    ("travel_place", _travel_place_rule),
    ("travel_only", _travel_only_rule),
    ("excluded", _excluded_rule),
    ("place", _place_rule),
)


def classify_line(raw_line: str) -> LineClassification:
    """Classify one line of itinerary text.

    Args:
        raw_line: A single line, without its line terminator.

    Returns:
        The classification produced by the first matching rule.
    """
    ctx = LineContext.from_line(raw_line)
    for _name, rule in LINE_RULES:
        result = rule(ctx)
        if result is not None:
            return result
    # _place_rule always answers; kept for type checkers.
    return LineClassification(kind=LineKind.NO_LETTERS)
