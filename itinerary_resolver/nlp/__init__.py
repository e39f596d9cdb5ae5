"""Natural language processing components for the Itinerary Place Resolver.

This subpackage groups the deterministic text handling: line cleaning,
rule-based line classification and the day-grouping itinerary parser.
"""

from .itinerary_parser import build_cleaned_request, parse_itinerary_text
from .line_classifier import LINE_RULES, classify_line
from .text_cleaning import clean_line

__all__ = [
    "parse_itinerary_text",
    "build_cleaned_request",
    "classify_line",
    "LINE_RULES",
    "clean_line",
]
