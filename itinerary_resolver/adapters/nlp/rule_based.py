"""Rule-based itinerary parser adapter.

This adapter exposes the deterministic parser in nlp/itinerary_parser.py
through the ItineraryParserPort interface.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ...domain.models import ParseResult
from ...nlp.itinerary_parser import parse_itinerary_text


@dataclass
class RuleBasedItineraryParser:
    """Line-classifier based itinerary parser.

    Implements ItineraryParserPort. Stateless; safe to share.
    """

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def parse(
        self,
        raw_text: str,
        destination_hint: Optional[str] = None,
        duration_days: Optional[int] = None,
    ) -> ParseResult:
        """Parse free text into day groups.

        Args:
            raw_text: The itinerary text.
            destination_hint: Optional destination for the cleaned request.
            duration_days: Optional trip length for header-less text.

        Returns:
            ParseResult with days, warnings and the cleaned request.
        """
        result = parse_itinerary_text(raw_text, destination_hint, duration_days)

        self._logger.debug(
            "Itinerary parsed (rule-based)",
            extra={
                "days": len(result.days),
                "places": len(result.places),
                "warnings": list(result.warnings),
            },
        )

        return result
