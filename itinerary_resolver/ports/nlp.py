"""NLP ports - Abstractions for itinerary parsing and place extraction.

These protocols define the contracts for text understanding, allowing
the rule-based parser and the language-model extractor to be swapped
or mocked without changing the application logic.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import ParseResult, PlaceExtraction


class ItineraryParserPort(Protocol):
    """Port for deterministic itinerary parsing.

    Implementation: adapters/nlp/rule_based.py
    """

    def parse(
        self,
        raw_text: str,
        destination_hint: Optional[str] = None,
        duration_days: Optional[int] = None,
    ) -> ParseResult:
        """Parse free text into day groups of place candidates.

        Args:
            raw_text: The itinerary text.
            destination_hint: Optional destination for the cleaned request.
            duration_days: Optional trip length for header-less text.

        Returns:
            ParseResult with days, warnings and the cleaned request.
        """
        ...


class PlaceExtractorPort(Protocol):
    """Port for language-model place extraction.

    Implementation: adapters/llm/gemini_adapter.py

    The extractor is an opaque JSON-in/JSON-out collaborator. Callers
    must be prepared for it to be unconfigured or to fail.
    """

    @property
    def is_configured(self) -> bool:
        """Check if the extractor can be called."""
        ...

    def extract(self, text: str, destination: Optional[str] = None) -> PlaceExtraction:
        """Extract places from itinerary text.

        Args:
            text: The text to analyze, usually the cleaned request.
            destination: Optional destination hint.

        Returns:
            The extracted places, summary and detected destination.

        Raises:
            ExtractionError: The call failed or returned unusable output.
        """
        ...
