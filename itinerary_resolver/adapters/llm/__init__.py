"""Language-model adapters - Implementations of PlaceExtractorPort.

Available implementations:
- GeminiPlaceExtractor: Google Gemini generateContent
"""

from .gemini_adapter import GeminiPlaceExtractor

__all__ = ["GeminiPlaceExtractor"]
