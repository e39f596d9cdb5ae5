"""NLP adapters - Implementations of ItineraryParserPort.

Available implementations:
- RuleBasedItineraryParser: Deterministic line-classifier parser
"""

from .rule_based import RuleBasedItineraryParser

__all__ = ["RuleBasedItineraryParser"]
