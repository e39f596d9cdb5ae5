"""Request body validation.

Bodies are read as loose JSON objects rather than pydantic models so
that a missing field yields the plain 400 ``{"error": ...}`` message
clients already rely on instead of a 422 validation report.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..domain.errors import InvalidRequestError
from ..domain.models import MAX_DURATION_DAYS


def as_object(payload: Any) -> Dict[str, Any]:
    """Return the body as a dict; anything else counts as empty."""
    return dict(payload) if isinstance(payload, Mapping) else {}


def require_text(payload: Mapping[str, Any], name: str, message: str) -> str:
    """Return a required non-empty string field.

    Raises:
        InvalidRequestError: The field is missing, empty or not a string.
    """
    value = payload.get(name)
    if not isinstance(value, str) or not value:
        raise InvalidRequestError(message, field_name=name)
    return value


def optional_text(payload: Mapping[str, Any], *names: str) -> Optional[str]:
    """Return the first string value among ``names`` (snake or camel)."""
    for name in names:
        value = payload.get(name)
        if isinstance(value, str):
            return value
    return None


def optional_day_count(payload: Mapping[str, Any], *names: str) -> Optional[int]:
    """Return the first usable positive day count among ``names``.

    Numbers and numeric strings are accepted and truncated; anything
    below one is ignored and counts above ``MAX_DURATION_DAYS`` are capped.
    """
    for name in names:
        value = payload.get(name)
        if isinstance(value, bool) or value is None:
            continue
        try:
            days = int(float(value))
        except (TypeError, ValueError, OverflowError):
            continue
        if days >= 1:
            return min(days, MAX_DURATION_DAYS)
    return None


def require_place_list(payload: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    """Return the ``places`` array; non-object items become empty items.

    Raises:
        InvalidRequestError: ``places`` is present but not an array.
    """
    places = payload.get("places", [])
    if not isinstance(places, list):
        raise InvalidRequestError("places must be an array", field_name="places")
    return [item if isinstance(item, Mapping) else {} for item in places]
