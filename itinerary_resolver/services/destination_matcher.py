"""Destination matching for raw provider results.

A destination such as ``"Kuala Lumpur, Malaysia"`` is split on commas
into lowercase parts. A result matches when the parts are found as
plain substrings of the text fields the provider exposes:

- ``"all"`` mode: every part is found in some field (parts may match
  different fields)
- ``"any"`` mode: at least one part is found

Strict ``"all"`` matching is tried first; ``"any"`` is the softer
fallback when no result satisfies it.
"""

from __future__ import annotations

from typing import Any, List, Literal, Mapping, Optional, Sequence, TypeVar

MatchMode = Literal["all", "any"]

R = TypeVar("R", bound=Mapping[str, Any])

_TEXT_FIELDS = ("display_name", "name", "formatted_address")


def _normalize(value: str) -> str:
    return value.lower().strip()


def destination_parts(destination: Optional[str]) -> List[str]:
    """Split a destination into normalized, non-empty parts."""
    if not destination:
        return []
    return [part for part in (_normalize(p) for p in destination.split(",")) if part]


def collect_haystacks(result: Mapping[str, Any]) -> List[str]:
    """Collect every normalized text field of a provider result.

    Covers ``display_name``, ``name``, ``formatted_address``, the string
    values of an ``address`` mapping and the ``long_name``/``short_name``
    of each entry in ``address_components``.
    """
    haystacks: List[str] = []

    for key in _TEXT_FIELDS:
        value = result.get(key)
        if isinstance(value, str) and _normalize(value):
            haystacks.append(_normalize(value))

    address = result.get("address")
    if isinstance(address, Mapping):
        haystacks.extend(
            _normalize(value) for value in address.values() if isinstance(value, str)
        )

    components = result.get("address_components")
    if isinstance(components, list):
        for component in components:
            if not isinstance(component, Mapping):
                continue
            for key in ("long_name", "short_name"):
                value = component.get(key)
                if isinstance(value, str) and _normalize(value):
                    haystacks.append(_normalize(value))

    return haystacks


def matches_destination(
    result: Mapping[str, Any], destination: Optional[str], mode: MatchMode = "all"
) -> bool:
    """Check if a provider result plausibly lies in the destination.

    Args:
        result: Raw provider result.
        destination: Comma-separated destination, e.g. "Lisbon, Portugal".
        mode: "all" requires every destination part, "any" requires one.

    Returns:
        True if the result matches, or if the destination has no parts.
    """
    parts = destination_parts(destination)
    if not parts:
        return True

    haystacks = collect_haystacks(result)

    def found(part: str) -> bool:
        return any(part in value for value in haystacks)

    if mode == "any":
        return any(found(part) for part in parts)
    return all(found(part) for part in parts)


def select_candidate(
    results: Sequence[R],
    destination: Optional[str],
    fallback_to_first: bool = False,
) -> Optional[R]:
    """Pick the best provider result for a destination.

    With a destination the first ``"all"`` match wins, then the first
    ``"any"`` match, then, only if ``fallback_to_first``, the first
    result. Without a destination the first result is taken.

    Args:
        results: Provider results in ranking order.
        destination: Destination the search was made for.
        fallback_to_first: Accept the first result when nothing matches.

    Returns:
        The selected result, or None.
    """
    if not results:
        return None
    if not destination:
        return results[0]

    for mode in ("all", "any"):
        for result in results:
            if matches_destination(result, destination, mode):
                return result

    return results[0] if fallback_to_first else None
