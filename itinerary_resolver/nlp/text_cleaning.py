"""Pure string transforms shared by the line classifier.

Every transform here is side-effect free. The order in which
``clean_line`` and ``normalize_header_candidate`` apply them matters:
the trailing-asterisk strip assumes emoji are already gone, and the
marker strip assumes variation selectors are already gone.

The classifier patterns are compiled with ``re.ASCII`` so that ``\\b``
treats CJK text next to a digit as a word boundary (``Mookata晚餐5pm``).
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

# Extended_Pictographic as of Unicode 16, approximated with the code point
# blocks the stdlib ``re`` module can express. Unassigned code points in
# U+1F947..U+1FAFF and U+1FC00..U+1FFFD are included so emoji added there
# later are stripped too. Regional indicators (flags) and skin-tone
# modifiers are not pictographic and stay in place.
EMOJI_PATTERN = re.compile(
    "["
    "©®‼⁉™ℹ"
    "↔-↙↩↪⌚⌛⌨⎈⏏"
    "⏩-⏳⏸-⏺Ⓜ▪▫▶◀◻-◾"
    "☀-➿⤴⤵⬅-⬇⬛⬜⭐⭕"
    "〰〽㊗㊙"
    "\U0001f000-\U0001f0ff\U0001f10d-\U0001f10f\U0001f12f"
    "\U0001f16c-\U0001f171\U0001f17e\U0001f17f\U0001f18e\U0001f191-\U0001f19a"
    "\U0001f1ad-\U0001f1e5\U0001f201-\U0001f20f\U0001f21a\U0001f22f"
    "\U0001f232-\U0001f23a\U0001f23c-\U0001f23f\U0001f249-\U0001f3fa"
    "\U0001f400-\U0001f53d\U0001f546-\U0001f64f\U0001f680-\U0001f6ff"
    "\U0001f774-\U0001f77f\U0001f7d5-\U0001f7ff\U0001f80c-\U0001f80f"
    "\U0001f848-\U0001f84f\U0001f85a-\U0001f85f\U0001f888-\U0001f88f"
    "\U0001f8ae-\U0001f8ff\U0001f90c-\U0001f93a\U0001f93c-\U0001f945"
    "\U0001f947-\U0001faff\U0001fc00-\U0001fffd"
    "]"
)
VARIATION_SELECTOR_PATTERN = re.compile("[\ufe0e\ufe0f]")
LEADING_MARKERS_PATTERN = re.compile(r"^\s*(?:[•\-*]+\s*)+")
TRAILING_ASTERISK_PATTERN = re.compile(r"\s*\*+$")
WHITESPACE_PATTERN = re.compile(r"\s+")

TIME_PREFIX_PATTERN = re.compile(
    r"^\s*(\d{1,2}[:.]\d{2}\s*(?:am|pm)?|\d{1,2}\s*(?:am|pm))\s*",
    re.IGNORECASE | re.ASCII,
)
TRAILING_TIME_PATTERN = re.compile(
    r"\s*[.,–\-]?\s*\b\d{1,2}(?::\d{2})?\s*(?:am|pm)\b\s*$",
    re.IGNORECASE | re.ASCII,
)
DURATION_PREFIX_PATTERN = re.compile(
    r"^\s*\d+\s*(?:days?|nights?)\s+(?:in|at|around)\s+", re.IGNORECASE | re.ASCII
)
TRAILING_LABEL_PUNCTUATION_PATTERN = re.compile(r"[:\-]+\s*$")
UPPERCASE_PATTERN = re.compile(r"[A-Z]")

DEFAULT_DAY_LABEL = "Day 1"


def strip_emoji(value: str) -> str:
    """Remove pictographic emoji and variation selectors."""
    value = EMOJI_PATTERN.sub("", value)
    return VARIATION_SELECTOR_PATTERN.sub("", value)


def strip_leading_markers(value: str) -> str:
    """Remove leading bullet markers (``•``, ``-``, ``*``)."""
    return LEADING_MARKERS_PATTERN.sub("", value).strip()


def collapse_whitespace(value: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", value).strip()


def clean_line(value: str) -> str:
    """Normalize a line for classification.

    Applies, in order: emoji stripping, variation selector stripping,
    leading marker stripping and whitespace collapsing. The transform
    is idempotent.
    """
    value = strip_emoji(value)
    value = LEADING_MARKERS_PATTERN.sub("", value)
    return collapse_whitespace(value)


def normalize_header_candidate(value: str) -> str:
    """Normalize a raw line before testing it for a day header."""
    value = strip_emoji(value)
    value = LEADING_MARKERS_PATTERN.sub("", value)
    value = TRAILING_ASTERISK_PATTERN.sub("", value)
    return value.strip()


def day_label(raw_header: str) -> str:
    """Build the display label of a day header line.

    Trailing asterisks and a trailing ``:``/``-`` are dropped. An empty
    result falls back to ``"Day 1"``.
    """
    cleaned = TRAILING_ASTERISK_PATTERN.sub("", clean_line(raw_header))
    if not cleaned:
        return DEFAULT_DAY_LABEL
    return TRAILING_LABEL_PUNCTUATION_PATTERN.sub("", cleaned)


def has_letters(value: str) -> bool:
    """Check for at least one Unicode letter."""
    return any(ch.isalpha() for ch in value)


def is_likely_time_named_place(value: str) -> bool:
    """Check if text after a time token reads like the rest of a name.

    ``"7AM Cafe"`` and ``"11:11 Coffee"`` are names, ``"9am coffee"`` is
    a time followed by a place: a short remainder (at most two words)
    with an uppercase letter keeps the digits as part of the name.
    """
    trimmed = value.strip()
    if not trimmed:
        return False
    if len(trimmed.split()) > 2:
        return False
    return UPPERCASE_PATTERN.search(trimmed) is not None


def extract_time_prefix(value: str) -> Tuple[Optional[str], str]:
    """Split a leading time token off a line.

    Returns:
        ``(time_text, rest)``. ``time_text`` is None when there is no
        time token or when the token looks like part of a place name,
        in which case ``rest`` is the unchanged input.
    """
    match = TIME_PREFIX_PATTERN.match(value)
    if match is None:
        return None, value
    rest = value[match.end():]
    if is_likely_time_named_place(rest):
        return None, value
    return match.group(1), rest


def strip_duration_prefix(value: str) -> str:
    """Remove a leading trip length such as ``2 days in`` from a line."""
    return DURATION_PREFIX_PATTERN.sub("", value).strip()


def strip_trailing_time(value: str) -> str:
    """Repeatedly remove trailing ``5pm`` / ``- 6:30 pm`` tokens."""
    result = value.strip()
    previous = None
    while result and result != previous:
        previous = result
        result = TRAILING_TIME_PATTERN.sub("", result).strip()
    return result
