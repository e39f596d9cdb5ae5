"""Tolerant JSON decoding for language-model output.

Models asked for "JSON only" still wrap it in prose or code fences,
leave raw newlines inside strings, end sentences with a stray period
instead of a comma, or leave trailing commas. Each repair is tried only
after the previous, less invasive attempt failed.
"""

from __future__ import annotations

import json
import re
from typing import Any

_STRAY_PERIOD_BEFORE_COMMA = re.compile(r'"\s*\.(?=\s*,)')
_PERIOD_BETWEEN_STRINGS = re.compile(r'"(\s*)\.(?=\s*")')
_TRAILING_COMMA = re.compile(r",(?=\s*[}\]])")

_CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


def escape_control_chars_in_strings(text: str) -> str:
    """Escape raw newlines, carriage returns and tabs inside JSON strings."""
    output = []
    in_string = False
    escaped = False

    for ch in text:
        if escaped:
            output.append(ch)
            escaped = False
        elif ch == "\\":
            output.append(ch)
            escaped = True
        elif ch == '"':
            output.append(ch)
            in_string = not in_string
        elif in_string and ch in _CONTROL_ESCAPES:
            output.append(_CONTROL_ESCAPES[ch])
        else:
            output.append(ch)

    return "".join(output)


def sanitize_json_text(text: str) -> str:
    """Fix stray periods between values and drop trailing commas."""
    text = _STRAY_PERIOD_BEFORE_COMMA.sub('"', text)
    text = _PERIOD_BETWEEN_STRINGS.sub(r'"\1,', text)
    return _TRAILING_COMMA.sub("", text)


def parse_lenient_json(raw_text: str) -> Any:
    """Decode model output, repairing common defects.

    Args:
        raw_text: Text returned by the model.

    Returns:
        The decoded value.

    Raises:
        json.JSONDecodeError: No repair produced valid JSON.
    """
    try:
        return json.loads(raw_text)
    except json.JSONDecodeError:
        start = raw_text.find("{")
        end = raw_text.rfind("}")
        if start == -1 or end == -1 or end <= start:
            raise

    sliced = raw_text[start:end + 1]
    try:
        return json.loads(sliced)
    except json.JSONDecodeError:
        pass

    escaped = escape_control_chars_in_strings(sliced)
    try:
        return json.loads(escaped)
    except json.JSONDecodeError:
        return json.loads(sanitize_json_text(escaped))
