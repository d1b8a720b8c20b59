from __future__ import annotations

import math
import re
from typing import Any

"""Field normalization.

Pure functions turning raw spreadsheet cells into the exact text typed into
the section form. Same input, same output; no I/O.
"""

__all__ = [
    "DEFAULT_DELIMITER",
    "DEFAULT_NUMBER",
    "normalize_number",
    "normalize_string",
]

DEFAULT_DELIMITER = " - "
DEFAULT_NUMBER = "0.00"

# Leading decimal literal, the way a browser's parseFloat reads "12.5 ft"
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def normalize_string(
    value: Any,
    delimiter: str = DEFAULT_DELIMITER,
    max_segments: int | None = 2,
) -> str:
    """Trim ``value`` and keep at most ``max_segments`` delimiter-separated parts.

    >>> normalize_string("MAIN ST - LOT 4 - EXTRA")
    'MAIN ST - LOT 4'
    >>> normalize_string("  MAIN ST ")
    'MAIN ST'
    >>> normalize_string("A - B - C", max_segments=None)
    'A - B - C'
    """
    text = _as_text(value).strip()
    if max_segments is None or not delimiter or delimiter not in text:
        return text
    parts = text.split(delimiter)
    return delimiter.join(parts[:max_segments]).strip()


def normalize_number(value: Any) -> str:
    """Format ``value`` with exactly two decimals, ``"0.00"`` when unparseable.

    >>> normalize_number("12.3")
    '12.30'
    >>> normalize_number("abc")
    '0.00'
    """
    if isinstance(value, bool):
        return DEFAULT_NUMBER
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(_as_text(value).strip())
        if not match:
            return DEFAULT_NUMBER
        number = float(match.group(0))
    if math.isnan(number) or math.isinf(number):
        return DEFAULT_NUMBER
    return f"{number:.2f}"
