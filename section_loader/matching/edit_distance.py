from __future__ import annotations

from rapidfuzz.distance import Levenshtein

"""Levenshtein edit distance and the similarity score derived from it.

The score is what the dropdown matcher ranks options by, so its two guarantees
matter more than speed:

- ``similarity`` is bounded in [0, 1]
- it never increases when the edit distance grows (for a fixed length bound)

Strings are compared as-is; case and punctuation differences count as edits.
"""

__all__ = [
    "distance",
    "similarity",
]


def distance(a: str | None, b: str | None) -> int:
    """Minimum number of single-character edits turning ``a`` into ``b``.

    ``None`` is treated as the empty string.

    >>> distance("kitten", "sitting")
    3
    >>> distance("", "abc")
    3
    """
    return Levenshtein.distance(a or "", b or "")


def similarity(a: str | None, b: str | None) -> float:
    """Normalized similarity: ``1 - distance / max(len(a), len(b), 1)``."""
    a = a or ""
    b = b or ""
    longest = max(len(a), len(b), 1)
    return 1.0 - distance(a, b) / longest
