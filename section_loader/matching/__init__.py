"""Fuzzy matching of spreadsheet values against server-rendered dropdowns."""

from .best_match import (
    DropdownOption,
    MatchResult,
    NoAcceptableMatchError,
    NoCandidatesError,
    select_best,
    select_best_value,
)
from .edit_distance import distance, similarity

__all__ = [
    "DropdownOption",
    "MatchResult",
    "NoAcceptableMatchError",
    "NoCandidatesError",
    "distance",
    "select_best",
    "select_best_value",
    "similarity",
]
