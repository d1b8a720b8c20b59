from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .edit_distance import similarity

"""Best-match selection of a dropdown option for a free-text value.

Options come straight from the live page (value attribute + visible label) and
are scored against the target with the edit-distance similarity. The scan keeps
the first option on ties: a later option replaces the current best only when
its score is strictly greater.
"""

__all__ = [
    "DropdownOption",
    "MatchResult",
    "NoCandidatesError",
    "NoAcceptableMatchError",
    "select_best",
    "select_best_value",
]

logger = logging.getLogger(__name__)


class NoCandidatesError(Exception):
    """Raised when a match is requested against an empty option list."""


class NoAcceptableMatchError(NoCandidatesError):
    """Raised when the best option scores below the caller's threshold."""

    def __init__(self, target: str, best: MatchResult, threshold: float) -> None:
        super().__init__(
            f"no option for '{target}' reaches threshold {threshold:.2f} "
            f"(best '{best.option.label}' scored {best.score:.2f})"
        )
        self.target = target
        self.best = best
        self.threshold = threshold


@dataclass(frozen=True)
class DropdownOption:
    """One ``<option>`` of a select control."""
    value: str
    label: str


@dataclass(frozen=True)
class MatchResult:
    option: DropdownOption
    score: float
    index: int  # position in the option list as read from the page

    @property
    def value(self) -> str:
        return self.option.value


def select_best(
    target: str,
    options: Sequence[DropdownOption],
    threshold: float = 0.0,
) -> MatchResult:
    """Return the option whose label is most similar to ``target``.

    Args:
        target: Normalized spreadsheet value
        options: Options in page order
        threshold: Minimum acceptable similarity (0 accepts any best option)

    Raises:
        NoCandidatesError: ``options`` is empty
        NoAcceptableMatchError: best score is below ``threshold``
    """
    if not options:
        raise NoCandidatesError(f"no options to match '{target}' against")

    best = MatchResult(option=options[0], score=similarity(target, options[0].label), index=0)
    for index, option in enumerate(options[1:], start=1):
        score = similarity(target, option.label)
        if score > best.score:
            best = MatchResult(option=option, score=score, index=index)

    logger.debug(
        "match target=%r best=%r score=%.3f candidates=%d",
        target,
        best.option.label,
        best.score,
        len(options),
    )
    if best.score < threshold:
        raise NoAcceptableMatchError(target, best, threshold)
    return best


def select_best_value(target: str, options: Sequence[DropdownOption], threshold: float = 0.0) -> str:
    """Shortcut for ``select_best(...).value``."""
    return select_best(target, options, threshold).value
