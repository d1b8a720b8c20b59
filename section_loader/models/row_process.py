from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Row processing status and outcome.

State transitions: pending → normalizing → filling → (submitted | failed)

A row may fail from any state; the next row always starts again from
``PENDING``.
"""


class RowStatus(Enum):
    """Lifecycle of one row inside the row processor.

    - PENDING: Row read, nothing done yet
    - NORMALIZING: Raw cells are being converted to form values
    - FILLING: Form controls are being filled / matched
    - SUBMITTED: Submit clicked and no validation error came back
    - FAILED: Any error; the row is abandoned
    """
    PENDING = "pending"
    NORMALIZING = "normalizing"
    FILLING = "filling"
    SUBMITTED = "submitted"
    FAILED = "failed"


@dataclass(frozen=True)
class RowOutcome:
    """Final state of a processed row."""
    row_number: int
    status: RowStatus
    identity: dict[str, str] = field(default_factory=dict)
    failed_in: RowStatus | None = None  # state the row was in when it failed
    error_type: str | None = None  # UPPER_SNAKE classification
    error: str | None = None  # failure reason summary
    unmatched: bool = False  # failed on a fuzzy match
    elapsed_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.status is RowStatus.SUBMITTED
