from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

Every error the loader catches (row-level or run-level) becomes one ErrorRecord
in the JSON Lines error log. ``row=-1`` marks run-level errors (login,
workspace selection, browser launch) where no spreadsheet row is involved.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        row: Spreadsheet line number, or -1 for run-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Error message
        identity: Identifying fields of the row (empty for run-level errors)
    """
    timestamp: str  # ISO8601 UTC
    row: int  # -1 when no row is involved
    error_type: str  # UPPER_SNAKE
    message: str
    identity: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def create(
        row: int,
        error_type: str,
        message: str,
        identity: dict[str, str] | None = None,
    ) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            row=row,
            error_type=error_type,
            message=message,
            identity=dict(identity or {}),
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (fixed key set)."""
        return json.dumps(asdict(self), ensure_ascii=False)
