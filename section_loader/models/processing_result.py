from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .row_process import RowOutcome

"""Run result model for the section loader.

Aggregates the per-row outcomes of one run into the counts the SUMMARY line
reports: how many rows were attempted and how many of them failed.
"""


@dataclass(frozen=True)
class RunResult:
    """Aggregated results of a loader run."""
    total_rows: int  # rows read from the spreadsheet
    attempted_rows: int  # rows handed to the row processor
    submitted_rows: int
    failed_rows: int
    unmatched_rows: int  # failed rows whose cause was a fuzzy match
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    rows_per_minute: float
    outcomes: list[RowOutcome] = field(default_factory=list)

    @staticmethod
    def from_outcomes(
        total_rows: int,
        outcomes: list[RowOutcome],
        start_time: datetime,
        end_time: datetime,
    ) -> RunResult:
        elapsed = (end_time - start_time).total_seconds()
        submitted = sum(1 for o in outcomes if o.succeeded)
        failed = len(outcomes) - submitted
        unmatched = sum(1 for o in outcomes if o.unmatched)
        # Avoid division by zero
        per_minute = len(outcomes) / elapsed * 60 if elapsed > 0 else 0.0
        return RunResult(
            total_rows=total_rows,
            attempted_rows=len(outcomes),
            submitted_rows=submitted,
            failed_rows=failed,
            unmatched_rows=unmatched,
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=elapsed,
            rows_per_minute=per_minute,
            outcomes=list(outcomes),
        )
