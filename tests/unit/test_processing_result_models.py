from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from section_loader.models.processing_result import RunResult
from section_loader.models.row_data import RowData
from section_loader.models.row_process import RowOutcome, RowStatus


def test_row_outcome_succeeded_only_when_submitted():
    assert RowOutcome(2, RowStatus.SUBMITTED).succeeded
    assert not RowOutcome(2, RowStatus.FAILED, failed_in=RowStatus.FILLING).succeeded


def test_row_outcome_is_frozen():
    outcome = RowOutcome(2, RowStatus.SUBMITTED)
    with pytest.raises(FrozenInstanceError):
        outcome.status = RowStatus.FAILED  # type: ignore[misc]


def test_run_result_from_outcomes_counts():
    start = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)
    end = start + timedelta(seconds=120)
    outcomes = [
        RowOutcome(2, RowStatus.SUBMITTED),
        RowOutcome(3, RowStatus.FAILED, error_type="NO_ACCEPTABLE_MATCH", unmatched=True),
        RowOutcome(4, RowStatus.FAILED, error_type="VALIDATION_REJECTED"),
        RowOutcome(5, RowStatus.SUBMITTED),
    ]
    result = RunResult.from_outcomes(6, outcomes, start, end)
    assert result.total_rows == 6
    assert result.attempted_rows == 4
    assert result.submitted_rows == 2
    assert result.failed_rows == 2
    assert result.unmatched_rows == 1
    assert result.elapsed_seconds == 120
    assert result.rows_per_minute == pytest.approx(2.0)
    assert [o.row_number for o in result.outcomes] == [2, 3, 4, 5]


def test_run_result_zero_elapsed():
    now = datetime(2024, 5, 1, tzinfo=timezone.utc)
    result = RunResult.from_outcomes(0, [], now, now)
    assert result.rows_per_minute == 0.0


def test_row_data_identity_formats_values():
    row = RowData(2, {"Section ID": 12.0, "Area": 3.5, "Street/Lot ID": "  ST-1 ", "Blank": None})
    assert row.identity(["Street/Lot ID", "Section ID", "Area", "Blank"]) == {
        "Street/Lot ID": "ST-1",
        "Section ID": "12",
        "Area": "3.5",
        "Blank": "",
    }
    assert row.get("Missing") is None
