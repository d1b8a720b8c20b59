from __future__ import annotations

from ..models.processing_result import RunResult

"""SUMMARY line rendering.

Format (single line, space separated key=value pairs):

    SUMMARY rows=<attempted>/<total> submitted=<n> failed=<n> unmatched=<n>
        elapsed_sec=<s> rows_per_min=<r>
"""

__all__ = [
    "render_summary_body",
    "render_summary_line",
]


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Avoid scientific notation for tiny values
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.2f}".rstrip("0").rstrip(".")


def render_summary_line(result: RunResult) -> str:
    """Render the SUMMARY line for a finished (or aborted) run.

    >>> from datetime import datetime, timezone
    >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
    >>> end = datetime(2024, 1, 1, 10, 0, 30, tzinfo=timezone.utc)
    >>> result = RunResult(
    ...     total_rows=12, attempted_rows=12, submitted_rows=11, failed_rows=1,
    ...     unmatched_rows=1, start_time=start, end_time=end,
    ...     elapsed_seconds=30.0, rows_per_minute=24.0,
    ... )
    >>> render_summary_line(result)
    'SUMMARY rows=12/12 submitted=11 failed=1 unmatched=1 elapsed_sec=30 rows_per_min=24'
    """
    return f"SUMMARY {render_summary_body(result)}"


def render_summary_body(result: RunResult) -> str:
    """The SUMMARY line without its label, for ``log_summary`` (which adds it)."""
    return (
        f"rows={result.attempted_rows}/{result.total_rows} "
        f"submitted={result.submitted_rows} "
        f"failed={result.failed_rows} "
        f"unmatched={result.unmatched_rows} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"rows_per_min={_format_number(result.rows_per_minute)}"
    )
