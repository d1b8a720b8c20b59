from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from openpyxl import Workbook, load_workbook

from ..models.row_data import RowData

"""Unmatched-rows report.

Reset to a header-only workbook at the start of every run, then collects the
rows whose categorical value could not be matched to any dropdown option
(empty option list, or best score under the field's threshold). The report is
meant to be fixed up by hand and fed back in as a new spreadsheet.
"""

__all__ = [
    "UnmatchedReport",
]


class UnmatchedReport:
    SHEET_TITLE = "Unmatched Rows"

    def __init__(self, path: Path, identity_columns: Sequence[str]) -> None:
        self.path = path
        self.identity_columns = list(identity_columns)
        self.count = 0

    @property
    def header(self) -> list[str]:
        return ["Row", *self.identity_columns, "Column", "Value", "Reason"]

    def reset(self) -> None:
        """Rewrite the report with only its header row."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        wb = Workbook()
        ws = wb.active
        ws.title = self.SHEET_TITLE
        ws.append(self.header)
        wb.save(self.path)
        self.count = 0

    def append(self, row: RowData, column: str, value: str, reason: str) -> None:
        if not self.path.exists():
            self.reset()
        wb = load_workbook(self.path)
        ws = wb.active
        identity = row.identity(self.identity_columns)
        ws.append(
            [row.row_number, *(identity[c] for c in self.identity_columns), column, value, reason]
        )
        wb.save(self.path)
        self.count += 1
