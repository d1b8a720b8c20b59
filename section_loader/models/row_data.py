from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

"""RowData model for the section loader.

RowData is one spreadsheet record as read from the first sheet. Columns are
optional: a column missing from the sheet, or a blank cell, reads as ``None``
and the normalizers turn that into their documented default ("" for text,
"0.00" for numbers).
"""

__all__ = [
    "RowData",
]


@dataclass(frozen=True)
class RowData:
    """Raw values of a single spreadsheet row."""
    row_number: int  # spreadsheet line number (header is line 1, first data row is 2)
    values: dict[str, Any]  # column name -> raw cell value (str, int, float or None)

    def get(self, column: str) -> Any:
        return self.values.get(column)

    def identity(self, columns: Iterable[str]) -> dict[str, str]:
        """Identifying fields used in logs and reports (blank cells -> "")."""
        ident: dict[str, str] = {}
        for col in columns:
            value = self.values.get(col)
            if value is None:
                ident[col] = ""
            elif isinstance(value, float) and value.is_integer():
                ident[col] = str(int(value))
            else:
                ident[col] = str(value).strip()
        return ident
