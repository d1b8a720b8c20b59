from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.row_data import RowData

"""Spreadsheet row reader.

Only the first sheet is read. Line 1 is the header, every later non-empty
line is a data row. Cells are handed over raw apart from:

- blank / NaN cells -> None
- numpy scalars -> plain int / float
- date cells -> ``MM/DD/YYYY`` text, the format the section form expects

Only truly empty cells count as missing: text such as "NA" or "N/A" stays
text.
"""

__all__ = [
    "SpreadsheetError",
    "read_rows",
    "DATE_FORMAT",
]

DATE_FORMAT = "%m/%d/%Y"


class SpreadsheetError(Exception):
    """Raised when the spreadsheet cannot be read."""


def _cell_value(val: Any) -> Any:
    if val is None:
        return None
    if isinstance(val, (pd.Timestamp, datetime, date)):
        if pd.isna(val):
            return None
        return val.strftime(DATE_FORMAT)
    if pd.isna(val):
        return None
    if hasattr(val, "item"):  # numpy scalar
        val = val.item()
    if isinstance(val, str):
        stripped = val.strip()
        return stripped if stripped else None
    return val


def read_rows(path: Path) -> list[RowData]:
    """Read the first sheet of ``path`` into RowData records.

    Raises:
        SpreadsheetError: If the file is missing or cannot be parsed
    """
    if not path.exists():
        raise SpreadsheetError(f"spreadsheet not found: {path}")
    try:
        df = pd.read_excel(path, sheet_name=0, header=None, keep_default_na=False, na_values=[""])
    except Exception as e:  # pandas/openpyxl raise a wide range of parse errors
        raise SpreadsheetError(f"cannot read spreadsheet {path}: {e}") from e

    if df.shape[0] < 1:
        return []

    columns = [str(c).strip() if not pd.isna(c) else "" for c in df.iloc[0].tolist()]
    rows: list[RowData] = []
    for offset, (_, raw) in enumerate(df.iloc[1:].iterrows()):
        if raw.isna().all():
            continue
        values: dict[str, Any] = {}
        for col, val in zip(columns, raw.tolist(), strict=False):
            if not col:
                continue
            values[col] = _cell_value(val)
        # header is line 1, so the first data row is line 2
        rows.append(RowData(row_number=offset + 2, values=values))
    return rows
