from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

A single bar counts rows as they finish; the postfix shows the running
submitted / failed counts. In non-TTY environments (CI, redirected output) the
bar is disabled so the log stays free of control sequences.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """True if stdout is a TTY and the progress bar should be displayed."""
    return sys.stdout.isatty()


class ProgressTracker:
    """Row progress bar.

    ``submitted`` and ``failed`` are counted whether or not the bar is shown.
    """

    def __init__(self, total_rows: int, *, description: str = "Entering sections") -> None:
        self.total_rows = total_rows
        self.description = description
        self.current_row = 0
        self.submitted = 0
        self.failed = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start_row(self, row_number: int) -> None:
        self.current_row += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} (row {row_number})")

    def finish_row(self, success: bool = True) -> None:
        if success:
            self.submitted += 1
        else:
            self.failed += 1
        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)
            self.pbar.set_postfix(submitted=self.submitted, failed=self.failed)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
