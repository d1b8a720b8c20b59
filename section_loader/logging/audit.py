from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Protocol
from zipfile import BadZipFile
from zoneinfo import ZoneInfo

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException

"""Append-only audit log of run events.

One row per significant event (workspace selected, row added, row failed, run
aborted) with columns ``Timestamp, Action, <identity columns>``. Timestamps use
the configured zone and the ``YYYY-MM-DD HH:MM:SS`` format.

The services only see the ``AuditSink`` protocol; ``ExcelAuditLog`` is the
spreadsheet-backed implementation used by the CLI.
"""

__all__ = [
    "AuditEntry",
    "AuditSink",
    "ExcelAuditLog",
    "MemoryAuditLog",
    "TIMESTAMP_FORMAT",
    "WORKBOOK_ERRORS",
    "record_event",
]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Errors from a workbook that is locked or is not a valid xlsx file
WORKBOOK_ERRORS = (OSError, BadZipFile, InvalidFileException)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditEntry:
    timestamp: str  # YYYY-MM-DD HH:MM:SS in the configured zone
    action: str
    identity: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def now(action: str, identity: dict[str, str] | None = None, timezone: str = "UTC") -> AuditEntry:
        ts = datetime.now(ZoneInfo(timezone)).strftime(TIMESTAMP_FORMAT)
        return AuditEntry(timestamp=ts, action=action, identity=dict(identity or {}))


class AuditSink(Protocol):
    def append(self, entry: AuditEntry) -> None: ...


class ExcelAuditLog:
    """Audit sink writing through to an ``.xlsx`` workbook on every append."""

    SHEET_TITLE = "Audit Log"

    def __init__(self, path: Path, identity_columns: Sequence[str]) -> None:
        self.path = path
        self.identity_columns = list(identity_columns)

    @property
    def header(self) -> list[str]:
        return ["Timestamp", "Action", *self.identity_columns]

    def _open(self) -> Workbook:
        if self.path.exists():
            return load_workbook(self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        wb = Workbook()
        ws = wb.active
        ws.title = self.SHEET_TITLE
        ws.append(self.header)
        return wb

    def append(self, entry: AuditEntry) -> None:
        wb = self._open()
        ws = wb.active
        ws.append(
            [entry.timestamp, entry.action, *(entry.identity.get(c, "") for c in self.identity_columns)]
        )
        wb.save(self.path)


class MemoryAuditLog:
    """Audit sink keeping entries in memory (tests, dry runs)."""

    def __init__(self) -> None:
        self.entries: list[AuditEntry] = []

    @property
    def actions(self) -> list[str]:
        return [e.action for e in self.entries]

    def append(self, entry: AuditEntry) -> None:
        self.entries.append(entry)


def record_event(
    sink: AuditSink,
    action: str,
    identity: dict[str, str] | None = None,
    timezone: str = "UTC",
) -> None:
    """Append an event to ``sink``; a write failure is logged, not raised.

    A failed write never changes a row's outcome and never aborts the run.
    """
    try:
        sink.append(AuditEntry.now(action, identity, timezone))
    except WORKBOOK_ERRORS as e:
        logger.error("audit log write failed (%s): %s", action, e)
