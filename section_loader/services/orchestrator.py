from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from datetime import UTC, datetime
from pathlib import Path

from ..browser.driver import PageDriver
from ..browser.resilient import ResilientAction
from ..browser.session import SessionError, open_session
from ..excel.reader import read_rows
from ..excel.unmatched import UnmatchedReport
from ..logging.audit import AuditSink, ExcelAuditLog, record_event
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import EntryConfig
from ..models.error_record import ErrorRecord
from ..models.processing_result import RunResult
from ..models.row_data import RowData
from ..models.row_process import RowOutcome
from .progress import ProgressTracker
from .row_processor import RowProcessor
from .workspace import login, select_workspace

"""Run orchestration for the section loader.

One run, in order:

1. reset the unmatched-rows report
2. open the browser session
3. log in and select the target database
4. enter every row, strictly in spreadsheet order, pausing between rows
5. close the session (always) and flush the error log (always)

Row failures are contained by ``RowProcessor``; only ``SessionError`` (launch,
login, database selection or a lost session) aborts the run.
"""

__all__ = [
    "RunController",
    "run_all",
]

logger = logging.getLogger(__name__)

DriverFactory = Callable[[EntryConfig], AbstractContextManager[PageDriver]]


class RunController:
    def __init__(
        self,
        config: EntryConfig,
        driver_factory: DriverFactory = open_session,
        audit: AuditSink | None = None,
        unmatched: UnmatchedReport | None = None,
        error_log: ErrorLogBuffer | None = None,
        policy: ResilientAction | None = None,
    ) -> None:
        self.config = config
        self.driver_factory = driver_factory
        if audit is None:
            audit = ExcelAuditLog(Path(config.audit_log_path), config.identity_columns)
        if unmatched is None:
            unmatched = UnmatchedReport(Path(config.unmatched_report_path), config.identity_columns)
        # ErrorLogBuffer is falsy while empty
        if error_log is None:
            error_log = ErrorLogBuffer()
        self.audit = audit
        self.unmatched = unmatched
        self.error_log = error_log
        self.policy = policy or ResilientAction.from_policy(config.retry)
        self.processor = RowProcessor(
            config, self.audit, self.unmatched, self.error_log, self.policy
        )

    def run(self, rows: Sequence[RowData]) -> RunResult:
        """Enter ``rows`` into the target database.

        Raises:
            SessionError: If the session cannot be opened, login or database
                selection fails, or the session is lost mid-run
        """
        start_time = datetime.now(UTC)
        outcomes: list[RowOutcome] = []
        logger.info("Loaded %d rows from the spreadsheet", len(rows))
        self.unmatched.reset()
        try:
            with self.driver_factory(self.config) as driver:
                login(driver, self.config)
                match = select_workspace(driver, self.config, self.policy)
                record_event(
                    self.audit,
                    f"Workspace selected: {match.option.label}",
                    timezone=self.config.timezone,
                )
                self._process_rows(driver, rows, outcomes)
        except SessionError as e:
            logger.error("run aborted: %s", e)
            self.error_log.append(ErrorRecord.create(-1, "SESSION_ERROR", str(e)))
            record_event(self.audit, "Run aborted", timezone=self.config.timezone)
            raise
        finally:
            path = self.error_log.flush()
            if path is not None:
                logger.info("Errors written to %s", path)

        end_time = datetime.now(UTC)
        result = RunResult.from_outcomes(len(rows), outcomes, start_time, end_time)
        if result.unmatched_rows:
            logger.info(
                "%d unmatched rows written to %s", result.unmatched_rows, self.unmatched.path
            )
        return result

    def _process_rows(
        self, driver: PageDriver, rows: Sequence[RowData], outcomes: list[RowOutcome]
    ) -> None:
        pause_ms = self.config.timeouts.row_pause_ms
        with ProgressTracker(len(rows)) as progress:
            for i, row in enumerate(rows):
                progress.start_row(row.row_number)
                outcome = self.processor.process_row(driver, row)
                outcomes.append(outcome)
                progress.finish_row(outcome.succeeded)
                if i < len(rows) - 1 and pause_ms:
                    driver.pause(pause_ms)


def run_all(config: EntryConfig) -> RunResult:
    """Read the configured spreadsheet and run it with default collaborators.

    Raises:
        SpreadsheetError: If the spreadsheet cannot be read
        SessionError: As ``RunController.run``
    """
    rows = read_rows(Path(config.spreadsheet_path))
    return RunController(config).run(rows)
