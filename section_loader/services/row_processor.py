from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from playwright.sync_api import TimeoutError as PlaywrightTimeout

from ..browser.driver import PageDriver
from ..browser.resilient import ActionFailedError, ResilientAction, retry_click
from ..browser.session import SessionError
from ..excel.unmatched import UnmatchedReport
from ..logging.audit import WORKBOOK_ERRORS, AuditSink, record_event
from ..logging.error_log import ErrorLogBuffer
from ..matching.best_match import NoAcceptableMatchError, NoCandidatesError, select_best
from ..models.config_models import EntryConfig, FieldKind, FieldSpec
from ..models.error_record import ErrorRecord
from ..models.row_data import RowData
from ..models.row_process import RowOutcome, RowStatus
from .normalize import normalize_number, normalize_string

"""Per-row section entry with failure isolation.

Each row runs through ``PENDING → NORMALIZING → FILLING → SUBMITTED``. Any
error moves it straight to ``FAILED``: the error is logged with the row's
identifying fields (console, error log, audit log) and ``process_row`` returns
normally, so the next row starts from ``PENDING`` on a freshly loaded form.

``SessionError`` is the one exception that is not contained here; it means
the browser session itself is gone and is left to the run controller.
"""

__all__ = [
    "RowProcessor",
    "ValidationRejectedError",
    "classify_error",
    "normalize_row",
]

logger = logging.getLogger(__name__)


class ValidationRejectedError(Exception):
    """The application rejected the submitted section (e.g. duplicate Section ID).

    Never retried: resubmitting the same values gets the same answer.
    """


def classify_error(exc: BaseException) -> str:
    """Map an exception to its UPPER_SNAKE error type."""
    if isinstance(exc, NoAcceptableMatchError):
        return "NO_ACCEPTABLE_MATCH"
    if isinstance(exc, NoCandidatesError):
        return "NO_CANDIDATES"
    if isinstance(exc, ActionFailedError):
        return "ACTION_FAILED"
    if isinstance(exc, ValidationRejectedError):
        return "VALIDATION_REJECTED"
    if isinstance(exc, (TimeoutError, PlaywrightTimeout)):
        return "UI_TIMEOUT"
    return "UNEXPECTED_ERROR"


def normalize_row(row: RowData, fields: Sequence[FieldSpec]) -> dict[str, str]:
    """Form values for ``row``, keyed by column.

    Missing columns and blank cells take the normalizers' defaults: "" for
    text and select fields, "0.00" for number fields.
    """
    values: dict[str, str] = {}
    for spec in fields:
        raw = row.get(spec.column)
        if spec.kind is FieldKind.NUMBER:
            values[spec.column] = normalize_number(raw)
        else:
            values[spec.column] = normalize_string(raw, max_segments=2 if spec.truncate else None)
    return values


class RowProcessor:
    def __init__(
        self,
        config: EntryConfig,
        audit: AuditSink,
        unmatched: UnmatchedReport | None = None,
        error_log: ErrorLogBuffer | None = None,
        policy: ResilientAction | None = None,
    ) -> None:
        self.config = config
        self.audit = audit
        self.unmatched = unmatched
        self.error_log = error_log
        self.policy = policy or ResilientAction.from_policy(config.retry)

    def process_row(self, driver: PageDriver, row: RowData) -> RowOutcome:
        """Enter one row as a new pavement section.

        Returns the row's outcome; only ``SessionError`` propagates.
        """
        start = time.monotonic()
        identity = row.identity(self.config.identity_columns)
        state = RowStatus.PENDING
        logger.info(
            "Processing row %d: %s",
            row.row_number,
            ", ".join(f"{k}: {v}" for k, v in identity.items()),
        )
        try:
            state = RowStatus.NORMALIZING
            values = normalize_row(row, self.config.fields)

            state = RowStatus.FILLING
            self._open_form(driver)
            for spec in self.config.fields:
                self._fill_field(driver, row, spec, values[spec.column])
            self._submit(driver)
        except SessionError:
            raise
        except Exception as e:
            return self._fail(row, identity, state, e, start)

        record_event(self.audit, "Section added", identity, self.config.timezone)
        logger.info("Row %d submitted", row.row_number)
        return RowOutcome(
            row_number=row.row_number,
            status=RowStatus.SUBMITTED,
            identity=identity,
            elapsed_seconds=time.monotonic() - start,
        )

    def _open_form(self, driver: PageDriver) -> None:
        sel = self.config.selectors
        driver.goto(self.config.urls.section_form)
        retry_click(driver, sel.add_section, self.policy)
        if not driver.wait_visible(sel.submit_section):
            raise TimeoutError("section form did not open")

    def _fill_field(self, driver: PageDriver, row: RowData, spec: FieldSpec, value: str) -> None:
        if spec.kind is not FieldKind.SELECT:
            driver.fill(spec.selector, value)
            logger.debug("  %s = %r", spec.column, value)
            return

        if not value:
            logger.debug("  %s is blank, leaving dropdown unchanged", spec.column)
            return
        # Options are re-read every time: lists differ between databases and pages
        options = driver.read_options(spec.selector)
        try:
            match = select_best(value, options, spec.threshold)
        except NoCandidatesError as e:
            self._report_unmatched(row, spec.column, value, str(e))
            raise
        driver.select_value(spec.selector, match.value)
        logger.info(
            "  %s: '%s' -> '%s' (score=%.2f)", spec.column, value, match.option.label, match.score
        )

    def _submit(self, driver: PageDriver) -> None:
        sel = self.config.selectors
        retry_click(driver, sel.submit_section, self.policy)

        if driver.wait_visible(sel.error_dialog, self.config.timeouts.error_dialog_ms):
            message = driver.text_of(sel.error_dialog) or "validation error"
            try:
                retry_click(driver, sel.error_dismiss, self.policy)
            except ActionFailedError as e:
                logger.error("could not dismiss validation dialog: %s", e)
            raise ValidationRejectedError(message)

        if sel.confirmation and not driver.wait_visible(sel.confirmation):
            raise TimeoutError("no confirmation after submit")

    def _report_unmatched(self, row: RowData, column: str, value: str, reason: str) -> None:
        if self.unmatched is None:
            return
        try:
            self.unmatched.append(row, column, value, reason)
        except WORKBOOK_ERRORS as e:
            logger.error("unmatched report write failed for row %d: %s", row.row_number, e)

    def _fail(
        self,
        row: RowData,
        identity: dict[str, str],
        state: RowStatus,
        exc: Exception,
        start: float,
    ) -> RowOutcome:
        error_type = classify_error(exc)
        logger.error(
            "row %d failed (%s) while %s: %s", row.row_number, error_type, state.value, exc
        )
        logger.debug("row %d traceback", row.row_number, exc_info=exc)
        if self.error_log is not None:
            self.error_log.append(ErrorRecord.create(row.row_number, error_type, str(exc), identity))
        record_event(self.audit, f"Row failed: {error_type}", identity, self.config.timezone)
        return RowOutcome(
            row_number=row.row_number,
            status=RowStatus.FAILED,
            identity=identity,
            failed_in=state,
            error_type=error_type,
            error=str(exc),
            unmatched=isinstance(exc, NoCandidatesError),
            elapsed_seconds=time.monotonic() - start,
        )
