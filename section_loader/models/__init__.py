"""Domain models for the StreetSaver section loader.

This package contains the dataclasses and enums shared by the services:
configuration, spreadsheet rows, per-row outcomes and run results.
"""

from .config_models import (
    EntryConfig,
    FieldKind,
    FieldSpec,
    RetryPolicy,
    SiteSelectors,
    SiteUrls,
    Timeouts,
)
from .error_record import ErrorRecord
from .processing_result import RunResult
from .row_data import RowData
from .row_process import RowOutcome, RowStatus

__all__ = [
    # Configuration models
    "EntryConfig",
    "FieldKind",
    "FieldSpec",
    "RetryPolicy",
    "SiteSelectors",
    "SiteUrls",
    "Timeouts",
    # Processing models
    "ErrorRecord",
    "RowData",
    "RowOutcome",
    "RowStatus",
    "RunResult",
]
