from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Config dataclasses for the StreetSaver section loader.

These are the typed view of ``config/entry.yml`` once the loader has validated
it. URLs and selectors describe the target application's markup; they are
handed to every component from here and never spelled out at the call site.
"""

DEFAULT_BASE_URL = "https://demo.streetsaver.com"

DEFAULT_IDENTITY_COLUMNS = (
    "Street/Lot ID",
    "Section ID",
    "Street Name/Lot Location",
    "Area",
)


class FieldKind(Enum):
    """How a spreadsheet column is entered into the section form.

    - TEXT: trimmed string typed into an input
    - NUMBER: two-decimal number typed into an input
    - SELECT: fuzzy-matched against the live dropdown options
    """
    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"


@dataclass(frozen=True)
class FieldSpec:
    """One spreadsheet column mapped to one form control."""
    column: str  # spreadsheet header
    selector: str  # form control on the section page
    kind: FieldKind = FieldKind.TEXT
    truncate: bool = False  # keep only the first two " - " segments
    threshold: float = 0.0  # minimum similarity for SELECT fields


@dataclass(frozen=True)
class Timeouts:
    """Bounded waits, all in milliseconds."""
    navigation_ms: int = 30000
    element_ms: int = 10000
    error_dialog_ms: int = 3000
    post_login_settle_ms: int = 8000
    menu_settle_ms: int = 1000
    row_pause_ms: int = 500


@dataclass(frozen=True)
class RetryPolicy:
    attempts: int = 3
    wait_ms: int = 500


@dataclass(frozen=True)
class SiteUrls:
    login: str = f"{DEFAULT_BASE_URL}/Forms/PavementSections/Section?linkid=linkSection"
    section_form: str = f"{DEFAULT_BASE_URL}/Forms/PavementSections/Section?linkid=linkSection"


@dataclass(frozen=True)
class SiteSelectors:
    """Form control selectors of the target application.

    The login and menu defaults match the markup the site renders today. The
    section-form controls vary between deployments and must be configured.
    """
    add_section: str
    submit_section: str
    error_dialog: str
    error_dismiss: str
    confirmation: str | None = None
    email: str = "#Email"
    password: str = "#Password"
    login_button: str = "#ContentPlaceHolder1_btnLogin"
    sysadmin_toggle: str = "#toggleSysAdmin"
    sysadmin_menu: str = "#sysadmin.menu-dropdown.collapse.show"
    open_database: str = "#linkDBOpen"
    database_dropdown: str = "#cboDBName"
    sections_toggle: str = "#togglePavementSections"
    sections_menu: str = "#pavementSections.menu-dropdown.collapse.show"
    road_names: str = "#linkRdNames"
    road_names_grid: str = "#ctl00_ContentPlaceHolder1_grdEDIT_grdData"


@dataclass(frozen=True)
class EntryConfig:
    """Root configuration object for a loader run."""
    username: str
    password: str
    spreadsheet_path: str
    target_database_name: str  # fuzzy-matched against the live database list
    selectors: SiteSelectors
    fields: tuple[FieldSpec, ...]
    timezone: str = "UTC"
    headless: bool = False
    urls: SiteUrls = field(default_factory=SiteUrls)
    timeouts: Timeouts = field(default_factory=Timeouts)
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    identity_columns: tuple[str, ...] = DEFAULT_IDENTITY_COLUMNS
    audit_log_path: str = "logs/audit_log.xlsx"
    unmatched_report_path: str = "unmatched_rows.xlsx"
