# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pytest

from section_loader.browser.resilient import ResilientAction
from section_loader.logging.audit import MemoryAuditLog
from section_loader.logging.error_log import ErrorLogBuffer
from section_loader.logging.init import reset_logging
from section_loader.models.config_models import (
    EntryConfig,
    FieldKind,
    FieldSpec,
    SiteSelectors,
    SiteUrls,
    Timeouts,
)

from fakes import FakeDriver

SECTION_URL = "https://example.test/Forms/PavementSections/Section?linkid=linkSection"


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "STREETSAVER_USERNAME",
        "STREETSAVER_PASSWORD",
        "SECTION_LOADER_CONFIG",
        "SECTION_LOADER_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """username: planner@example.test
password: secret
spreadsheet_path: data/sections.xlsx
target_database_name: City of Example
selectors:
  add_section: "#btnAdd"
  submit_section: "#btnSave"
  error_dialog: "#errorDialog"
  error_dismiss: "#errorDialog .close"
fields:
  - {column: Section ID, selector: "#txtSectionID"}
  - {column: Street Name/Lot Location, selector: "#txtStreetName", truncate: true}
  - {column: Area, selector: "#txtArea", kind: number}
  - {column: Functional Class, selector: "#cboFunctionalClass", kind: select, threshold: 0.5}
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "entry.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def entry_config(tmp_path: Path) -> EntryConfig:
    return EntryConfig(
        username="planner@example.test",
        password="secret",
        spreadsheet_path=str(tmp_path / "sections.xlsx"),
        target_database_name="City of Example",
        selectors=SiteSelectors(
            add_section="#btnAdd",
            submit_section="#btnSave",
            error_dialog="#errorDialog",
            error_dismiss="#errorDialog .close",
        ),
        fields=(
            FieldSpec("Section ID", "#txtSectionID"),
            FieldSpec("Street Name/Lot Location", "#txtStreetName", truncate=True),
            FieldSpec("Area", "#txtArea", kind=FieldKind.NUMBER),
            FieldSpec("Functional Class", "#cboFunctionalClass", kind=FieldKind.SELECT, threshold=0.5),
        ),
        urls=SiteUrls(login=SECTION_URL, section_form=SECTION_URL),
        timeouts=Timeouts(post_login_settle_ms=0, menu_settle_ms=0, row_pause_ms=500),
        audit_log_path=str(tmp_path / "logs" / "audit_log.xlsx"),
        unmatched_report_path=str(tmp_path / "unmatched_rows.xlsx"),
    )


@pytest.fixture()
def no_wait_policy() -> ResilientAction:
    return ResilientAction(retries=3, wait_between=0, sleep=lambda _s: None)


@pytest.fixture()
def memory_audit() -> MemoryAuditLog:
    return MemoryAuditLog()


@pytest.fixture()
def error_log(tmp_path: Path) -> ErrorLogBuffer:
    return ErrorLogBuffer(tmp_path / "logs")


@pytest.fixture()
def fake_driver() -> FakeDriver:
    # Error dialog starts hidden; everything else is visible
    return FakeDriver(
        options={
            "#cboDBName": ["City of Exampel", "County Roads", "City of Example Archive"],
            "#cboFunctionalClass": ["Arterial", "Collector", "Residential/Local"],
        },
        hidden={"#errorDialog"},
    )
