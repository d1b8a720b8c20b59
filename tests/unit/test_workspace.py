from __future__ import annotations

import pytest

from section_loader.browser.resilient import ActionFailedError
from section_loader.matching.best_match import NoCandidatesError
from section_loader.services.workspace import SessionError, login, select_workspace


def test_login_fills_credentials_and_waits(entry_config, fake_driver):
    login(fake_driver, entry_config)
    assert fake_driver.calls[:5] == [
        ("goto", entry_config.urls.login),
        ("fill", "#Email", "planner@example.test"),
        ("fill", "#Password", "secret"),
        ("click", "#ContentPlaceHolder1_btnLogin"),
        ("wait_for_load",),
    ]
    assert fake_driver.pauses == [entry_config.timeouts.post_login_settle_ms]
    assert ("wait_visible", "#toggleSysAdmin") in fake_driver.calls


def test_login_rejected_credentials(entry_config, fake_driver):
    fake_driver.hidden.add("#toggleSysAdmin")
    with pytest.raises(SessionError) as e:
        login(fake_driver, entry_config)
    assert "application menu did not appear" in str(e.value)


def test_login_navigation_failure(entry_config, fake_driver):
    def unreachable(url, timeout_ms=None):
        raise ConnectionError("net::ERR_NAME_NOT_RESOLVED")

    fake_driver.goto = unreachable
    with pytest.raises(SessionError) as e:
        login(fake_driver, entry_config)
    assert isinstance(e.value.__cause__, ConnectionError)


def test_select_workspace_picks_closest_database(entry_config, fake_driver, no_wait_policy):
    match = select_workspace(fake_driver, entry_config, no_wait_policy)

    assert match.option.label == "City of Exampel"
    assert fake_driver.ops("select_value") == [("select_value", "#cboDBName", "City of Exampel")]
    clicked = [c[1] for c in fake_driver.ops("click")]
    assert clicked == [
        "#toggleSysAdmin",
        "#linkDBOpen",
        "#cboDBName",
        "#togglePavementSections",
        "#linkRdNames",
    ]
    assert ("wait_visible", "#ctl00_ContentPlaceHolder1_grdEDIT_grdData") in fake_driver.calls


def test_select_workspace_exact_name_wins(entry_config, fake_driver, no_wait_policy):
    fake_driver.options["#cboDBName"] = ["City of Example Archive", "City of Example"]
    match = select_workspace(fake_driver, entry_config, no_wait_policy)
    assert match.option.label == "City of Example"
    assert match.score == 1.0


def test_select_workspace_empty_database_list(entry_config, fake_driver, no_wait_policy):
    fake_driver.options["#cboDBName"] = []
    with pytest.raises(SessionError) as e:
        select_workspace(fake_driver, entry_config, no_wait_policy)
    assert "database list is empty" in str(e.value)
    assert isinstance(e.value.__cause__, NoCandidatesError)


def test_select_workspace_menu_not_opening(entry_config, fake_driver, no_wait_policy):
    fake_driver.hidden.add("#sysadmin.menu-dropdown.collapse.show")
    with pytest.raises(SessionError) as e:
        select_workspace(fake_driver, entry_config, no_wait_policy)
    assert "did not open" in str(e.value)


def test_select_workspace_click_exhausted(entry_config, fake_driver, no_wait_policy):
    fake_driver.click_failures["#linkDBOpen"] = 10
    with pytest.raises(SessionError) as e:
        select_workspace(fake_driver, entry_config, no_wait_policy)
    assert "database selection failed" in str(e.value)
    assert isinstance(e.value.__cause__, ActionFailedError)
    assert fake_driver.clicks("#linkDBOpen") == 3


def test_select_workspace_grid_missing(entry_config, fake_driver, no_wait_policy):
    fake_driver.hidden.add("#ctl00_ContentPlaceHolder1_grdEDIT_grdData")
    with pytest.raises(SessionError) as e:
        select_workspace(fake_driver, entry_config, no_wait_policy)
    assert "road names grid" in str(e.value)
