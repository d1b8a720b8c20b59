from __future__ import annotations

import logging

from ..browser.driver import PageDriver
from ..browser.resilient import ResilientAction, retry_click
from ..browser.session import SessionError
from ..matching.best_match import MatchResult, NoCandidatesError, select_best
from ..models.config_models import EntryConfig

"""Login and database (workspace) selection.

Both steps are run-level: any failure here is raised as ``SessionError`` and
aborts the run, because no row can be entered without a logged-in session on
the right database.

The database is picked from the live ``#cboDBName`` list by edit-distance
similarity to ``target_database_name``, so small spelling differences between
the config and the server's names still resolve.
"""

__all__ = [
    "SessionError",
    "login",
    "select_workspace",
]

logger = logging.getLogger(__name__)


def login(driver: PageDriver, config: EntryConfig) -> None:
    """Open the login page, submit the credentials and wait for the app menu.

    Raises:
        SessionError: On navigation failure, timeout or rejected credentials
    """
    sel = config.selectors
    try:
        logger.info("Navigating to the login page...")
        driver.goto(config.urls.login)

        logger.info("Entering username and password...")
        driver.fill(sel.email, config.username)
        driver.fill(sel.password, config.password)

        logger.info("Clicking the login button...")
        driver.click(sel.login_button)
        driver.wait_for_load()

        logger.info("Waiting %d ms for rendering...", config.timeouts.post_login_settle_ms)
        driver.pause(config.timeouts.post_login_settle_ms)
    except Exception as e:
        raise SessionError(f"login failed: {e}") from e

    if not driver.wait_visible(sel.sysadmin_toggle):
        raise SessionError("login failed: application menu did not appear (check credentials)")
    logger.info("Logged in as %s", config.username)


def _expand_menu(driver: PageDriver, toggle: str, menu: str, policy: ResilientAction) -> None:
    retry_click(driver, toggle, policy)
    if not driver.wait_visible(menu):
        raise SessionError(f"menu {menu} did not open")


def select_workspace(
    driver: PageDriver,
    config: EntryConfig,
    policy: ResilientAction | None = None,
) -> MatchResult:
    """Open the closest-matching database and land on the Road Names grid.

    Returns:
        The selected database option and its similarity score

    Raises:
        SessionError: If a menu does not open, a click exhausts its retries or
            the database list is empty
    """
    sel = config.selectors
    policy = policy or ResilientAction.from_policy(config.retry)
    try:
        logger.info('Expanding "Systems Admin" menu...')
        _expand_menu(driver, sel.sysadmin_toggle, sel.sysadmin_menu, policy)

        logger.info('Clicking on "Open Database"...')
        retry_click(driver, sel.open_database, policy)
        driver.pause(config.timeouts.menu_settle_ms)

        logger.info("Clicking on Database Dropdown...")
        retry_click(driver, sel.database_dropdown, policy)

        options = driver.read_options(sel.database_dropdown)
        logger.debug("database options: %s", [o.label for o in options])
        match = select_best(config.target_database_name, options)
        logger.info(
            "Selecting closest database match: %s (score=%.2f)", match.option.label, match.score
        )
        driver.select_value(sel.database_dropdown, match.value)

        logger.info('Expanding "Pavement Sections" menu...')
        _expand_menu(driver, sel.sections_toggle, sel.sections_menu, policy)

        logger.info('Clicking on "Road Names"...')
        retry_click(driver, sel.road_names, policy)
        if not driver.wait_visible(sel.road_names_grid):
            raise SessionError("road names grid did not appear after database selection")
    except SessionError:
        raise
    except NoCandidatesError as e:
        raise SessionError(f"database list is empty: {e}") from e
    except Exception as e:
        raise SessionError(f"database selection failed: {e}") from e

    return match
