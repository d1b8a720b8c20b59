from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from ..models.config_models import EntryConfig
from .driver import PageDriver

"""Browser session lifecycle.

One Chromium instance and one page per run. The page is the single shared UI
resource: it is handed out as a ``PageDriver`` and closed when the run ends,
whether it ended normally or not.
"""

__all__ = [
    "SessionError",
    "open_session",
]

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Fatal to the whole run: no browser, no login or no workspace."""


@contextmanager
def open_session(config: EntryConfig) -> Iterator[PageDriver]:
    """Launch Chromium and yield a driver for a fresh page.

    Raises:
        SessionError: If Playwright cannot start or launch the browser
    """
    logger.info("Launching browser (headless=%s)...", config.headless)
    try:
        pw = sync_playwright().start()
    except PlaywrightError as e:
        raise SessionError(f"playwright failed to start: {e}") from e

    browser = None
    try:
        try:
            browser = pw.chromium.launch(headless=config.headless)
            context = browser.new_context(no_viewport=True)
            page = context.new_page()
        except PlaywrightError as e:
            raise SessionError(f"browser launch failed: {e}") from e
        yield PageDriver(page, config.timeouts)
    finally:
        if browser is not None:
            try:
                browser.close()
            except PlaywrightError as e:  # pragma: no cover
                logger.warning("browser close failed: %s", e)
        pw.stop()
        logger.info("Browser closed")
