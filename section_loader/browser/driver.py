from __future__ import annotations

import logging
from typing import Any

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeout

from ..matching.best_match import DropdownOption
from ..models.config_models import Timeouts

"""Thin page operations over a Playwright ``Page``.

Every wait is bounded: an explicit ``timeout_ms`` wins, otherwise the element
or navigation timeout from config applies. ``wait_visible`` reports a timeout
as ``False`` so callers decide whether a missing element is fatal.
"""

__all__ = [
    "PageDriver",
]

logger = logging.getLogger(__name__)

_READ_OPTIONS_JS = """el => Array.from(el.options).map(o => ({
    value: o.value,
    label: (o.text || '').trim()
}))"""


class PageDriver:
    def __init__(self, page: Any, timeouts: Timeouts) -> None:
        self.page = page
        self.timeouts = timeouts

    def _element_timeout(self, timeout_ms: int | None) -> int:
        return self.timeouts.element_ms if timeout_ms is None else timeout_ms

    def goto(self, url: str, timeout_ms: int | None = None) -> None:
        timeout = self.timeouts.navigation_ms if timeout_ms is None else timeout_ms
        logger.debug("goto %s", url)
        self.page.goto(url, wait_until="domcontentloaded", timeout=timeout)

    def wait_for_load(self, timeout_ms: int | None = None) -> None:
        timeout = self.timeouts.navigation_ms if timeout_ms is None else timeout_ms
        self.page.wait_for_load_state("load", timeout=timeout)

    def fill(self, selector: str, value: str, timeout_ms: int | None = None) -> None:
        self.page.locator(selector).first.fill(value, timeout=self._element_timeout(timeout_ms))

    def click(self, selector: str, timeout_ms: int | None = None) -> None:
        self.page.locator(selector).first.click(timeout=self._element_timeout(timeout_ms))

    def wait_visible(self, selector: str, timeout_ms: int | None = None) -> bool:
        try:
            self.page.wait_for_selector(
                selector, state="visible", timeout=self._element_timeout(timeout_ms)
            )
        except PlaywrightTimeout:
            return False
        return True

    def read_options(self, selector: str, timeout_ms: int | None = None) -> list[DropdownOption]:
        """Read the current ``<option>`` list of a select control."""
        raw = self.page.locator(selector).first.evaluate(
            _READ_OPTIONS_JS, timeout=self._element_timeout(timeout_ms)
        )
        options = [DropdownOption(value=str(o["value"]), label=str(o["label"])) for o in raw or []]
        logger.debug("options %s: %s", selector, [o.label for o in options])
        return options

    def select_value(self, selector: str, value: str, timeout_ms: int | None = None) -> None:
        # select_option fires input and change events like a user selection
        self.page.select_option(selector, value=value, timeout=self._element_timeout(timeout_ms))

    def text_of(self, selector: str, timeout_ms: int | None = None) -> str:
        try:
            return self.page.locator(selector).first.inner_text(
                timeout=self._element_timeout(timeout_ms)
            ).strip()
        except PlaywrightError as e:
            logger.debug("no text for %s: %s", selector, e)
            return ""

    def pause(self, ms: int) -> None:
        if ms > 0:
            self.page.wait_for_timeout(ms)
