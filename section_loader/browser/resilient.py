from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from tenacity import RetryCallState, RetryError, Retrying, stop_after_attempt, wait_fixed

if TYPE_CHECKING:
    from .driver import PageDriver
    from ..models.config_models import RetryPolicy

"""Bounded retry for flaky UI actions.

A wrapped action is attempted up to ``retries`` times with a fixed pause in
between so the page can finish rendering. When every attempt fails the last
underlying exception is surfaced inside ``ActionFailedError``; nothing is
swallowed.

Attempts are not idempotent by construction: a click that raised may still
have registered. Only wrap actions that are safe to repeat.
"""

__all__ = [
    "ActionFailedError",
    "ResilientAction",
    "perform",
    "retry_click",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRIES = 3
DEFAULT_WAIT_SECONDS = 0.5


class ActionFailedError(Exception):
    """Raised when a UI action failed on every attempt."""

    def __init__(self, description: str, attempts: int, last_error: BaseException | None) -> None:
        super().__init__(f"{description} failed after {attempts} attempts: {last_error}")
        self.description = description
        self.attempts = attempts
        self.last_error = last_error


class ResilientAction:
    """Retry policy for a single UI interaction.

    ``retries_used`` holds the number of retries (attempts beyond the first)
    the most recent ``perform`` call needed.
    """

    def __init__(
        self,
        retries: int = DEFAULT_RETRIES,
        wait_between: float = DEFAULT_WAIT_SECONDS,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if retries < 1:
            raise ValueError(f"retries must be positive, got {retries}")
        if wait_between < 0:
            raise ValueError(f"wait_between must not be negative, got {wait_between}")
        self.retries = retries
        self.wait_between = wait_between
        self._sleep = sleep
        self.retries_used = 0

    @classmethod
    def from_policy(cls, policy: RetryPolicy, **kwargs: Any) -> ResilientAction:
        return cls(policy.attempts, policy.wait_ms / 1000, **kwargs)

    def perform(self, action: Callable[[], T], description: str = "action") -> T:
        attempts = 0

        def _attempt() -> T:
            nonlocal attempts
            attempts += 1
            return action()

        def _log_retry(state: RetryCallState) -> None:
            exc = state.outcome.exception() if state.outcome is not None else None
            logger.warning("retry %d for %s: %s", state.attempt_number, description, exc)

        retrying = Retrying(
            stop=stop_after_attempt(self.retries),
            wait=wait_fixed(self.wait_between),
            sleep=self._sleep,
            before_sleep=_log_retry,
            reraise=False,
        )
        try:
            result = retrying(_attempt)
        except RetryError as e:
            self.retries_used = attempts - 1
            last = e.last_attempt.exception()
            logger.error("%s failed after %d attempts: %s", description, attempts, last)
            raise ActionFailedError(description, attempts, last) from last
        self.retries_used = attempts - 1
        return result


def perform(
    action: Callable[[], T],
    retries: int = DEFAULT_RETRIES,
    wait_between: float = DEFAULT_WAIT_SECONDS,
    description: str = "action",
) -> T:
    """Run ``action`` under a one-off ``ResilientAction``."""
    return ResilientAction(retries, wait_between).perform(action, description)


def retry_click(
    driver: PageDriver,
    selector: str,
    policy: ResilientAction | None = None,
    timeout_ms: int | None = None,
) -> Any:
    """Wait for ``selector`` to be visible, then click it, under ``policy``.

    The visibility wait is bounded by ``timeout_ms`` (driver default when None)
    and a miss counts as a failed attempt.
    """
    policy = policy or ResilientAction()

    def _click() -> None:
        if not driver.wait_visible(selector, timeout_ms):
            raise TimeoutError(f"{selector} not visible")
        driver.click(selector)

    return policy.perform(_click, description=f"click {selector}")
