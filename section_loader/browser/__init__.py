"""Browser session, page operations and retry policy."""

from .resilient import ActionFailedError, ResilientAction, perform, retry_click

__all__ = [
    "ActionFailedError",
    "ResilientAction",
    "perform",
    "retry_click",
]
