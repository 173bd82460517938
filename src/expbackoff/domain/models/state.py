"""Retry driver state machine."""

from enum import Enum


class DriverState(str, Enum):
    """Lifecycle of a retry driver.

    READY -> RUNNING -> SUCCEEDED
                     -> RETRYING -> READY
                     -> EXHAUSTED
    """

    READY = "ready"
    RUNNING = "running"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"

    @property
    def is_terminal(self) -> bool:
        return self in (DriverState.SUCCEEDED, DriverState.EXHAUSTED)
