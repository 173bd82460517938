"""Observers for internal driver events.

Drivers report what they do (attempts, failures, scheduled waits) through an
injected observer instead of writing to a global debug channel.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)

SEEDED = "seeded"
ATTEMPT = "attempt"
SUCCESS = "success"
FAILURE = "failure"
SCHEDULED = "scheduled"
EXHAUSTED = "exhausted"
ABANDONED = "abandoned"


class BackoffObserver(ABC):
    """Abstract sink for driver events"""

    @abstractmethod
    def report(self, kind: str, payload: Dict[str, Any]) -> None:
        """Report an internal event

        Args:
            kind: Event kind (one of the module-level constants)
            payload: Event details
        """
        pass


class NullObserver(BackoffObserver):
    """Observer that discards every event"""

    def report(self, kind: str, payload: Dict[str, Any]) -> None:
        pass


class LoggingObserver(BackoffObserver):
    """Observer that writes events to the standard logging module"""

    def __init__(self, log: logging.Logger = logger, level: int = logging.DEBUG):
        self.log = log
        self.level = level

    def report(self, kind: str, payload: Dict[str, Any]) -> None:
        if not self.log.isEnabledFor(self.level):
            return
        details = ", ".join(f"{key}={value!r}" for key, value in payload.items())
        self.log.log(self.level, f"{kind}: {details}")


class RecordingObserver(BackoffObserver):
    """Observer that keeps every event in memory"""

    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def report(self, kind: str, payload: Dict[str, Any]) -> None:
        self.events.append((kind, dict(payload)))

    def kinds(self) -> List[str]:
        return [kind for kind, _ in self.events]

    def of_kind(self, kind: str) -> List[Dict[str, Any]]:
        return [payload for k, payload in self.events if k == kind]
