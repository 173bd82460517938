"""Deprecated callback-style backoff.

Kept for callers of the original callback API. The work reports its outcome
through a ``done(err, *results)`` callback, and the caller's callback gets a
``retry()`` continuation plus the running retry count::

    execute = legacy_backoff({"seed": 1})

    def work(url, done):
        ...
        done(error, response)

    def callback(err, response, retry, retry_count):
        if err and retry_count < 5:
            return retry()

    execute(work, "http://example.test", callback)

New code should use ``run_to_completion`` or ``create_sequence``.
"""

from __future__ import annotations

import logging
import threading
import warnings
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from expbackoff.domain.config.backoff import BackoffConfig
from expbackoff.domain.errors import InvalidArgumentError
from expbackoff.infrastructure.delay import DelayGenerator
from expbackoff.infrastructure.timer import schedule

logger = logging.getLogger(__name__)


class LegacyBackoff:
    """Callable that runs work and hands a ``retry`` continuation to the callback.

    The retry count is shared by every call made through the same instance.
    """

    def __init__(
        self,
        options: Union[BackoffConfig, Mapping[str, Any], None] = None,
        *,
        _stacklevel: int = 2,
    ):
        warnings.warn(
            "legacy_backoff() is deprecated; use run_to_completion() or create_sequence()",
            DeprecationWarning,
            stacklevel=_stacklevel,
        )
        self.config = BackoffConfig.from_options(options)
        self.generator = DelayGenerator.from_config(self.config)
        self.retry_count = 0
        self._lock = threading.Lock()

    def __call__(self, *args: Any) -> None:
        if len(args) < 2 or not callable(args[-1]):
            raise InvalidArgumentError("must provide a callback as the last argument")
        work, *work_args, callback = args
        if not callable(work):
            raise InvalidArgumentError(f"work must be callable, got {type(work).__name__}")
        self._execute(work, work_args, callback)

    def _execute(self, work: Callable, work_args: Sequence[Any], callback: Callable) -> None:
        logger.debug(f"Executing (retry_count: {self.retry_count})")

        def done(err: Optional[BaseException] = None, *results: Any) -> None:
            with self._lock:
                self.retry_count += 1
                retry_count = self.retry_count
            if err is not None:
                logger.debug(f"Work reported error: {err!r}")

            def retry() -> threading.Timer:
                return self._schedule(work, work_args, callback)

            callback(err, *results, retry, retry_count)

        work(*work_args, done)

    def _schedule(self, work: Callable, work_args: Sequence[Any], callback: Callable) -> threading.Timer:
        delay = self.generator.next(self.retry_count)
        logger.debug(f"Scheduling retry in {delay}ms")
        return schedule(
            delay,
            lambda: self._execute(work, work_args, callback),
            non_blocking=self.config.non_blocking_timer,
        )


def legacy_backoff(options: Union[BackoffConfig, Mapping[str, Any], None] = None) -> LegacyBackoff:
    """Create a callback-style executor (deprecated)"""
    return LegacyBackoff(options, _stacklevel=3)
