"""Retry drivers: resumable, abortable sequences of attempts.

A driver wraps one unit of work. Every ``advance()`` runs the work once with
the current attempt number; a failure either schedules a jittered wait and
prepares the next attempt, or ends the sequence when the attempt budget is
spent. Drivers keep their state between calls, so a caller may stop
iterating early and pick up again later without skipping or repeating an
attempt.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from expbackoff.domain import events
from expbackoff.domain.config.backoff import BackoffConfig
from expbackoff.domain.errors import (
    DriverAbandonedError,
    InvalidArgumentError,
    OperationExhausted,
)
from expbackoff.domain.events import BackoffObserver, LoggingObserver
from expbackoff.domain.models.state import DriverState
from expbackoff.infrastructure.delay import DelayGenerator
from expbackoff.infrastructure.timer import AsyncSleeper, Sleeper

logger = logging.getLogger(__name__)


class BaseRetryDriver:
    """State and retry decisions shared by the sync and async drivers"""

    def __init__(
        self,
        work: Callable[[int], Any],
        config: Optional[BackoffConfig] = None,
        generator: Optional[DelayGenerator] = None,
        observer: Optional[BackoffObserver] = None,
    ):
        """Initialize driver

        Args:
            work: Callable invoked with the attempt number as its only argument
            config: Backoff configuration (defaults if None)
            generator: Shared delay generator (a private one is built if None)
            observer: Event sink (logs at DEBUG if None)

        Raises:
            InvalidArgumentError: If work is not callable
        """
        if not callable(work):
            raise InvalidArgumentError(f"work must be callable, got {type(work).__name__}")
        self.config = config or BackoffConfig()
        self.generator = generator or DelayGenerator.from_config(self.config)
        self.observer = observer or LoggingObserver()
        self._work = work
        self._attempt_number = 0
        self._last_error: Optional[Exception] = None
        self._result: Any = None
        self._state = DriverState.READY
        self._abandoned = False
        self.last_delay: Optional[int] = None

    @property
    def attempt_number(self) -> int:
        return self._attempt_number

    @property
    def value(self) -> int:
        """Current attempt number"""
        return self._attempt_number

    @property
    def last_error(self) -> Optional[Exception]:
        return self._last_error

    @property
    def result(self) -> Any:
        return self._result

    @property
    def state(self) -> DriverState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state.is_terminal

    @property
    def succeeded(self) -> bool:
        return self._state is DriverState.SUCCEEDED

    @property
    def abandoned(self) -> bool:
        return self._abandoned

    def _begin_attempt(self) -> int:
        if self._abandoned:
            raise DriverAbandonedError(
                f"Driver was abandoned at attempt {self._attempt_number}"
            )
        self._state = DriverState.RUNNING
        self.observer.report(events.ATTEMPT, {"attempt": self._attempt_number})
        return self._attempt_number

    def _succeed(self, result: Any) -> DriverState:
        self._result = result
        self._state = DriverState.SUCCEEDED
        self.observer.report(events.SUCCESS, {"attempt": self._attempt_number})
        return self._state

    def _fail(self, error: Exception) -> Optional[int]:
        """Record a failed attempt and decide what happens next

        Returns:
            Delay in milliseconds before the next attempt, or None if exhausted

        Raises:
            OperationExhausted: If exhausted and throw_on_exhaustion is set
        """
        attempt = self._attempt_number
        self._last_error = error
        self.observer.report(events.FAILURE, {"attempt": attempt, "error": error})

        if attempt >= self.config.max_attempts - 1:
            self._state = DriverState.EXHAUSTED
            self.observer.report(events.EXHAUSTED, {"attempts": attempt + 1, "error": error})
            if self.config.throw_on_exhaustion:
                raise OperationExhausted(error, attempts=attempt + 1) from error
            return None

        # Delay grows with the number of failures already observed
        delay = self.generator.next(attempt)
        self._attempt_number = attempt + 1
        self.last_delay = delay
        self._state = DriverState.RETRYING
        self.observer.report(events.SCHEDULED, {"attempt": self._attempt_number, "delay_ms": delay})
        return delay

    def _resume(self) -> DriverState:
        self._state = DriverState.READY
        return self._state

    def _settle(self) -> None:
        """Leave a consistent state after a step is interrupted mid-way"""
        if self._state in (DriverState.RUNNING, DriverState.RETRYING):
            self._state = DriverState.READY

    def _mark_abandoned(self) -> None:
        if not self._abandoned:
            self._abandoned = True
            self.observer.report(events.ABANDONED, {"attempt": self._attempt_number})

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(state={self._state.value}, "
            f"attempt_number={self._attempt_number}, last_error={self._last_error!r})"
        )


class RetryDriver(BaseRetryDriver):
    """Driver for plain callables; waits block the calling thread"""

    def __init__(self, work: Callable[[int], Any], *args, **kwargs):
        super().__init__(work, *args, **kwargs)
        self._sleeper = Sleeper()

    def advance(self) -> DriverState:
        """Run one attempt and, on a retryable failure, wait out the delay

        Returns:
            The driver state after the step. Advancing a finished driver is a
            no-op that returns its terminal state.

        Raises:
            OperationExhausted: On the last failed attempt if configured to raise
            DriverAbandonedError: If the driver was abandoned
        """
        if self.done:
            return self._state
        attempt = self._begin_attempt()
        try:
            return self._step(attempt)
        except BaseException:
            self._settle()
            raise

    def _step(self, attempt: int) -> DriverState:
        try:
            result = self._work(attempt)
        except Exception as exc:
            delay = self._fail(exc)
        else:
            if inspect.isawaitable(result):
                if inspect.iscoroutine(result):
                    result.close()
                raise InvalidArgumentError(
                    "work returned an awaitable; use an AsyncRetryDriver for async work"
                )
            return self._succeed(result)

        if delay is None:
            return self._state
        self._sleeper.wait(delay)
        return self._resume()

    def run(self) -> Any:
        """Advance until the driver finishes and return its result"""
        while not self.done:
            self.advance()
        return self._result

    def abandon(self) -> None:
        """Stop the driver; interrupts a wait in progress on another thread"""
        self._mark_abandoned()
        self._sleeper.interrupt()

    def __iter__(self) -> RetryDriver:
        return self

    def __next__(self) -> int:
        if self.done or self._abandoned:
            raise StopIteration
        attempt = self._attempt_number
        self.advance()
        return attempt


class AsyncRetryDriver(BaseRetryDriver):
    """Driver for coroutine functions and callables returning awaitables"""

    def __init__(self, work: Callable[[int], Union[Awaitable[Any], Any]], *args, **kwargs):
        super().__init__(work, *args, **kwargs)
        self._sleeper = AsyncSleeper()

    async def advance(self) -> DriverState:
        """Async counterpart of ``RetryDriver.advance``"""
        if self.done:
            return self._state
        attempt = self._begin_attempt()
        try:
            return await self._step(attempt)
        except BaseException:
            self._settle()
            raise

    async def _step(self, attempt: int) -> DriverState:
        try:
            result = self._work(attempt)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            delay = self._fail(exc)
        else:
            return self._succeed(result)

        if delay is None:
            return self._state
        await self._sleeper.wait(delay)
        return self._resume()

    async def run(self) -> Any:
        """Advance until the driver finishes and return its result"""
        while not self.done:
            await self.advance()
        return self._result

    def abandon(self) -> None:
        """Stop the driver and wake a pending wait. Call from the loop's thread."""
        self._mark_abandoned()
        self._sleeper.interrupt()

    def __aiter__(self) -> AsyncRetryDriver:
        return self

    async def __anext__(self) -> int:
        if self.done or self._abandoned:
            raise StopAsyncIteration
        attempt = self._attempt_number
        await self.advance()
        return attempt
