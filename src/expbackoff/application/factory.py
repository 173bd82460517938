"""Factory that binds units of work to retry drivers"""

import inspect
import logging
from typing import Any, Callable, Mapping, Optional, Union

from expbackoff.application.driver import AsyncRetryDriver, RetryDriver
from expbackoff.domain import events
from expbackoff.domain.config.backoff import BackoffConfig
from expbackoff.domain.errors import InvalidArgumentError
from expbackoff.domain.events import BackoffObserver, LoggingObserver
from expbackoff.infrastructure.delay import DelayGenerator

logger = logging.getLogger(__name__)


class DriverFactory:
    """Builds drivers that share a single delay generator.

    The generator (and its random engine) is seeded once, when the factory is
    created. Every driver produced afterwards draws from that same engine, so
    reusing one factory across many invocations skips the seeding cost and
    keeps the draw sequence advancing consistently.
    """

    def __init__(
        self,
        options: Union[BackoffConfig, Mapping[str, Any], None] = None,
        observer: Optional[BackoffObserver] = None,
    ):
        """Initialize factory

        Args:
            options: BackoffConfig, mapping of options, or None for defaults
            observer: Event sink shared by all drivers (logs at DEBUG if None)

        Raises:
            ConfigurationError: If options are invalid
        """
        self.config = BackoffConfig.from_options(options)
        self.observer = observer or LoggingObserver()
        self.generator = DelayGenerator.from_config(self.config)
        self.observer.report(events.SEEDED, {"seed": self.config.seed})
        logger.debug(
            f"Created driver factory (max_attempts={self.config.max_attempts}, "
            f"delay_interval={self.config.delay_interval}ms, base={self.config.base})"
        )

    @staticmethod
    def _check_callable(work: Any) -> None:
        if not callable(work):
            raise InvalidArgumentError(f"work must be callable, got {type(work).__name__}")

    def bind(self, work: Callable[[int], Any]) -> RetryDriver:
        """Create a driver for a plain callable

        Raises:
            InvalidArgumentError: If work is not callable or is a coroutine function
        """
        self._check_callable(work)
        if inspect.iscoroutinefunction(work):
            raise InvalidArgumentError("work is a coroutine function; use bind_async()")
        return RetryDriver(work, self.config, self.generator, self.observer)

    def bind_async(self, work: Callable[[int], Any]) -> AsyncRetryDriver:
        """Create a driver for a coroutine function or awaitable-returning callable

        Raises:
            InvalidArgumentError: If work is not callable
        """
        self._check_callable(work)
        return AsyncRetryDriver(work, self.config, self.generator, self.observer)

    def __call__(self, work: Callable[[int], Any]) -> RetryDriver:
        return self.bind(work)
