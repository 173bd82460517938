"""Convenience entry points built on top of DriverFactory.

The plain variants build a fresh factory (and seed a fresh random engine) per
call. The ``cached*`` variants build one factory up front and reuse it for
every call, which is noticeably cheaper in tight loops.
"""

from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from expbackoff.application.driver import AsyncRetryDriver, RetryDriver
from expbackoff.application.factory import DriverFactory
from expbackoff.domain.config.backoff import BackoffConfig
from expbackoff.domain.events import BackoffObserver

Options = Union[BackoffConfig, Mapping[str, Any], None]


def create_factory(options: Options = None, observer: Optional[BackoffObserver] = None) -> DriverFactory:
    """Expose the factory directly so setup can be shared across invocations"""
    return DriverFactory(options, observer=observer)


def create_sequence(
    work: Callable[[int], Any],
    options: Options = None,
    observer: Optional[BackoffObserver] = None,
) -> RetryDriver:
    """Return a driver for manual (possibly partial) iteration"""
    return DriverFactory(options, observer=observer).bind(work)


def create_async_sequence(
    work: Callable[[int], Any],
    options: Options = None,
    observer: Optional[BackoffObserver] = None,
) -> AsyncRetryDriver:
    """Return an async driver for manual (possibly partial) iteration"""
    return DriverFactory(options, observer=observer).bind_async(work)


def run_to_completion(
    work: Callable[[int], Any],
    options: Options = None,
    observer: Optional[BackoffObserver] = None,
) -> Any:
    """Run work until it succeeds or attempts run out

    Returns:
        The work's result, or None if attempts ran out and
        throw_on_exhaustion is disabled

    Raises:
        OperationExhausted: If all attempts failed and throw_on_exhaustion is set
        InvalidArgumentError: If work is not callable
    """
    return create_sequence(work, options, observer).run()


async def arun_to_completion(
    work: Callable[[int], Any],
    options: Options = None,
    observer: Optional[BackoffObserver] = None,
) -> Any:
    """Async counterpart of ``run_to_completion``"""
    return await create_async_sequence(work, options, observer).run()


def cached(options: Options = None, observer: Optional[BackoffObserver] = None) -> Callable[[Callable[[int], Any]], Any]:
    """Return a ``run_to_completion`` bound to one reusable factory"""
    factory = DriverFactory(options, observer=observer)

    def run(work: Callable[[int], Any]) -> Any:
        return factory.bind(work).run()

    run.factory = factory
    return run


def cached_async(
    options: Options = None, observer: Optional[BackoffObserver] = None
) -> Callable[[Callable[[int], Any]], Awaitable[Any]]:
    """Return an ``arun_to_completion`` bound to one reusable factory"""
    factory = DriverFactory(options, observer=observer)

    async def run(work: Callable[[int], Any]) -> Any:
        return await factory.bind_async(work).run()

    run.factory = factory
    return run


def cached_sequence(
    options: Options = None, observer: Optional[BackoffObserver] = None
) -> Callable[[Callable[[int], Any]], RetryDriver]:
    """Return a ``create_sequence`` bound to one reusable factory"""
    factory = DriverFactory(options, observer=observer)

    def sequence(work: Callable[[int], Any]) -> RetryDriver:
        return factory.bind(work)

    sequence.factory = factory
    return sequence


def cached_async_sequence(
    options: Options = None, observer: Optional[BackoffObserver] = None
) -> Callable[[Callable[[int], Any]], AsyncRetryDriver]:
    """Return a ``create_async_sequence`` bound to one reusable factory"""
    factory = DriverFactory(options, observer=observer)

    def sequence(work: Callable[[int], Any]) -> AsyncRetryDriver:
        return factory.bind_async(work)

    sequence.factory = factory
    return sequence
