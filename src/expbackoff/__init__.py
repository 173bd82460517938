"""Retry driver with randomized exponential backoff"""

from expbackoff.application.driver import AsyncRetryDriver, RetryDriver
from expbackoff.application.factory import DriverFactory
from expbackoff.application.runner import (
    arun_to_completion,
    cached,
    cached_async,
    cached_async_sequence,
    cached_sequence,
    create_async_sequence,
    create_factory,
    create_sequence,
    run_to_completion,
)
from expbackoff.domain.config import BackoffConfig
from expbackoff.domain.errors import (
    BackoffError,
    ConfigurationError,
    DriverAbandonedError,
    InvalidArgumentError,
    OperationExhausted,
)
from expbackoff.domain.events import (
    BackoffObserver,
    LoggingObserver,
    NullObserver,
    RecordingObserver,
)
from expbackoff.domain.models.state import DriverState
from expbackoff.infrastructure.delay import DelayGenerator
from expbackoff.infrastructure.legacy import legacy_backoff

__version__ = "0.1.0"

__all__ = [
    "AsyncRetryDriver",
    "BackoffConfig",
    "BackoffError",
    "BackoffObserver",
    "ConfigurationError",
    "DelayGenerator",
    "DriverAbandonedError",
    "DriverFactory",
    "DriverState",
    "InvalidArgumentError",
    "LoggingObserver",
    "NullObserver",
    "OperationExhausted",
    "RecordingObserver",
    "RetryDriver",
    "arun_to_completion",
    "cached",
    "cached_async",
    "cached_async_sequence",
    "cached_sequence",
    "create_async_sequence",
    "create_factory",
    "create_sequence",
    "legacy_backoff",
    "run_to_completion",
]
