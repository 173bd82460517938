"""Error types raised by the backoff driver."""

from typing import Optional


class BackoffError(Exception):
    """Base class for all expbackoff errors."""

    pass


class InvalidArgumentError(BackoffError, TypeError):
    """Raised synchronously when a caller passes something unusable.

    Typical causes are non-callable work, a negative attempt index, or a
    missing callback for the legacy callback variant. Never retried.
    """

    pass


class ConfigurationError(BackoffError, ValueError):
    """Configuration validation error."""

    pass


class DriverAbandonedError(BackoffError):
    """Raised when an abandoned driver is advanced again."""

    pass


class OperationExhausted(BackoffError):
    """All attempts failed and the driver was told to raise on exhaustion.

    Attributes:
        last_error: The failure reported by the final attempt
        attempts: Number of attempts that were made
    """

    def __init__(self, last_error: Optional[BaseException], attempts: int):
        # args must match __init__ for the exception to pickle
        super().__init__(last_error, attempts)
        self.last_error = last_error
        self.attempts = attempts

    def __str__(self) -> str:
        return f"Operation failed after {self.attempts} attempts: {self.last_error}"
