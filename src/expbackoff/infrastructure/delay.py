"""Randomized exponential delay generator."""

from __future__ import annotations

import logging
import random
import threading
from typing import Optional

from expbackoff.domain.config.backoff import BackoffConfig
from expbackoff.domain.errors import ConfigurationError, InvalidArgumentError

logger = logging.getLogger(__name__)


def _require_int(name: str, value: int, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an int, got {type(value).__name__}")
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")


class DelayGenerator:
    """Produces jittered delays bounded by an exponential schedule.

    For attempt ``n`` the delay is a uniform number of slots in
    ``[0, base ** min(n, max_exponent) - 1]`` multiplied by ``delay_interval``.
    The draw is ``randint(0, base ** exponent) - 1``; the ``-1`` slot it can
    produce is clamped to zero, so the minimum delay is an immediate retry.

    The random engine is a Mersenne Twister (``random.Random``). With a fixed
    seed the sequence of delays is reproducible for the same sequence of
    ``next`` calls. Draws are serialized so one generator can be shared by
    drivers running on different threads.
    """

    def __init__(
        self,
        delay_interval: int = 100,
        base: int = 2,
        max_exponent: int = 10,
        seed: Optional[int] = None,
    ):
        """Initialize generator

        Raises:
            ConfigurationError: If delay_interval < 1, base < 2 or max_exponent < 0
        """
        _require_int("delay_interval", delay_interval, minimum=1)
        _require_int("base", base, minimum=2)
        _require_int("max_exponent", max_exponent, minimum=0)
        self.delay_interval = delay_interval
        self.base = base
        self.max_exponent = max_exponent
        self.seed = seed
        self._lock = threading.Lock()
        if seed is None:
            logger.debug("Seeding random engine from OS entropy")
            self._random = random.Random()
        else:
            logger.debug(f"Seeding random engine with {seed}")
            self._random = random.Random(seed)

    @classmethod
    def from_config(cls, config: BackoffConfig) -> DelayGenerator:
        return cls(
            delay_interval=config.delay_interval,
            base=config.base,
            max_exponent=config.max_exponent,
            seed=config.seed,
        )

    def _exponent(self, attempt_number: int) -> int:
        if isinstance(attempt_number, bool) or not isinstance(attempt_number, int):
            raise InvalidArgumentError(
                f"attempt_number must be an int, got {type(attempt_number).__name__}"
            )
        if attempt_number < 0:
            raise InvalidArgumentError(f"attempt_number must be non-negative, got {attempt_number}")
        return min(attempt_number, self.max_exponent)

    def next(self, attempt_number: int) -> int:
        """Draw the delay to wait after a failed attempt

        Args:
            attempt_number: 0-based index of the attempt that just failed

        Returns:
            Delay in milliseconds (never negative)

        Raises:
            InvalidArgumentError: If attempt_number is not a non-negative int
        """
        ceiling = self.base ** self._exponent(attempt_number)
        with self._lock:
            slots = self._random.randint(0, ceiling) - 1
        return max(slots, 0) * self.delay_interval

    def upper_bound(self, attempt_number: int) -> int:
        """Largest delay ``next`` can return for this attempt, in milliseconds"""
        return (self.base ** self._exponent(attempt_number) - 1) * self.delay_interval
