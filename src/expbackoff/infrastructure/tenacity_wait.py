"""Tenacity integration.

Lets code already decorated with tenacity use the same jittered schedule as
the retry drivers::

    generator = DelayGenerator(delay_interval=100, seed=7)

    @retry(stop=stop_after_attempt(5), wait=wait_jittered_backoff(generator))
    def fetch():
        ...
"""

from __future__ import annotations

from typing import Optional

from tenacity import RetryCallState
from tenacity.wait import wait_base

from expbackoff.domain.config.backoff import BackoffConfig
from expbackoff.infrastructure.delay import DelayGenerator


class wait_jittered_backoff(wait_base):
    """Wait strategy that draws delays from a DelayGenerator.

    Tenacity numbers attempts from 1; the generator is asked for the delay of
    the 0-based attempt that just failed. Returned values are in seconds.
    """

    def __init__(self, generator: Optional[DelayGenerator] = None):
        self.generator = generator or DelayGenerator()

    @classmethod
    def from_config(cls, config: BackoffConfig) -> wait_jittered_backoff:
        return cls(DelayGenerator.from_config(config))

    def __call__(self, retry_state: RetryCallState) -> float:
        attempt = max(retry_state.attempt_number - 1, 0)
        return self.generator.next(attempt) / 1000.0
