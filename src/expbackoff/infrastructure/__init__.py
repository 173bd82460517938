"""Delay generation, timers and integrations"""

from expbackoff.infrastructure.delay import DelayGenerator

__all__ = ["DelayGenerator"]
