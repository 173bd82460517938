"""Retry drivers, factory and entry points"""

from expbackoff.application.driver import AsyncRetryDriver, BaseRetryDriver, RetryDriver
from expbackoff.application.factory import DriverFactory

__all__ = ["AsyncRetryDriver", "BaseRetryDriver", "DriverFactory", "RetryDriver"]
