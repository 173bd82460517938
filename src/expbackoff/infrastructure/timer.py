"""Cancellable waits used between attempts."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def _timeout(delay_ms: int) -> float:
    """Delay in seconds, capped to what the threading primitives accept"""
    return min(delay_ms / 1000.0, threading.TIMEOUT_MAX)


class Sleeper:
    """Blocking wait that another thread can interrupt"""

    def __init__(self):
        self._interrupted = threading.Event()

    @property
    def interrupted(self) -> bool:
        return self._interrupted.is_set()

    def wait(self, delay_ms: int) -> bool:
        """Block for ``delay_ms`` milliseconds.

        Returns:
            True if the full delay elapsed, False if interrupted
        """
        return not self._interrupted.wait(_timeout(delay_ms))

    def interrupt(self) -> None:
        self._interrupted.set()


def _wake(waiter: asyncio.Future, value: bool) -> None:
    if not waiter.done():
        waiter.set_result(value)


class AsyncSleeper:
    """Asyncio wait backed by an explicit ``call_later`` handle.

    The handle is always cancelled when the wait ends, whether it elapsed,
    was interrupted, or the awaiting task was cancelled.
    """

    def __init__(self):
        self._handle: Optional[asyncio.TimerHandle] = None
        self._waiter: Optional[asyncio.Future] = None
        self._interrupted = False

    @property
    def interrupted(self) -> bool:
        return self._interrupted

    @property
    def pending(self) -> bool:
        return self._handle is not None

    async def wait(self, delay_ms: int) -> bool:
        """Suspend for ``delay_ms`` milliseconds.

        Returns:
            True if the full delay elapsed, False if interrupted
        """
        if self._interrupted:
            return False
        loop = asyncio.get_running_loop()
        self._waiter = loop.create_future()
        self._handle = loop.call_later(delay_ms / 1000.0, _wake, self._waiter, True)
        try:
            return await self._waiter
        finally:
            self._handle.cancel()
            self._handle = None
            self._waiter = None

    def interrupt(self) -> None:
        """Wake a pending wait early. Must be called on the loop's thread."""
        self._interrupted = True
        if self._waiter is not None:
            _wake(self._waiter, False)


def schedule(delay_ms: int, callback: Callable[[], None], non_blocking: bool = False) -> threading.Timer:
    """Run ``callback`` on a background timer thread after ``delay_ms``.

    Args:
        delay_ms: Delay in milliseconds
        callback: Function to call once the delay elapses
        non_blocking: Make the timer a daemon so it doesn't keep the process alive

    Returns:
        The started timer (call ``cancel()`` to discard it)
    """
    timer = threading.Timer(_timeout(delay_ms), callback)
    timer.daemon = non_blocking
    timer.start()
    logger.debug(f"Scheduled timer in {delay_ms}ms (daemon={non_blocking})")
    return timer
