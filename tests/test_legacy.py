"""Tests for the deprecated callback-style backoff"""

import threading

import pytest

from expbackoff.domain.errors import InvalidArgumentError
from expbackoff.infrastructure.legacy import LegacyBackoff, legacy_backoff
from expbackoff.infrastructure.timer import schedule

pytestmark = pytest.mark.filterwarnings("ignore::DeprecationWarning")


@pytest.fixture
def backoff():
    # Seeded so every test draws the same delays
    return legacy_backoff({"seed": 1, "delay_interval": 1})


def test_warns_deprecated():
    with pytest.warns(DeprecationWarning, match="deprecated"):
        legacy_backoff()


@pytest.mark.parametrize("construct", [legacy_backoff, LegacyBackoff])
def test_warning_points_at_caller(construct):
    """Test the deprecation is attributed to the calling line, not library internals"""
    with pytest.warns(DeprecationWarning) as record:
        construct({"seed": 1})

    assert len(record) == 1
    assert record[0].filename == __file__


def test_huge_delay_timer_is_capped():
    timer = schedule(10**18, lambda: None, non_blocking=True)
    try:
        assert timer.interval == threading.TIMEOUT_MAX
    finally:
        timer.cancel()


def test_requires_callback(backoff):
    with pytest.raises(InvalidArgumentError, match="must provide a callback as the last argument"):
        backoff()
    with pytest.raises(InvalidArgumentError, match="must provide a callback"):
        backoff(lambda done: done(), "not a callback")


def test_requires_callable_work(backoff):
    with pytest.raises(InvalidArgumentError, match="work must be callable"):
        backoff("work", lambda *args: None)


def test_executes_synchronously(backoff):
    executed = []

    def work(done):
        executed.append(True)
        done()

    backoff(work, lambda *args: None)

    assert executed == [True]


def test_passes_arguments_to_work(backoff):
    received = []

    def work(a1, a2, done):
        received.append((a1, a2))
        done()

    backoff(work, "a1", "a2", lambda *args: None)

    assert received == [("a1", "a2")]


def test_reports_results_and_retry_count(backoff):
    outcome = {}

    def work(done):
        done(None, "a", "b")

    def callback(err, p1, p2, retry, retry_count):
        outcome.update(err=err, results=(p1, p2), retry=retry, retry_count=retry_count)

    backoff(work, callback)

    assert outcome["err"] is None
    assert outcome["results"] == ("a", "b")
    assert callable(outcome["retry"])
    assert outcome["retry_count"] == 1


def test_retries_on_error(backoff):
    """Test retry() re-runs the work until the caller stops"""
    error = RuntimeError("boom")
    finished = threading.Event()
    seen = []
    max_retries = 3

    def work(done):
        done(error)

    def callback(err, retry, retry_count):
        seen.append((err, retry_count))
        if err and retry_count < max_retries:
            retry()
            return
        finished.set()

    backoff(work, callback)

    assert finished.wait(timeout=5)
    assert seen == [(error, 1), (error, 2), (error, 3)]
    assert backoff.retry_count == 3


def test_retry_passes_arguments_again(backoff):
    finished = threading.Event()
    received = []

    def work(value, done):
        received.append(value)
        done(None if len(received) > 1 else ValueError("first"))

    def callback(err, retry, retry_count):
        if err:
            retry()
            return
        finished.set()

    backoff(work, "x", callback)

    assert finished.wait(timeout=5)
    assert received == ["x", "x"]


def test_non_blocking_timer_is_daemon():
    backoff = LegacyBackoff({"seed": 1, "non_blocking_timer": True, "delay_interval": 1})
    timers = []

    def callback(err, retry, retry_count):
        if err and retry_count == 1:
            timers.append(retry())

    backoff(lambda done: done(RuntimeError("boom")), callback)

    assert timers[0].daemon is True
    timers[0].cancel()


def test_blocking_timer_by_default(backoff):
    timers = []

    def callback(err, retry, retry_count):
        if err and retry_count == 1:
            timers.append(retry())

    backoff(lambda done: done(RuntimeError("boom")), callback)

    assert timers[0].daemon is False
    timers[0].cancel()
