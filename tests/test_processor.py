"""Tests for _processor module."""

import logging
import threading
import time

import pytest

from hoglin._processor import AutoFlushLoop
from hoglin._queue import EventQueue
from hoglin._types import SUCCESS, AnalyticsEvent, FlushResult


def _make_event(event_type: str = "test") -> AnalyticsEvent:
    return AnalyticsEvent(timestamp="2024-01-01T00:00:00.000Z", event_type=event_type)


class _CountingFlush:
    def __init__(self, queue: EventQueue) -> None:
        self._queue = queue
        self.calls = 0
        self.drained: list[AnalyticsEvent] = []
        self._lock = threading.Lock()

    def __call__(self) -> FlushResult:
        with self._lock:
            self.calls += 1
            self.drained.extend(self._queue.drain(100))
        return SUCCESS


def test_start_and_stop() -> None:
    q = EventQueue()
    loop = AutoFlushLoop(q, _CountingFlush(q), flush_interval_ms=50)
    loop.start()
    assert loop.is_running
    loop.stop()
    assert not loop.is_running


def test_flush_called_when_events_queued() -> None:
    q = EventQueue()
    flush = _CountingFlush(q)
    loop = AutoFlushLoop(q, flush, flush_interval_ms=50)

    q.enqueue(_make_event("a"))
    q.enqueue(_make_event("b"))

    loop.start()
    time.sleep(0.2)
    loop.stop()

    assert [e.event_type for e in flush.drained] == ["a", "b"]


def test_flush_skipped_when_queue_empty() -> None:
    q = EventQueue()
    flush = _CountingFlush(q)
    loop = AutoFlushLoop(q, flush, flush_interval_ms=20)
    loop.start()
    time.sleep(0.15)
    loop.stop()
    assert flush.calls == 0


def test_first_flush_within_interval() -> None:
    q = EventQueue()
    flush = _CountingFlush(q)
    loop = AutoFlushLoop(q, flush, flush_interval_ms=100)
    q.enqueue(_make_event())

    loop.start()
    deadline = time.monotonic() + 1.0
    while flush.calls == 0 and time.monotonic() < deadline:
        time.sleep(0.01)
    loop.stop()

    assert flush.calls >= 1


def test_stop_interrupts_sleep() -> None:
    q = EventQueue()
    flush = _CountingFlush(q)
    loop = AutoFlushLoop(q, flush, flush_interval_ms=60_000)  # Long interval
    loop.start()
    q.enqueue(_make_event())

    start = time.monotonic()
    loop.stop()
    assert time.monotonic() - start < 1.0
    assert flush.calls == 0


def test_flush_exception_does_not_crash() -> None:
    q = EventQueue()
    calls: list[int] = []

    def bad_flush() -> FlushResult:
        calls.append(1)
        raise RuntimeError("flush exploded")

    loop = AutoFlushLoop(q, bad_flush, flush_interval_ms=30)
    q.enqueue(_make_event())
    loop.start()
    time.sleep(0.2)
    assert loop.is_running
    loop.stop()

    assert len(calls) >= 2


def test_thread_is_daemon() -> None:
    q = EventQueue()
    loop = AutoFlushLoop(q, _CountingFlush(q), flush_interval_ms=50)
    loop.start()
    assert loop._thread is not None
    assert loop._thread.daemon is True
    loop.stop()


def test_double_start_is_idempotent() -> None:
    q = EventQueue()
    loop = AutoFlushLoop(q, _CountingFlush(q), flush_interval_ms=50)
    loop.start()
    thread1 = loop._thread
    loop.start()  # Should not create a second thread
    assert loop._thread is thread1
    loop.stop()


def test_stop_warns_when_flush_outlives_timeout(caplog: pytest.LogCaptureFixture) -> None:
    q = EventQueue()
    started = threading.Event()
    release = threading.Event()

    def slow_flush() -> FlushResult:
        started.set()
        release.wait(5.0)
        q.drain(100)
        return SUCCESS

    loop = AutoFlushLoop(q, slow_flush, flush_interval_ms=10)
    q.enqueue(_make_event())
    loop.start()
    assert started.wait(2.0)

    with caplog.at_level(logging.DEBUG, logger="hoglin.processor"):
        loop.stop(timeout_s=0.05)
    release.set()

    assert "still running" in caplog.text
    assert "Auto-flush stopped" not in caplog.text
    assert not loop.is_running
