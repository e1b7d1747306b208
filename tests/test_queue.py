"""Tests for _queue module."""

import threading

from hoglin._queue import EventQueue
from hoglin._types import AnalyticsEvent


def _make_event(event_type: str = "test") -> AnalyticsEvent:
    return AnalyticsEvent(timestamp="2024-01-01T00:00:00.000Z", event_type=event_type)


def _types(events: list[AnalyticsEvent]) -> list[str]:
    return [e.event_type for e in events]


def test_enqueue_and_drain() -> None:
    q = EventQueue()
    q.enqueue(_make_event("a"))
    q.enqueue(_make_event("b"))
    assert len(q) == 2

    items = q.drain(10)
    assert _types(items) == ["a", "b"]
    assert len(q) == 0
    assert q.is_empty()


def test_drain_partial() -> None:
    q = EventQueue()
    for i in range(5):
        q.enqueue(_make_event(f"e{i}"))

    items = q.drain(3)
    assert _types(items) == ["e0", "e1", "e2"]
    assert len(q) == 2


def test_drain_empty() -> None:
    q = EventQueue()
    assert q.drain(10) == []
    assert q.is_empty()


def test_unbounded() -> None:
    q = EventQueue()
    for i in range(20_000):
        q.enqueue(_make_event(f"e{i}"))
    assert len(q) == 20_000


def test_requeue_goes_to_head_in_order() -> None:
    q = EventQueue()
    for name in ["a", "b", "c", "d"]:
        q.enqueue(_make_event(name))

    batch = q.drain(2)
    q.enqueue(_make_event("late"))
    q.requeue(batch)

    assert _types(q.drain(10)) == ["a", "b", "c", "d", "late"]


def test_requeue_empty_batch() -> None:
    q = EventQueue()
    q.enqueue(_make_event("a"))
    q.requeue([])
    assert _types(q.drain(10)) == ["a"]


def test_concurrent_enqueue() -> None:
    q = EventQueue()
    n_threads = 4
    n_per_thread = 500

    def writer() -> None:
        for i in range(n_per_thread):
            q.enqueue(_make_event(f"e{i}"))

    threads = [threading.Thread(target=writer) for _ in range(n_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    total = len(q.drain(n_threads * n_per_thread + 1))
    assert total == n_threads * n_per_thread


def test_concurrent_drains_are_disjoint() -> None:
    q = EventQueue()
    events = [_make_event(f"e{i}") for i in range(4000)]
    for e in events:
        q.enqueue(e)

    drained: list[list[AnalyticsEvent]] = []
    lock = threading.Lock()

    def reader() -> None:
        while True:
            batch = q.drain(7)
            if not batch:
                return
            with lock:
                drained.append(batch)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    seen = [id(e) for batch in drained for e in batch]
    assert len(seen) == len(events)
    assert len(set(seen)) == len(events)
