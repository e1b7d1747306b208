"""Unbounded FIFO queue of pending analytics events."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Sequence

from hoglin._types import AnalyticsEvent


class EventQueue:
    """Thread-safe unbounded FIFO backed by collections.deque.

    A lock makes ``drain`` atomic per call, so two concurrent flushes always
    receive disjoint slices, and lets ``requeue`` put a failed batch back at
    the head as one contiguous run.
    """

    def __init__(self) -> None:
        self._events: deque[AnalyticsEvent] = deque()
        self._lock = threading.Lock()

    def enqueue(self, event: AnalyticsEvent) -> None:
        """Append an event at the tail. Never blocks on I/O and never fails."""
        with self._lock:
            self._events.append(event)

    def drain(self, max_items: int) -> list[AnalyticsEvent]:
        """Remove and return up to max_items events in FIFO order."""
        with self._lock:
            count = min(max_items, len(self._events))
            return [self._events.popleft() for _ in range(count)]

    def requeue(self, events: Sequence[AnalyticsEvent]) -> None:
        """Put events back at the head, keeping their original order."""
        with self._lock:
            self._events.extendleft(reversed(events))

    def is_empty(self) -> bool:
        return not self._events

    def __len__(self) -> int:
        # advisory: may be stale by the time the caller acts on it
        return len(self._events)
