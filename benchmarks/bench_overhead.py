#!/usr/bin/env python3
"""Caller-thread overhead benchmark.

Measures what an application pays per ``track`` call:
  1. EventQueue.enqueue  (lock + deque append)
  2. Hoglin.track        (timestamp, property copy, enqueue, size check)
  3. encode_batch        (per-event share of serializing a full batch)

Nothing here touches the network: auto-flush is off and the batch size is
larger than the iteration count, so no background flush is scheduled.

Usage:
    python benchmarks/bench_overhead.py
"""

from __future__ import annotations

import time

from hoglin import Hoglin
from hoglin._codec import encode_batch
from hoglin._queue import EventQueue
from hoglin._types import AnalyticsEvent

_EVENT = AnalyticsEvent(
    timestamp="2024-01-01T00:00:00.000Z",
    event_type="player_action",
    properties={"action": "block_place", "block_type": "stone"},
)


def bench_enqueue_only(iterations: int = 500_000) -> float:
    """Benchmark: queue enqueue cost only."""
    q = EventQueue()

    # Warmup
    for _ in range(5000):
        q.enqueue(_EVENT)
    q.drain(len(q))

    start = time.perf_counter_ns()
    for _ in range(iterations):
        q.enqueue(_EVENT)
    elapsed = time.perf_counter_ns() - start

    return elapsed / iterations


def bench_track(iterations: int = 200_000) -> float:
    """Benchmark: full track() call on a client that never flushes."""
    client = (
        Hoglin.Builder("bench")
        .enable_auto_flush(False)
        .max_batch_size(iterations * 2)
        .build()
    )
    props = {"action": "block_place", "block_type": "stone"}
    try:
        # Warmup
        for _ in range(1000):
            client.track("player_action", props)
        client._queue.drain(client.queue_size)

        start = time.perf_counter_ns()
        for _ in range(iterations):
            client.track("player_action", props)
        elapsed = time.perf_counter_ns() - start
    finally:
        client._queue.drain(client.queue_size)
        client.shutdown()

    return elapsed / iterations


def bench_encode(batch_size: int = 1000, rounds: int = 50) -> float:
    """Benchmark: JSON encoding, reported per event."""
    batch = [_EVENT] * batch_size
    encode_batch(batch)

    start = time.perf_counter_ns()
    for _ in range(rounds):
        encode_batch(batch)
    elapsed = time.perf_counter_ns() - start

    return elapsed / (rounds * batch_size)


def main() -> None:
    print("=" * 60)
    print("Hoglin track() Overhead Benchmark")
    print("=" * 60)

    results: list[tuple[str, float, str]] = []

    ns = bench_enqueue_only()
    status = "PASS" if ns < 500 else "WARN" if ns < 1000 else "FAIL"
    results.append(("Queue enqueue", ns, f"{status} (target < 500ns)"))

    ns = bench_track()
    status = "PASS" if ns < 5000 else "WARN" if ns < 10000 else "FAIL"
    results.append(("Hoglin.track (2 properties)", ns, f"{status} (target < 5μs)"))

    ns = bench_encode()
    status = "PASS" if ns < 10000 else "WARN" if ns < 20000 else "FAIL"
    results.append(("encode_batch (per event)", ns, f"{status} (target < 10μs)"))

    print()
    for name, ns_val, note in results:
        if ns_val >= 1000:
            display = f"{ns_val / 1000:.2f}μs"
        else:
            display = f"{ns_val:.0f}ns"
        print(f"  {name:40s}  {display:>10s}   {note}")

    print()
    all_pass = all("PASS" in r[2] or "WARN" in r[2] for r in results)
    if all_pass:
        print("All benchmarks within acceptable range.")
    else:
        print("WARNING: Some benchmarks exceeded target. Review above.")


if __name__ == "__main__":
    main()
