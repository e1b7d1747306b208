"""Background thread that flushes the queue periodically."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from hoglin._queue import EventQueue
from hoglin._types import FlushResult


class AutoFlushLoop:
    """Daemon thread that calls ``flush`` every interval while events are queued."""

    def __init__(
        self,
        queue: EventQueue,
        flush: Callable[[], FlushResult],
        *,
        flush_interval_ms: int = 30_000,
        logger: logging.Logger | None = None,
    ) -> None:
        self._queue = queue
        self._flush = flush
        self._flush_interval_s = flush_interval_ms / 1000.0
        self._logger = logger or logging.getLogger("hoglin.processor")
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the loop. A second call while running does nothing."""
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="hoglin-auto-flush", daemon=True
        )
        self._thread.start()
        self._logger.debug(
            "Started auto-flush with interval %dms", int(self._flush_interval_s * 1000)
        )

    def stop(self, timeout_s: float = 5.0) -> None:
        """Wake the loop out of its sleep and wait for the thread to exit.

        A flush already on the wire is allowed to finish first.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout_s)
            if self._thread.is_alive():
                self._logger.warning(
                    "Auto-flush thread still running after %.1fs, continuing shutdown",
                    timeout_s,
                )
                self._thread = None
                return
            self._thread = None
        self._logger.debug("Auto-flush stopped")

    def _run(self) -> None:
        while not self._stop_event.wait(timeout=self._flush_interval_s):
            self._tick()

    def _tick(self) -> None:
        if self._queue.is_empty():
            return
        self._logger.debug("Auto-flush triggered with %d events queued", len(self._queue))
        try:
            result = self._flush()
        except Exception:  # noqa: BLE001
            self._logger.error("Error during auto-flush", exc_info=True)
            return
        self._logger.debug("Auto-flush finished: %s", result)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
