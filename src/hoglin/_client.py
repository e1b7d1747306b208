"""Client façade: owns the queue, the auto-flush loop and the shutdown policy."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from types import TracebackType
from typing import Any

from hoglin._codec import decode_experiment_result
from hoglin._config import DEFAULT_BASE_URL, HoglinConfig
from hoglin._flusher import Flusher
from hoglin._processor import AutoFlushLoop
from hoglin._queue import EventQueue
from hoglin._transport import HttpTransport
from hoglin._types import AnalyticsEvent, FlushError, FlushResult, FlushSuccess

SHUTDOWN_MAX_ATTEMPTS = 3
SHUTDOWN_RETRY_DELAY_S = 1.0

FlushCallback = Callable[[FlushResult], None]

_SHUT_DOWN_MESSAGE = "Client has been shut down"


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Hoglin:
    """Analytics client.

    ``track`` only enqueues; delivery happens on the auto-flush thread, on a
    background worker once a full batch is queued, or through ``flush``.
    Build one with the fluent builder::

        analytics = (
            Hoglin.Builder("server-key")
            .base_url("https://analytics.example.com")
            .max_batch_size(50)
            .build()
        )
        analytics.track("player_action", {"action": "block_place"})
        analytics.shutdown()
    """

    class Builder:
        """Fluent construction of a configured, started ``Hoglin``."""

        def __init__(self, server_key: str) -> None:
            self._server_key = server_key
            self._base_url = DEFAULT_BASE_URL
            self._auto_flush_interval_ms = 30_000
            self._max_batch_size = 1_000
            self._enable_auto_flush = True
            self._request_timeout_s = 10.0
            self._logger: logging.Logger | None = None
            self._transport: HttpTransport | None = None

        def base_url(self, url: str) -> Hoglin.Builder:
            self._base_url = url
            return self

        def auto_flush_interval(self, interval_ms: int) -> Hoglin.Builder:
            self._auto_flush_interval_ms = interval_ms
            return self

        def max_batch_size(self, size: int) -> Hoglin.Builder:
            self._max_batch_size = size
            return self

        def enable_auto_flush(self, enabled: bool) -> Hoglin.Builder:
            self._enable_auto_flush = enabled
            return self

        def request_timeout(self, timeout_s: float) -> Hoglin.Builder:
            self._request_timeout_s = timeout_s
            return self

        def logger(self, logger: logging.Logger) -> Hoglin.Builder:
            self._logger = logger
            return self

        def transport(self, transport: HttpTransport) -> Hoglin.Builder:
            self._transport = transport
            return self

        def build(self) -> Hoglin:
            config = HoglinConfig(
                server_key=self._server_key,
                base_url=self._base_url,
                auto_flush_interval_ms=self._auto_flush_interval_ms,
                max_batch_size=self._max_batch_size,
                enable_auto_flush=self._enable_auto_flush,
                request_timeout_s=self._request_timeout_s,
            )
            return Hoglin(config, transport=self._transport, logger=self._logger)

    def __init__(
        self,
        config: HoglinConfig,
        *,
        transport: HttpTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self._logger = logger or logging.getLogger("hoglin.client")
        self._queue = EventQueue()
        self._transport = transport or HttpTransport(timeout_s=config.request_timeout_s)
        self._flusher = Flusher(self._queue, self._transport, config, logger=logger)
        self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="hoglin")
        self._shutdown_lock = threading.Lock()
        self._shutting_down = threading.Event()
        self._closed = threading.Event()
        self._auto_flush: AutoFlushLoop | None = None

        self._logger.debug(
            "Initializing Hoglin SDK with base_url=%s, auto_flush_interval=%dms, "
            "max_batch_size=%d, enable_auto_flush=%s",
            config.base_url,
            config.auto_flush_interval_ms,
            config.max_batch_size,
            config.enable_auto_flush,
        )
        if config.enable_auto_flush:
            self._auto_flush = AutoFlushLoop(
                self._queue,
                self.flush,
                flush_interval_ms=config.auto_flush_interval_ms,
                logger=logger,
            )
            self._auto_flush.start()

    def track(self, event_type: str, properties: Mapping[str, Any] | None = None) -> None:
        """Queue an event. Never blocks on the network.

        Once shutdown has begun new events are discarded.
        """
        if self._shutting_down.is_set():
            self._logger.warning("Cannot track event '%s', SDK is shutting down", event_type)
            return

        event = AnalyticsEvent(
            timestamp=_utc_timestamp(),
            event_type=event_type,
            properties=dict(properties or {}),
        )
        self._queue.enqueue(event)
        queued = len(self._queue)
        self._logger.debug("Queued event '%s', queue size %d", event_type, queued)

        # a full batch is sent right away, whether or not auto-flush is on
        if queued >= self.config.max_batch_size:
            self._logger.debug("Batch size limit reached (%d), triggering flush", queued)
            self._submit(self.flush)

    def flush(self) -> FlushResult:
        """Send one batch and wait for the outcome."""
        if self._closed.is_set() and not self._queue.is_empty():
            return FlushError(_SHUT_DOWN_MESSAGE, is_retryable=False)
        return self._flusher.flush()

    def flush_async(self, callback: FlushCallback | None = None) -> Future[FlushResult]:
        """Flush on a background worker.

        ``callback`` receives the result on the worker thread, never on the
        caller's.
        """

        def run() -> FlushResult:
            result = self.flush()
            if callback is not None:
                try:
                    callback(result)
                except Exception:  # noqa: BLE001
                    self._logger.error("Flush callback raised", exc_info=True)
            self._logger.debug("Async flush completed: %s", result)
            return result

        submitted = self._submit(run)
        if submitted is not None:
            return submitted
        rejected: Future[FlushResult] = Future()
        rejected.set_result(FlushError(_SHUT_DOWN_MESSAGE, is_retryable=False))
        return rejected

    def evaluate_experiment(self, experiment_id: str, player_uuid: str | None = None) -> bool:
        """Ask the server whether a player falls inside an experiment.

        Any failure is reported as ``False``.
        """
        if self._shutting_down.is_set():
            self._logger.warning(
                "Cannot evaluate experiment '%s', SDK is shutting down", experiment_id
            )
            return False

        params = {"playerUUID": player_uuid} if player_uuid is not None else None
        response = self._transport.get(self.config.experiment_url(experiment_id), params)
        if not response.is_success:
            self._logger.warning(
                "Experiment evaluation for '%s' failed (HTTP %d)",
                experiment_id,
                response.status_code,
            )
            return False

        in_experiment = decode_experiment_result(response.text)
        if in_experiment is None:
            self._logger.debug("Unexpected experiment evaluation body: %r", response.text)
            return False
        return in_experiment

    def shutdown(self) -> None:
        """Stop accepting events and try to deliver what is left.

        Blocks for up to ``SHUTDOWN_MAX_ATTEMPTS`` sequential flushes. Calls
        after the first return immediately.
        """
        with self._shutdown_lock:
            if self._shutting_down.is_set():
                return
            self._shutting_down.set()

        self._logger.debug("Shutting down Hoglin SDK")
        if self._auto_flush is not None:
            # an in-flight auto-flush may need the whole request timeout
            self._auto_flush.stop(timeout_s=self.config.request_timeout_s + 5.0)
            self._auto_flush = None

        self._final_flush()

        # queued eager flushes are dropped, running ones finish
        self._executor.shutdown(wait=True, cancel_futures=True)

        remaining = len(self._queue)
        if remaining:
            self._logger.warning("Shutdown complete with %d events still in queue", remaining)

        self._closed.set()
        self._transport.close()
        self._logger.debug("Hoglin SDK shutdown complete")

    def _final_flush(self) -> int:
        """Run the bounded shutdown flush rounds and return how many were made."""
        attempts = 0
        while not self._queue.is_empty() and attempts < SHUTDOWN_MAX_ATTEMPTS:
            attempts += 1
            self._logger.debug(
                "Final flush attempt %d/%d, %d events remaining",
                attempts,
                SHUTDOWN_MAX_ATTEMPTS,
                len(self._queue),
            )

            result = self.flush()
            if isinstance(result, FlushSuccess):
                if self._queue.is_empty():
                    self._logger.debug("All events flushed during shutdown")
                    break
            else:
                self._logger.error(
                    "Error during shutdown flush attempt %d: %s", attempts, result.message
                )
                if not result.is_retryable:
                    self._logger.warning("Error is not retryable, stopping flush attempts")
                    break

            if attempts < SHUTDOWN_MAX_ATTEMPTS:
                time.sleep(SHUTDOWN_RETRY_DELAY_S)
        return attempts

    def _submit(self, fn: Callable[[], FlushResult]) -> Future[FlushResult] | None:
        try:
            return self._executor.submit(fn)
        except RuntimeError:
            # executor already shut down
            self._logger.debug("Background flush rejected, client is shut down")
            return None

    @property
    def queue_size(self) -> int:
        """Number of events waiting to be sent. Advisory under concurrency."""
        return len(self._queue)

    @property
    def is_shutting_down(self) -> bool:
        return self._shutting_down.is_set()

    def __enter__(self) -> Hoglin:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.shutdown()
