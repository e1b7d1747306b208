"""Drains one batch, ships it and interprets the outcome."""

from __future__ import annotations

import logging

from hoglin._codec import decode_error_response, encode_batch
from hoglin._config import HoglinConfig
from hoglin._queue import EventQueue
from hoglin._transport import NO_RESPONSE, HttpTransport, TransportResponse
from hoglin._types import SUCCESS, FlushError, FlushResult

RETRYABLE_STATUS_CODES = frozenset({NO_RESPONSE, 408, 429, 500, 502, 503, 504})


def is_retryable(status_code: int) -> bool:
    """Connection failures, timeouts, throttling and gateway errors are worth retrying."""
    return status_code in RETRYABLE_STATUS_CODES


def error_message(response: TransportResponse) -> str:
    """Render a human readable message for a failed response."""
    if response.text:
        parsed = decode_error_response(response.text)
        if parsed is not None:
            return parsed.render()
        if response.text.strip():
            return response.text
    if response.error:
        return response.error
    return "Unknown error"


class Flusher:
    """Sends at most ``max_batch_size`` queued events per call.

    Several flushes may run at once; each owns the disjoint slice it drained.
    """

    def __init__(
        self,
        queue: EventQueue,
        transport: HttpTransport,
        config: HoglinConfig,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._queue = queue
        self._transport = transport
        self._config = config
        self._logger = logger or logging.getLogger("hoglin.flusher")

    def flush(self) -> FlushResult:
        if self._queue.is_empty():
            self._logger.debug("Flush called but queue is empty")
            return SUCCESS

        events = self._queue.drain(self._config.max_batch_size)
        if not events:
            self._logger.debug("No events to flush after draining queue")
            return SUCCESS

        try:
            body = encode_batch(events)
        except (TypeError, ValueError) as exc:
            self._logger.error("Failed to encode %d events, dropping them", len(events))
            return FlushError(f"Failed to encode events: {exc}", is_retryable=False)

        self._logger.debug("Sending %d events to analytics endpoint", len(events))
        response = self._transport.put_json(self._config.analytics_url, body)

        if response.is_success:
            self._logger.debug(
                "Successfully sent %d events (HTTP %d)", len(events), response.status_code
            )
            return SUCCESS

        message = error_message(response)
        self._logger.error(
            "Failed to send %d events (HTTP %d): %s",
            len(events),
            response.status_code,
            message,
        )

        retryable = is_retryable(response.status_code)
        if retryable:
            self._logger.warning("Error is retryable, re-queuing %d events", len(events))
            self._queue.requeue(events)
        else:
            self._logger.error("Error is not retryable, %d events will be dropped", len(events))

        return FlushError(message, is_retryable=retryable)
