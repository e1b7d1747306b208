"""Hoglin: batched analytics events for game servers and services."""

from __future__ import annotations

from hoglin._client import Hoglin
from hoglin._config import HoglinConfig
from hoglin._sdk import evaluate_experiment, flush, get_client, init, shutdown, track
from hoglin._transport import HttpTransport, TransportResponse
from hoglin._types import (
    SUCCESS,
    AnalyticsEvent,
    ApiErrorResponse,
    ErrorDetail,
    FlushError,
    FlushResult,
    FlushSuccess,
)

__version__ = "1.1.0"

__all__ = [
    "SUCCESS",
    "AnalyticsEvent",
    "ApiErrorResponse",
    "ErrorDetail",
    "FlushError",
    "FlushResult",
    "FlushSuccess",
    "Hoglin",
    "HoglinConfig",
    "HttpTransport",
    "TransportResponse",
    "__version__",
    "evaluate_experiment",
    "flush",
    "get_client",
    "init",
    "shutdown",
    "track",
]
