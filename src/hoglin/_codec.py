"""JSON encoding of event batches and best-effort decoding of response bodies."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from hoglin._types import AnalyticsEvent, ApiErrorResponse, ErrorDetail


def encode_batch(events: Sequence[AnalyticsEvent]) -> str:
    """Serialize a batch as a JSON array.

    Property values json cannot represent are sent as their ``str()``.
    """
    return json.dumps([e.to_dict() for e in events], default=str)


def decode_error_response(body: str) -> ApiErrorResponse | None:
    """Decode a server error body, or return None if it has an unknown shape."""
    try:
        data = json.loads(body)
    except ValueError:
        return None
    if not isinstance(data, dict) or not isinstance(data.get("error"), str):
        return None

    details: list[ErrorDetail] | None = None
    raw_details = data.get("details")
    if isinstance(raw_details, list):
        details = [
            ErrorDetail(field=str(d.get("field", "")), message=str(d.get("message", "")))
            for d in raw_details
            if isinstance(d, dict)
        ]

    message = data.get("message")
    return ApiErrorResponse(
        error=data["error"],
        details=details,
        message=message if isinstance(message, str) else None,
    )


def decode_experiment_result(body: str) -> bool | None:
    """Extract ``inExperiment`` from an evaluation body, or None if malformed."""
    try:
        data: Any = json.loads(body)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    value = data.get("inExperiment")
    return value if isinstance(value, bool) else None
