"""Core types: analytics events, error bodies and flush results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class AnalyticsEvent:
    """Immutable tracked occurrence waiting in the queue."""

    timestamp: str
    event_type: str
    properties: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Render the wire shape sent to the analytics endpoint."""
        return {
            "timestamp": self.timestamp,
            "event_type": self.event_type,
            "properties": dict(self.properties),
        }


@dataclass(frozen=True)
class ErrorDetail:
    """One field-level problem reported by the server."""

    field: str
    message: str


@dataclass(frozen=True)
class ApiErrorResponse:
    """Structured error body returned by the analytics endpoint."""

    error: str
    details: list[ErrorDetail] | None = None
    message: str | None = None

    def render(self) -> str:
        if self.details:
            joined = ", ".join(f"{d.field} - {d.message}" for d in self.details)
            return f"{self.error}: {joined}"
        if self.message:
            return f"{self.error}: {self.message}"
        return self.error


@dataclass(frozen=True)
class FlushSuccess:
    """The batch was delivered, or there was nothing to deliver."""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class FlushError:
    """The batch was not delivered.

    When ``is_retryable`` is true the events went back into the queue;
    otherwise they were dropped.
    """

    message: str
    is_retryable: bool = True

    @property
    def ok(self) -> bool:
        return False


FlushResult = Union[FlushSuccess, FlushError]

SUCCESS = FlushSuccess()
