"""HTTP transport over httpx. Network failures become data, never exceptions."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

logger = logging.getLogger("hoglin.transport")

# Status reported when no response reached the client.
NO_RESPONSE = -1


@dataclass(frozen=True)
class TransportResponse:
    """Outcome of one HTTP exchange.

    ``status_code`` is ``NO_RESPONSE`` when the request never got an answer,
    in which case ``error`` carries the transport failure text. For any other
    non-2xx answer ``error`` holds the status line, e.g. ``HTTP 503 Service Unavailable``.
    """

    status_code: int
    text: str = ""
    error: str | None = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport:
    """Thin wrapper around a shared ``httpx.Client``.

    ``transport`` lets callers substitute any ``httpx.BaseTransport``
    (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        *,
        timeout_s: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(timeout=timeout_s, transport=transport)

    def put_json(self, url: str, body: str) -> TransportResponse:
        """PUT a pre-encoded JSON document."""
        return self._send(
            "PUT",
            url,
            content=body.encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )

    def get(self, url: str, params: dict[str, str] | None = None) -> TransportResponse:
        return self._send("GET", url, params=params)

    def _send(self, method: str, url: str, **kwargs: object) -> TransportResponse:
        try:
            response = self._client.request(method, url, **kwargs)  # type: ignore[arg-type]
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("%s %s failed without a response", method, url, exc_info=True)
            return TransportResponse(
                status_code=NO_RESPONSE,
                error=str(exc) or type(exc).__name__,
            )
        except Exception as exc:  # noqa: BLE001
            # e.g. the pool was closed by a concurrent shutdown
            logger.warning("%s %s failed unexpectedly: %s", method, url, exc, exc_info=True)
            return TransportResponse(
                status_code=NO_RESPONSE,
                error=str(exc) or type(exc).__name__,
            )

        error: str | None = None
        if not 200 <= response.status_code < 300:
            error = f"HTTP {response.status_code} {response.reason_phrase}".strip()
        return TransportResponse(
            status_code=response.status_code, text=response.text, error=error
        )

    def close(self) -> None:
        """Close the underlying connection pool."""
        try:
            self._client.close()
        except Exception:  # noqa: BLE001
            logger.debug("Error while closing HTTP client", exc_info=True)
