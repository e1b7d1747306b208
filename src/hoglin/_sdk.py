"""Process-wide default client behind the module-level helpers."""

from __future__ import annotations

import atexit
import logging
from collections.abc import Mapping
from typing import Any

from hoglin._client import Hoglin
from hoglin._config import DEFAULT_BASE_URL, HoglinConfig
from hoglin._transport import HttpTransport
from hoglin._types import SUCCESS, FlushResult

_client_instance: Hoglin | None = None


def get_client() -> Hoglin | None:
    """Return the default client, or None before ``init``."""
    return _client_instance


def init(
    server_key: str,
    *,
    base_url: str = DEFAULT_BASE_URL,
    auto_flush_interval_ms: int = 30_000,
    max_batch_size: int = 1_000,
    enable_auto_flush: bool = True,
    request_timeout_s: float = 10.0,
    logger: logging.Logger | None = None,
    transport: HttpTransport | None = None,
) -> Hoglin:
    """Create the default client used by ``hoglin.track`` and friends.

    A previously initialized default client is shut down first. The new one
    is shut down automatically at interpreter exit.
    """
    global _client_instance  # noqa: PLW0603

    if _client_instance is not None:
        _client_instance.shutdown()

    config = HoglinConfig(
        server_key=server_key,
        base_url=base_url,
        auto_flush_interval_ms=auto_flush_interval_ms,
        max_batch_size=max_batch_size,
        enable_auto_flush=enable_auto_flush,
        request_timeout_s=request_timeout_s,
    )
    _client_instance = Hoglin(config, transport=transport, logger=logger)
    atexit.register(shutdown)
    return _client_instance


def track(event_type: str, properties: Mapping[str, Any] | None = None) -> None:
    """Queue an event on the default client. Discarded before ``init``."""
    if _client_instance is not None:
        _client_instance.track(event_type, properties)


def flush() -> FlushResult:
    if _client_instance is None:
        return SUCCESS
    return _client_instance.flush()


def evaluate_experiment(experiment_id: str, player_uuid: str | None = None) -> bool:
    if _client_instance is None:
        return False
    return _client_instance.evaluate_experiment(experiment_id, player_uuid)


def shutdown() -> None:
    """Shut down the default client, flushing any remaining events."""
    global _client_instance  # noqa: PLW0603
    if _client_instance is not None:
        _client_instance.shutdown()
        _client_instance = None
