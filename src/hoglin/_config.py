"""SDK configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_BASE_URL = "http://localhost:3000"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class HoglinConfig:
    """Immutable SDK configuration."""

    server_key: str
    base_url: str = DEFAULT_BASE_URL
    auto_flush_interval_ms: int = 30_000
    max_batch_size: int = 1_000
    enable_auto_flush: bool = True
    request_timeout_s: float = 10.0

    def __post_init__(self) -> None:
        if not self.server_key:
            raise ValueError("server_key is required")
        if self.auto_flush_interval_ms <= 0:
            raise ValueError("auto_flush_interval_ms must be positive")
        if self.max_batch_size <= 0:
            raise ValueError("max_batch_size must be positive")
        if self.request_timeout_s <= 0:
            raise ValueError("request_timeout_s must be positive")
        # frozen: bypass __setattr__ to normalise the URL
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def analytics_url(self) -> str:
        return f"{self.base_url}/analytics/{self.server_key}"

    def experiment_url(self, experiment_id: str) -> str:
        return f"{self.base_url}/experiments/{self.server_key}/{experiment_id}/evaluate"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> HoglinConfig:
        """Build a config from ``HOGLIN_*`` environment variables.

        ``HOGLIN_SERVER_KEY`` is required; every other variable falls back
        to the dataclass default when unset.
        """
        env = os.environ if environ is None else environ
        server_key = env.get("HOGLIN_SERVER_KEY")
        if not server_key:
            raise ValueError("HOGLIN_SERVER_KEY is not set")

        kwargs: dict[str, object] = {}
        if "HOGLIN_BASE_URL" in env:
            kwargs["base_url"] = env["HOGLIN_BASE_URL"]
        if "HOGLIN_AUTO_FLUSH_INTERVAL_MS" in env:
            kwargs["auto_flush_interval_ms"] = _parse_int(
                env, "HOGLIN_AUTO_FLUSH_INTERVAL_MS"
            )
        if "HOGLIN_MAX_BATCH_SIZE" in env:
            kwargs["max_batch_size"] = _parse_int(env, "HOGLIN_MAX_BATCH_SIZE")
        if "HOGLIN_ENABLE_AUTO_FLUSH" in env:
            kwargs["enable_auto_flush"] = (
                env["HOGLIN_ENABLE_AUTO_FLUSH"].strip().lower() in _TRUTHY
            )
        return cls(server_key=server_key, **kwargs)  # type: ignore[arg-type]


def _parse_int(env: Mapping[str, str], name: str) -> int:
    raw = env[name]
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
