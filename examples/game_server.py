"""Hoglin in a long-running server: builder, async flush and experiments.

Reads its configuration from HOGLIN_* environment variables::

    export HOGLIN_SERVER_KEY=your-server-key
    export HOGLIN_BASE_URL=http://localhost:3000

Requirements:
    pip install hoglin

Usage:
    python examples/game_server.py
"""

import logging
import time
import uuid

from hoglin import FlushResult, Hoglin, HoglinConfig

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("game_server")

config = HoglinConfig.from_env()

analytics = (
    Hoglin.Builder(config.server_key)
    .base_url(config.base_url)
    .auto_flush_interval(5_000)
    .max_batch_size(50)
    .logger(logging.getLogger("game_server.analytics"))
    .build()
)


def on_flushed(result: FlushResult) -> None:
    # runs on a Hoglin worker thread
    logger.info("Flush finished: %s", result)


def handle_join(player_uuid: str) -> None:
    analytics.track("player_join", {"player_uuid": player_uuid})
    if analytics.evaluate_experiment("new-spawn-area", player_uuid=player_uuid):
        analytics.track("experiment_exposure", {"experiment": "new-spawn-area"})


with analytics:
    for _ in range(10):
        handle_join(str(uuid.uuid4()))
        time.sleep(0.1)

    analytics.flush_async(on_flushed)
    time.sleep(6)
# leaving the block shuts the client down and flushes what is left
