"""Hoglin Quick Start: minimal example to get events flowing."""

import logging

import hoglin

logging.basicConfig(level=logging.DEBUG)

# 1. Initialize the default client
hoglin.init(
    "your-server-key",
    base_url="http://localhost:3000",
    auto_flush_interval_ms=5_000,
    max_batch_size=50,
)

# 2. Track events; they are queued and sent in the background
hoglin.track("player_join", {"player": "steve", "world": "overworld"})
hoglin.track("player_action", {"action": "block_place", "block_type": "stone"})

# 3. Shutdown (flushes remaining events)
hoglin.shutdown()

print("Done! Check the Hoglin dashboard at http://localhost:3000")
