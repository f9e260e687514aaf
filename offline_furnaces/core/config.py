"""Centralized runtime settings for the Offline Furnaces host and plugin.

Values are read from the environment once at import time; the typed getters
below are the single source of truth for callers.
"""
from __future__ import annotations

import os

# Tick rate for the background game loop (seconds per tick)
TICK_RATE: float = float(os.environ.get("TICK_RATE", "1.0"))

# Location of the persisted plugin configuration record
OFFLINE_FURNACES_CONFIG_PATH: str = os.environ.get(
    "OFFLINE_FURNACES_CONFIG_PATH", os.path.join("config", "OfflineFurnaces.json")
)

# Number of ovens an oven sweep inspects before yielding back to the tick loop
SWEEP_BATCH_SIZE: int = int(os.environ.get("SWEEP_BATCH_SIZE", "1"))


# --- Typed getters (single source of truth) ---

def get_tick_rate() -> float:
    return float(TICK_RATE)


def get_config_path() -> str:
    return str(OFFLINE_FURNACES_CONFIG_PATH)


def get_sweep_batch_size() -> int:
    # A batch of zero would never yield
    return max(1, int(SWEEP_BATCH_SIZE))
