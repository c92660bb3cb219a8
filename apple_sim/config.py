"""Runtime configuration for the savings simulator."""

from __future__ import annotations

import os

DEFAULT_SEED = int(os.environ.get("APPLE_SIM_SEED", "42"))
MAX_TRIALS = 200_000
HISTOGRAM_BINS = 40
TRIAL_BLOCK_SIZE = 10_000
SHARE_SUM_TOLERANCE = 0.5
FULL_PRICE_CLIP = (0.0, 2.0)
LOG_LEVEL = os.environ.get("APPLE_SIM_LOG_LEVEL", "WARNING").upper()
