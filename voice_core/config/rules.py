"""Default scoring configuration and config-source constants."""
from __future__ import annotations

import os

# Default definitions used when the config source is unset, empty or broken.
# weight is a percentage; thresholds are (min, ideal, max) in the metric's unit.
DEFAULT_DEFINITIONS = {
    "volume": {"weight": 20, "thresholds": (-45.0, -20.0, 0.0)},            # dB
    "speechRate": {"weight": 25, "thresholds": (80.0, 150.0, 200.0)},        # wpm
    "acceleration": {"weight": 25, "thresholds": (0.0, 100.0, 100.0)},       # score
    "responseTime": {"weight": 15, "thresholds": (2000.0, 200.0, 3000.0)},   # ms: poor, instant
    "pauseManagement": {"weight": 15, "thresholds": (3.0, 0.0, 2.71)},       # max count, -, max seconds
}

# External config table names -> internal metric ids
METRIC_NAME_MAP = {
    "volume": "volume",
    "speech_rate": "speechRate",
    "end_intensity": "acceleration",
    "latency": "responseTime",
    "pauses": "pauseManagement",
}

# Seconds a fetched configuration stays fresh
CONFIG_CACHE_TTL = 60.0

# Timeout for one config fetch (seconds)
CONFIG_FETCH_TIMEOUT = 10.0

# Supabase-style REST endpoint for the scoring_config table (unset = defaults only)
CONFIG_SOURCE_URL = os.getenv("VOICE_CONFIG_URL", "")
CONFIG_SOURCE_API_KEY = os.getenv("VOICE_CONFIG_API_KEY", "")

# Estimator used when a config row does not carry its own method
DEFAULT_SPEECH_RATE_METHOD = os.getenv("VOICE_SPEECH_RATE_METHOD", "energy-peaks")
