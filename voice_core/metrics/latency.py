"""Response latency metric: time until the speaker is first heard."""
from __future__ import annotations

import numpy as np

from ..config.definitions import Thresholds
from ..models.results import ResponseTimeResult
from ..signal import segment_db, window_starts
from .rules import SILENCE_THRESHOLD_DB, SPEECH_ONSET_STEP, SPEECH_ONSET_WINDOW
from .scale import clamp_score, round_half_up


def detect_speech_onset(samples: np.ndarray, sample_rate: int) -> float:
    """Seconds until the first 200 ms window louder than the silence floor.

    Returns the full buffer duration when no speech is found.
    """
    window = max(1, int(SPEECH_ONSET_WINDOW * sample_rate))
    step = max(1, int(SPEECH_ONSET_STEP * sample_rate))
    for start in window_starts(len(samples), window, step):
        if segment_db(samples[start:start + window]) > SILENCE_THRESHOLD_DB:
            return start / sample_rate
    return len(samples) / sample_rate


def score_latency(response_time_ms: float, thresholds: Thresholds) -> int:
    """100 at or below ``ideal`` (instant), 0 at or above ``min`` (poor)."""
    instant, poor = thresholds.ideal, thresholds.min
    if response_time_ms <= instant:
        return 100
    if response_time_ms >= poor:
        return 0
    return clamp_score(100 - (response_time_ms - instant) / (poor - instant) * 100)


def calculate_response_time(samples: np.ndarray, sample_rate: int, thresholds: Thresholds) -> ResponseTimeResult:
    response_time_ms = detect_speech_onset(samples, sample_rate) * 1000
    return ResponseTimeResult(
        response_time_ms=round_half_up(response_time_ms),
        score=score_latency(response_time_ms, thresholds),
    )
