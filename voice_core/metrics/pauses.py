"""Pause management metric: silences between words after speech has started."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np

from ..config.definitions import Thresholds
from ..models.results import PauseManagementResult
from ..signal import segment_db, window_starts
from .rules import (
    MIN_PAUSE_DURATION,
    PAUSE_COUNT_PENALTY,
    PAUSE_LENGTH_PENALTY,
    PAUSE_WINDOW,
    SILENCE_THRESHOLD_DB,
    WARNING_PAUSE_PENALTY,
    WARNING_PAUSE_RATIO,
)
from .scale import clamp_score, round_half_up, round_to


@dataclass(frozen=True)
class Pause:
    start: float      # seconds
    duration: float   # seconds


def detect_pauses(samples: np.ndarray, sample_rate: int) -> List[Pause]:
    """Find silent runs of at least 150 ms that follow the first speech.

    Leading silence is never a pause, and a silent run still open when the
    buffer ends is trailing silence, not a pause.
    """
    window = max(1, int(PAUSE_WINDOW * sample_rate))
    pauses: List[Pause] = []
    speech_started = False
    pause_start = None

    for start in window_starts(len(samples), window, window):
        silent = segment_db(samples[start:start + window]) < SILENCE_THRESHOLD_DB
        if not silent:
            speech_started = True
        if not speech_started:
            continue

        now = start / sample_rate
        if silent and pause_start is None:
            pause_start = now
        elif not silent and pause_start is not None:
            duration = now - pause_start
            if duration >= MIN_PAUSE_DURATION:
                pauses.append(Pause(start=pause_start, duration=duration))
            pause_start = None

    return pauses


def score_pauses(pauses: List[Pause], thresholds: Thresholds) -> int:
    """Score a list of pauses against the configured limits.

    ``thresholds.min`` is the maximum pause count and ``thresholds.max`` the
    maximum pause duration in seconds. Exceeding either one scores 0.
    """
    if not pauses:
        return 100

    max_count = thresholds.min
    max_duration = thresholds.max
    longest = max(p.duration for p in pauses)
    if longest > max_duration or len(pauses) > max_count:
        return 0

    score = 100.0
    score -= len(pauses) / max_count * PAUSE_COUNT_PENALTY
    score -= round_half_up(longest / max_duration * PAUSE_LENGTH_PENALTY)
    warning_pauses = [p for p in pauses if p.duration > max_duration * WARNING_PAUSE_RATIO]
    score -= len(warning_pauses) * WARNING_PAUSE_PENALTY
    return clamp_score(score)


def calculate_pause_management(samples: np.ndarray, sample_rate: int, thresholds: Thresholds) -> PauseManagementResult:
    pauses = detect_pauses(samples, sample_rate)
    if not pauses:
        return PauseManagementResult(pause_count=0, avg_pause_duration=0.0, max_pause_duration=0.0, score=100)

    durations = [p.duration for p in pauses]
    return PauseManagementResult(
        pause_count=len(pauses),
        avg_pause_duration=round_to(sum(durations) / len(durations), 2),
        max_pause_duration=round_to(max(durations), 2),
        score=score_pauses(pauses, thresholds),
    )
