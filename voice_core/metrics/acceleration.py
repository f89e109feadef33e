"""Dynamics metric: does the speaker finish louder and faster than they start?"""
from __future__ import annotations

import numpy as np

from ..config.definitions import Thresholds
from ..models.results import AccelerationResult
from ..signal import segment_db
from .rules import (
    ACCELERATION_VOLUME_FLOOR_DB,
    FLAT_ACCELERATION_SCORE,
    MIN_SEGMENT_DURATION,
    NEUTRAL_ACCELERATION_SCORE,
    PARTIAL_ACCELERATION_SCORE,
)
from .scale import clamp_score, round_half_up, round_to
from .speech_rate import EnergyPeaksEstimator


def _segment_rate(segment: np.ndarray, sample_rate: int, volume_db: float) -> int:
    estimate = EnergyPeaksEstimator(volume_db).estimate(segment, sample_rate, len(segment) / sample_rate)
    return round_half_up(estimate.words_per_minute)


def calculate_acceleration(
    samples: np.ndarray,
    sample_rate: int,
    volume_thresholds: Thresholds,
    speech_rate_thresholds: Thresholds,
) -> AccelerationResult:
    """Compare the two halves of the buffer.

    Both volume and rate rising earns 50 plus up to 25 for the second half's
    volume reaching the ideal volume and up to 25 for its rate reaching the
    ideal rate. Only one rising earns 30, neither earns 10. Halves shorter
    than half a second get a neutral 50.

    The rate is always measured with the energy-peak estimator, whatever
    method is configured for the speech rate metric.
    """
    mid = len(samples) // 2
    first, second = samples[:mid], samples[mid:]
    min_len = sample_rate * MIN_SEGMENT_DURATION
    if len(first) < min_len or len(second) < min_len:
        return AccelerationResult(
            score=NEUTRAL_ACCELERATION_SCORE,
            segment1_volume=0.0,
            segment2_volume=0.0,
            segment1_rate=0,
            segment2_rate=0,
            is_accelerating=False,
        )

    volume1 = segment_db(first)
    volume2 = segment_db(second)
    rate1 = _segment_rate(first, sample_rate, volume1)
    rate2 = _segment_rate(second, sample_rate, volume2)

    volume_up = volume2 > volume1
    rate_up = rate2 > rate1
    is_accelerating = volume_up and rate_up

    target_db = volume_thresholds.ideal
    target_rate = speech_rate_thresholds.ideal

    if is_accelerating:
        score = NEUTRAL_ACCELERATION_SCORE
        if volume2 >= target_db:
            score += 25
        else:
            span = target_db - ACCELERATION_VOLUME_FLOOR_DB
            progress = max(0.0, (volume2 - ACCELERATION_VOLUME_FLOOR_DB) / span) if span > 0 else 0.0
            score += round_half_up(progress * 25)
        if rate2 >= target_rate:
            score += 25
        else:
            progress = max(0.0, rate2 / target_rate) if target_rate > 0 else 0.0
            score += round_half_up(min(1.0, progress) * 25)
    elif volume_up or rate_up:
        score = PARTIAL_ACCELERATION_SCORE
    else:
        score = FLAT_ACCELERATION_SCORE

    return AccelerationResult(
        score=clamp_score(score),
        segment1_volume=round_to(volume1, 1),
        segment2_volume=round_to(volume2, 1),
        segment1_rate=rate1,
        segment2_rate=rate2,
        is_accelerating=is_accelerating,
    )
