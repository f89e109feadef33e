"""Weighted combination of the five metric scores."""
from __future__ import annotations

from typing import Mapping

from ..config.definitions import MetricId, ScoringConfig
from ..metrics.scale import round_half_up

EXCELLENT_MIN_SCORE = 71
GOOD_MIN_SCORE = 41


def overall_score(scores: Mapping[MetricId, int], config: ScoringConfig) -> int:
    """``round(sum(score * weight / 100))`` capped at 100.

    Weights are used as configured. They are not normalised, so weights that
    sum below 100 lower the best reachable score and weights above 100 are
    absorbed by the cap.
    """
    total = sum(scores[m] * config.weight_fraction(m) for m in MetricId)
    return max(0, min(100, round_half_up(total)))


def classify(score: int) -> str:
    """Map an overall score to "excellent", "good" or "poor"."""
    if score >= EXCELLENT_MIN_SCORE:
        return "excellent"
    if score >= GOOD_MIN_SCORE:
        return "good"
    return "poor"
