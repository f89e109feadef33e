"""Average loudness metric."""
from __future__ import annotations

import numpy as np

from ..config.definitions import Thresholds
from ..models.results import VolumeResult
from ..signal import segment_db
from .scale import clamp_score, linear_score


def score_volume(average_db: float, thresholds: Thresholds) -> int:
    """0 below ``min``, 100 at or above ``ideal``, linear in between."""
    if average_db < thresholds.min:
        return 0
    if average_db >= thresholds.ideal:
        return 100
    return clamp_score(linear_score(average_db, thresholds.min, thresholds.ideal))


def calculate_volume(samples: np.ndarray, thresholds: Thresholds) -> VolumeResult:
    average_db = segment_db(samples)
    return VolumeResult(average_db=average_db, score=score_volume(average_db, thresholds))
