from dataclasses import replace

import pytest

from voice_core.config import MetricId, ScoringConfig, default_config, rebalance_weights
from voice_core.models import (
    AccelerationResult,
    PauseManagementResult,
    ResponseTimeResult,
    SpeechRateResult,
    VolumeResult,
)
from voice_core.scoring import classify, generate_feedback, overall_score


def _scores(value):
    return {m: value for m in MetricId}


def _with_weights(weights):
    return ScoringConfig(tuple(replace(d, weight=w) for d, w in zip(default_config(), weights)))


# ============================================================================
# Overall score
# ============================================================================

def test_perfect_scores_with_default_weights():
    assert overall_score(_scores(100), default_config()) == 100


def test_weighted_sum():
    scores = {
        MetricId.VOLUME: 100,
        MetricId.SPEECH_RATE: 50,
        MetricId.ACCELERATION: 10,
        MetricId.RESPONSE_LATENCY: 0,
        MetricId.PAUSE_MANAGEMENT: 80,
    }
    # 20 + 12.5 + 2.5 + 0 + 12
    assert overall_score(scores, default_config()) == 47


def test_half_rounds_up():
    scores = {
        MetricId.VOLUME: 100,
        MetricId.SPEECH_RATE: 100,
        MetricId.ACCELERATION: 10,
        MetricId.RESPONSE_LATENCY: 100,
        MetricId.PAUSE_MANAGEMENT: 100,
    }
    # 20 + 25 + 2.5 + 15 + 15 = 77.5
    assert overall_score(scores, default_config()) == 78


def test_weights_are_not_normalised():
    # Weights totalling 50 cap the reachable score at 50
    assert overall_score(_scores(100), _with_weights([10.0] * 5)) == 50


def test_weights_above_100_are_capped():
    assert overall_score(_scores(100), _with_weights([30.0] * 5)) == 100


def test_rebalanced_weights_restore_full_range():
    config = rebalance_weights(_with_weights([10.0] * 5))
    assert overall_score(_scores(100), config) == 100


@pytest.mark.parametrize(
    "score, label",
    [(100, "excellent"), (71, "excellent"), (70, "good"), (41, "good"), (40, "poor"), (0, "poor")],
)
def test_classify(score, label):
    assert classify(score) == label


# ============================================================================
# Feedback
# ============================================================================

GOOD = dict(
    volume=VolumeResult(-18.0, 100),
    speech_rate=SpeechRateResult(150, 4.2, 100, "energy-peaks"),
    pause_management=PauseManagementResult(0, 0.0, 0.0, 100),
    response_time=ResponseTimeResult(100, 100),
    acceleration=AccelerationResult(100, -25.0, -18.0, 120, 160, True),
)


def test_all_strong_gives_one_encouragement():
    assert generate_feedback(overall=95, **GOOD) == [
        "Excellent work! Your pronunciation and delivery are outstanding."
    ]
    assert generate_feedback(overall=75, **GOOD)[0].startswith("Great job!")
    assert generate_feedback(overall=50, **GOOD)[0].startswith("Good effort!")


def test_weak_metrics_get_hints_in_order():
    results = dict(
        GOOD,
        volume=VolumeResult(-50.0, 0),
        speech_rate=SpeechRateResult(60, 1.7, 38, "energy-peaks"),
        response_time=ResponseTimeResult(2500, 0),
    )
    assert generate_feedback(overall=40, **results) == [
        "Speak louder and closer to the microphone for better clarity.",
        "Try to speak a bit faster to sound more natural and fluent.",
        "Start speaking sooner after the prompt for better responsiveness.",
    ]


def test_pause_and_dynamics_hints():
    results = dict(
        GOOD,
        pause_management=PauseManagementResult(5, 0.4, 0.6, 0),
        acceleration=AccelerationResult(10, -20.0, -20.0, 100, 100, False),
    )
    feedback = generate_feedback(overall=55, **results)
    assert feedback == [
        "Try to reduce pauses for smoother, more fluent speech.",
        "Try to build energy as you speak - start steady and finish strong.",
    ]


def test_weak_metric_outside_hint_ranges_gets_no_hint():
    # Low score but between the quiet and loud limits
    results = dict(GOOD, volume=VolumeResult(-25.0, 40))
    assert generate_feedback(overall=90, **results) == [
        "Excellent work! Your pronunciation and delivery are outstanding."
    ]
