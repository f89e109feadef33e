import pytest

from voice_core.config import MetricId, default_config
from voice_core.metrics import calculate_response_time, detect_speech_onset, score_latency
from synth import SR, concat, level, silence

LATENCY = default_config().get(MetricId.RESPONSE_LATENCY).thresholds


@pytest.mark.parametrize(
    "ms, expected",
    [(0, 100), (200, 100), (350, 92), (1100, 50), (2000, 0), (2500, 0)],
)
def test_score_curve(ms, expected):
    assert score_latency(ms, LATENCY) == expected


def test_immediate_speech():
    result = calculate_response_time(level(1.0), SR, LATENCY)
    assert result.response_time_ms == 0
    assert result.score == 100
    assert result.tag == "READINESS"


def test_onset_is_start_of_first_loud_window():
    # 200 ms windows stepped by 50 ms: the window starting at 350 ms is the
    # first one that reaches into the speech at 500 ms
    x = concat(silence(0.5), level(1.0, 0.5))
    assert detect_speech_onset(x, SR) == pytest.approx(0.35)

    result = calculate_response_time(x, SR, LATENCY)
    assert result.response_time_ms == 350
    assert result.score == 92


def test_no_speech_uses_full_duration():
    result = calculate_response_time(silence(1.0), SR, LATENCY)
    assert result.response_time_ms == 1000
    assert result.score == 56
