from voice_core.config import MetricId, default_config
from voice_core.metrics import calculate_acceleration
from synth import PEAK_WINDOW, SR, concat, level, peak_train, silence

CONFIG = default_config()
VOLUME = CONFIG.get(MetricId.VOLUME).thresholds
RATE = CONFIG.get(MetricId.SPEECH_RATE).thresholds


def test_short_halves_are_neutral():
    result = calculate_acceleration(level(0.8), SR, VOLUME, RATE)
    assert result.score == 50
    assert result.is_accelerating is False
    assert result.segment1_volume == 0.0
    assert result.segment2_rate == 0
    assert result.tag == "DYNAMICS"


def test_flat_delivery():
    result = calculate_acceleration(level(2.0, 0.1), SR, VOLUME, RATE)
    assert result.segment1_volume == result.segment2_volume
    assert result.segment1_rate == result.segment2_rate == 0
    assert result.score == 10


def test_only_volume_rising():
    x = concat(level(1.0, 0.05), level(1.0, 0.2))
    result = calculate_acceleration(x, SR, VOLUME, RATE)
    assert result.segment2_volume > result.segment1_volume
    assert result.is_accelerating is False
    assert result.score == 30


def test_finishing_louder_and_faster():
    # 1 s with 2 soft peaks, then 1 s with 5 loud peaks
    x = concat(peak_train(2, 25, peak=0.1), peak_train(5, 10, peak=0.5))
    result = calculate_acceleration(x, SR, VOLUME, RATE)

    assert result.segment1_rate == 72
    assert result.segment2_rate == 180
    assert result.segment1_volume == -34.0
    assert result.segment2_volume == -16.0
    assert result.is_accelerating is True
    assert result.score == 100


def test_rising_below_targets_earns_partial_bonus():
    # half 1: two peaks at -40 dB overall; half 2: three peaks near -30 dB (108 wpm)
    first = peak_train(2, 25, peak=0.05)
    second = concat(peak_train(3, 16, peak=0.13), silence(2 * PEAK_WINDOW / SR))
    result = calculate_acceleration(concat(first, second), SR, VOLUME, RATE)

    assert result.is_accelerating is True
    assert result.segment1_rate == 72
    assert result.segment2_rate == 108
    assert result.segment2_volume == -29.9
    # 50 + round((-29.94 + 40) / 20 * 25) + round(108 / 150 * 25)
    assert result.score == 50 + 13 + 18
