from dataclasses import replace
from unittest.mock import Mock

import numpy as np
import pytest

from voice_core import (
    AudioBuffer,
    ConfigManager,
    ConfigurationUnavailable,
    InvalidAudioError,
    MetricDefinition,
    MetricId,
    ScoringEngine,
    SpeechRateMethod,
    Thresholds,
    analyze_with_definitions,
)
from voice_core.asr import Transcription, TranscriptionClient
from voice_core.config import default_config, merge_rows
from voice_core.metrics import EnergyPeaksEstimator, RemoteTranscriptionEstimator, ZeroCrossingRateEstimator
from voice_core.scoring import select_estimator
from synth import SR, concat, level, peak_train, silence


class FakeTranscriber:
    def __init__(self, words_per_minute=150.0):
        self.words_per_minute = words_per_minute
        self.calls = 0

    def transcribe(self, audio, content_type="audio/webm"):
        self.calls += 1
        return Transcription("one two three", 3, words_per_minute=self.words_per_minute)


def _rows_source(*rows):
    return lambda: list(rows)


def _steady_speech():
    # 2.4 s at -20 dB with one louder 20 ms burst every 240 ms: 10 peaks
    return peak_train(10, 12, peak=0.4, base=0.1)


# ============================================================================
# End-to-end scenarios
# ============================================================================

def test_all_zero_buffer():
    result = analyze_with_definitions(default_config(), silence(2.0), SR)
    assert result.volume.score == 0
    assert result.pause_management.score == 100
    assert result.pause_management.pause_count == 0
    assert result.response_time.response_time_ms == 2000
    assert result.response_time.score == 0
    assert result.speech_rate.words_per_minute == 0
    assert result.emotional_feedback == "poor"


def test_steady_speech_at_ideal_rate():
    result = analyze_with_definitions(default_config(), _steady_speech(), SR)
    assert result.volume.score == 100
    assert result.speech_rate.words_per_minute == 150
    assert result.speech_rate.score == 100
    assert result.pause_management.score == 100
    assert result.response_time.response_time_ms == 0
    assert result.response_time.score == 100
    # identical halves: neither louder nor faster
    assert result.acceleration.score == 10
    assert result.overall_score == 78
    assert result.emotional_feedback == "excellent"


def test_three_second_pause_forces_zero():
    parts = [level(0.5)]
    for gap in (0.3, 0.3, 0.3, 3.0):
        parts += [silence(gap), level(0.5)]
    result = analyze_with_definitions(default_config(), concat(*parts), SR)
    assert result.pause_management.pause_count == 4
    assert result.pause_management.max_pause_duration == 3.0
    assert result.pause_management.score == 0


def test_partial_definitions_keep_defaults():
    strict = MetricDefinition(MetricId.VOLUME, 20.0, Thresholds(-10.0, -5.0, 0.0))
    result = analyze_with_definitions([strict], level(1.0, 0.1), SR)
    assert result.volume.score == 0
    assert result.pause_management.score == 100


def test_invalid_audio_raises():
    with pytest.raises(InvalidAudioError):
        analyze_with_definitions(default_config(), [], SR)
    with pytest.raises(InvalidAudioError):
        analyze_with_definitions(default_config(), level(1.0), 0)


def test_result_serialises():
    data = analyze_with_definitions(default_config(), AudioBuffer(_steady_speech(), SR), None).to_dict()
    assert set(data) == {
        "volume", "speechRate", "acceleration", "responseTime", "pauseManagement",
        "overallScore", "emotionalFeedback", "metrics", "feedback",
    }
    assert data["metrics"] == {
        "volume": 100, "speechRate": 100, "pauses": 100, "latency": 100, "endIntensity": 10,
    }
    assert data["speechRate"]["method"] == "energy-peaks"
    assert isinstance(data["feedback"], list) and data["feedback"]


# ============================================================================
# Estimator selection
# ============================================================================

def test_select_estimator():
    assert isinstance(select_estimator(SpeechRateMethod.ENERGY_PEAKS, -20.0), EnergyPeaksEstimator)
    assert isinstance(select_estimator(SpeechRateMethod.ZERO_CROSSING_RATE, -20.0), ZeroCrossingRateEstimator)
    remote = select_estimator(SpeechRateMethod.REMOTE_TRANSCRIPTION, -20.0, b"audio", transcriber=FakeTranscriber())
    assert isinstance(remote, RemoteTranscriptionEstimator)


def test_remote_without_audio_falls_back_to_energy_peaks():
    with pytest.warns(UserWarning, match="no audio bytes"):
        estimator = select_estimator(SpeechRateMethod.REMOTE_TRANSCRIPTION, -20.0)
    assert isinstance(estimator, EnergyPeaksEstimator)


def test_configured_method_reaches_result():
    source = _rows_source({"metric_name": "speech_rate", "method": "zero-crossing-rate"})
    engine = ScoringEngine(ConfigManager(source))
    result = engine.analyze(_steady_speech(), SR)
    assert result.speech_rate.method == "zero-crossing-rate"


def test_remote_transcription_through_engine():
    transcriber = FakeTranscriber(words_per_minute=150.0)
    source = _rows_source({"metric_name": "speech_rate", "method": "deepgram-stt"})
    engine = ScoringEngine(ConfigManager(source), transcriber)

    result = engine.analyze(_steady_speech(), SR, audio=b"RIFF....", content_type="audio/wav")
    assert transcriber.calls == 1
    assert result.speech_rate.method == "deepgram-stt"
    assert result.speech_rate.transcript == "one two three"
    assert result.speech_rate.score == 100


def test_analyze_cached_stays_local():
    transcriber = FakeTranscriber()
    source = _rows_source({"metric_name": "speech_rate", "method": "deepgram-stt"})
    engine = ScoringEngine(ConfigManager(source), transcriber)
    engine.config_manager.get_config_fresh()

    result = engine.analyze_cached(_steady_speech(), SR)
    assert transcriber.calls == 0
    assert result.speech_rate.method == "energy-peaks"


# ============================================================================
# Configuration failures
# ============================================================================

def test_config_failure_still_scores_with_defaults():
    def broken():
        raise ConfigurationUnavailable("503 from config table")

    engine = ScoringEngine(ConfigManager(broken))
    with pytest.warns(UserWarning, match="503 from config table"):
        result = engine.analyze(_steady_speech(), SR)

    assert result.overall_score == 78
    assert result.speech_rate.method == "energy-peaks"


def test_config_weights_flow_into_overall():
    rows = [
        {"metric_name": "volume", "weight": 1.0},
        {"metric_name": "speech_rate", "weight": 0},
        {"metric_name": "end_intensity", "weight": 0},
        {"metric_name": "latency", "weight": 0},
        {"metric_name": "pauses", "weight": 0},
    ]
    engine = ScoringEngine(ConfigManager(_rows_source(*rows)))
    assert engine.analyze(level(1.0, 0.2), SR).overall_score == 100
    assert engine.analyze(silence(1.0), SR).overall_score == 0


def test_engine_with_replaced_definition():
    config = default_config()
    lenient = replace(config.get(MetricId.RESPONSE_LATENCY), thresholds=Thresholds(5000.0, 1500.0, 6000.0))
    result = analyze_with_definitions([lenient], concat(silence(1.0), level(1.0)), SR)
    assert result.response_time.score == 100


def test_invalid_definition_rejected_before_scoring():
    volume = default_config().get(MetricId.VOLUME)
    with pytest.raises(ValueError):
        analyze_with_definitions([replace(volume, weight=float("nan"))], level(1.0), SR)
    with pytest.raises(ValueError):
        analyze_with_definitions([replace(volume, weight=150.0)], level(1.0), SR)


# ============================================================================
# Score ranges
# ============================================================================

ZCR_CONFIG = merge_rows([{"metric_name": "speech_rate", "method": "zero-crossing-rate"}])


@pytest.mark.parametrize("config", [default_config(), ZCR_CONFIG], ids=["energy-peaks", "zero-crossing-rate"])
@pytest.mark.parametrize("amplitude", [0.01, 1.0, 3.0])
@pytest.mark.parametrize("length", [1, 100, 319, 8000, 40000])
def test_scores_are_bounded_integers(config, amplitude, length):
    rng = np.random.default_rng(length)
    samples = (amplitude * rng.uniform(-1.0, 1.0, length)).astype(np.float32)
    result = analyze_with_definitions(config, samples, SR)

    for score in list(result.metrics.values()) + [result.overall_score]:
        assert isinstance(score, int) and not isinstance(score, bool)
        assert 0 <= score <= 100
    assert result.emotional_feedback in ("excellent", "good", "poor")


def test_non_finite_rate_from_service_scores_zero():
    session = Mock()
    session.post.return_value = Mock(status_code=200, text="")
    session.post.return_value.json.return_value = {"transcript": "a b", "wordsPerMinute": float("nan")}
    transcriber = TranscriptionClient("http://stt.local/transcribe", session=session)
    source = _rows_source({"metric_name": "speech_rate", "method": "deepgram-stt"})
    engine = ScoringEngine(ConfigManager(source), transcriber)

    with pytest.warns(UserWarning, match="Transcription failed"):
        result = engine.analyze(_steady_speech(), SR, audio=b"RIFF....", content_type="audio/wav")
    assert result.speech_rate.score == 0
    assert result.speech_rate.words_per_minute == 0
    assert 0 <= result.overall_score <= 100
