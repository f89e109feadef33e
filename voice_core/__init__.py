"""Voice energy scoring engine.

Grades a short spoken utterance on volume, speech rate, dynamics, response
latency and pause management, and combines them into one 0-100 score with
feedback.

Usage:
    from voice_core import ScoringEngine, read_audio_mono

    buffer = read_audio_mono("take.wav")
    result = ScoringEngine().analyze(buffer)
    print(result.overall_score, result.feedback)
"""
from .audio import AudioBuffer, read_audio_mono
from .config import ConfigManager, HttpConfigSource, MetricDefinition, MetricId, ScoringConfig, SpeechRateMethod, Thresholds
from .errors import ConfigurationUnavailable, InvalidAudioError, TranscriptionError, VoiceCoreError
from .models import AnalysisResult
from .scoring import ScoringEngine, analyze_with_definitions
from .signal import segment_db

__all__ = [
    "AudioBuffer",
    "read_audio_mono",
    "ConfigManager",
    "HttpConfigSource",
    "MetricDefinition",
    "MetricId",
    "ScoringConfig",
    "SpeechRateMethod",
    "Thresholds",
    "ConfigurationUnavailable",
    "InvalidAudioError",
    "TranscriptionError",
    "VoiceCoreError",
    "AnalysisResult",
    "ScoringEngine",
    "analyze_with_definitions",
    "segment_db",
]
