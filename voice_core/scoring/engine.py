"""Scoring entry points: run all five metrics and aggregate them."""
from __future__ import annotations

import warnings
from dataclasses import replace
from typing import Iterable, Optional, Union

import numpy as np

from ..asr.transcribe import TranscriptionClient
from ..audio import AudioBuffer
from ..config.cache import ConfigManager
from ..config.definitions import MetricDefinition, MetricId, ScoringConfig, SpeechRateMethod, default_config
from ..metrics.acceleration import calculate_acceleration
from ..metrics.latency import calculate_response_time
from ..metrics.pauses import calculate_pause_management
from ..metrics.speech_rate import (
    EnergyPeaksEstimator,
    RemoteTranscriptionEstimator,
    SpeechRateEstimator,
    ZeroCrossingRateEstimator,
    to_result,
)
from ..metrics.volume import calculate_volume
from ..models.results import AnalysisResult
from .aggregator import classify, overall_score
from .feedback import generate_feedback

Definitions = Union[ScoringConfig, Iterable[MetricDefinition]]


def _as_config(definitions: Definitions) -> ScoringConfig:
    if isinstance(definitions, ScoringConfig):
        return definitions
    merged = {d.id: d for d in default_config()}
    for definition in definitions:
        merged[definition.id] = definition
    return ScoringConfig(tuple(merged.values()))


def select_estimator(
    method: SpeechRateMethod,
    volume_db: float,
    audio: Optional[bytes] = None,
    content_type: str = "audio/webm",
    transcriber=None,
) -> SpeechRateEstimator:
    """Pick the estimator for the configured method.

    Remote transcription needs the recorded bytes; without them the
    energy-peak estimator is used instead.
    """
    if method is SpeechRateMethod.REMOTE_TRANSCRIPTION:
        if audio:
            if transcriber is None:
                transcriber = TranscriptionClient()
            return RemoteTranscriptionEstimator(transcriber, audio, content_type)
        warnings.warn("Remote transcription selected but no audio bytes given; using energy peaks.")
    elif method is SpeechRateMethod.ZERO_CROSSING_RATE:
        return ZeroCrossingRateEstimator()
    return EnergyPeaksEstimator(volume_db)


def analyze_with_definitions(
    definitions: Definitions,
    samples: Union[np.ndarray, AudioBuffer],
    sample_rate: Optional[int] = None,
    audio: Optional[bytes] = None,
    content_type: str = "audio/webm",
    transcriber=None,
) -> AnalysisResult:
    """Score one utterance against an explicit set of metric definitions.

    Args:
        definitions: A ScoringConfig, or any definitions to lay over the
            defaults (metrics left out keep their default definition).
        samples: Mono float samples in [-1, 1], or an AudioBuffer.
        sample_rate: Sample rate in Hz (ignored when given an AudioBuffer).
        audio: Raw recorded bytes, only used by remote transcription.
        content_type: MIME type of ``audio``.
        transcriber: Transcription client override.

    Raises:
        InvalidAudioError: empty buffer or bad sample rate.
    """
    buffer = samples if isinstance(samples, AudioBuffer) else AudioBuffer(samples, sample_rate)
    config = _as_config(definitions)
    x, sr = buffer.samples, buffer.sample_rate

    volume_thresholds = config.get(MetricId.VOLUME).thresholds
    rate_thresholds = config.get(MetricId.SPEECH_RATE).thresholds

    volume = calculate_volume(x, volume_thresholds)
    estimator = select_estimator(config.speech_rate_method, volume.average_db, audio, content_type, transcriber)
    speech_rate = to_result(estimator.estimate(x, sr, buffer.duration), rate_thresholds)
    acceleration = calculate_acceleration(x, sr, volume_thresholds, rate_thresholds)
    response_time = calculate_response_time(x, sr, config.get(MetricId.RESPONSE_LATENCY).thresholds)
    pause_management = calculate_pause_management(x, sr, config.get(MetricId.PAUSE_MANAGEMENT).thresholds)

    scores = {
        MetricId.VOLUME: volume.score,
        MetricId.SPEECH_RATE: speech_rate.score,
        MetricId.ACCELERATION: acceleration.score,
        MetricId.RESPONSE_LATENCY: response_time.score,
        MetricId.PAUSE_MANAGEMENT: pause_management.score,
    }
    overall = overall_score(scores, config)

    return AnalysisResult(
        volume=volume,
        speech_rate=speech_rate,
        acceleration=acceleration,
        response_time=response_time,
        pause_management=pause_management,
        overall_score=overall,
        emotional_feedback=classify(overall),
        feedback=tuple(generate_feedback(volume, speech_rate, pause_management, response_time, acceleration, overall)),
    )


class ScoringEngine:
    """Composes the config manager and the transcription client.

    Args:
        config_manager: Source of the active ScoringConfig. Defaults to a
            manager with no remote source (defaults only).
        transcriber: Client used when remote transcription is configured.
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None, transcriber=None):
        self.config_manager = config_manager or ConfigManager()
        self.transcriber = transcriber

    def analyze(self, samples, sample_rate=None, audio: Optional[bytes] = None,
                content_type: str = "audio/webm") -> AnalysisResult:
        """Score with a fresh configuration; may fetch config and call the STT service."""
        config = self.config_manager.get_config_fresh()
        return analyze_with_definitions(config, samples, sample_rate, audio, content_type, self.transcriber)

    def analyze_cached(self, samples, sample_rate=None) -> AnalysisResult:
        """Score with the cached configuration and local estimators only (no I/O).

        A configured remote transcription method falls back to energy peaks.
        """
        config = self.config_manager.get_config()
        if config.speech_rate_method is SpeechRateMethod.REMOTE_TRANSCRIPTION:
            config = _with_method(config, SpeechRateMethod.ENERGY_PEAKS)
        return analyze_with_definitions(config, samples, sample_rate)


def _with_method(config: ScoringConfig, method: SpeechRateMethod) -> ScoringConfig:
    speech = replace(config.get(MetricId.SPEECH_RATE), method=method)
    return ScoringConfig(tuple(speech if d.id is MetricId.SPEECH_RATE else d for d in config))
