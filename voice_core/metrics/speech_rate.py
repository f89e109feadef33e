"""Speech rate metric with three interchangeable estimators.

Every estimator reduces the utterance to a words-per-minute figure through
the same ``estimate(samples, sample_rate, duration)`` call; the score curve
applied afterwards is shared.

- EnergyPeaksEstimator: local maxima of 20 ms loudness windows, with a
  detection threshold that follows the overall volume.
- ZeroCrossingRateEstimator: voiced runs found from frame energy plus
  zero-crossing rate, one syllable per run.
- RemoteTranscriptionEstimator: word count from a speech-to-text service.
"""
from __future__ import annotations

import math
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ..config.definitions import SpeechRateMethod, Thresholds
from ..errors import TranscriptionError
from ..models.results import SpeechRateResult
from ..signal import frame_db, rms, segment_db, window_starts
from .rules import (
    LOUD_PEAK_THRESHOLD_DB,
    LOUD_VOLUME_DB,
    MIN_RATE_DURATION,
    PEAK_MIN_SPACING,
    PEAK_WINDOW,
    PEAK_WORDS_PER_SYLLABLE,
    QUIET_PEAK_MARGIN_DB,
    QUIET_VOLUME_DB,
    ZCR_ENERGY_RATIO,
    ZCR_FRAME,
    ZCR_HOP,
    ZCR_MIN_SPACING,
    ZCR_SYLLABLES_PER_WORD,
    ZCR_VOICED_RANGE,
)
from .scale import clamp_score, round_half_up, round_to

TRANSCRIPTION_ERROR_MARKER = "Error: Could not transcribe audio"


@dataclass(frozen=True)
class RateEstimate:
    words_per_minute: float
    syllables_per_second: float
    method: SpeechRateMethod
    transcript: Optional[str] = None
    error: Optional[str] = None


class SpeechRateEstimator(ABC):
    """Common contract of the speech rate estimators."""

    method: SpeechRateMethod

    @abstractmethod
    def estimate(self, samples: np.ndarray, sample_rate: int, duration: float) -> RateEstimate:
        pass


def peak_threshold(volume_db: float) -> float:
    """Loudness a window must exceed to count as a syllable peak.

    Loud recordings use a fixed -30 dB; very quiet ones use volume + 5 dB;
    in between the two regimes are blended linearly.
    """
    if volume_db >= LOUD_VOLUME_DB:
        return LOUD_PEAK_THRESHOLD_DB
    quiet = volume_db + QUIET_PEAK_MARGIN_DB
    if volume_db < QUIET_VOLUME_DB:
        return quiet
    position = (volume_db - QUIET_VOLUME_DB) / (LOUD_VOLUME_DB - QUIET_VOLUME_DB)
    return quiet + position * (LOUD_PEAK_THRESHOLD_DB - quiet)


def detect_energy_peaks(samples: np.ndarray, sample_rate: int, volume_db: float) -> List[int]:
    """Indices of the 20 ms windows that are syllable peaks."""
    window = max(1, int(PEAK_WINDOW * sample_rate))
    min_distance = int(PEAK_MIN_SPACING * sample_rate / window)
    threshold = peak_threshold(volume_db)
    levels = frame_db(samples, window, window)

    peaks: List[int] = []
    last_peak = -min_distance
    for i in range(1, len(levels) - 1):
        if (
            i - last_peak >= min_distance
            and levels[i] > threshold
            and levels[i] > levels[i - 1]
            and levels[i] > levels[i + 1]
        ):
            peaks.append(i)
            last_peak = i
    return peaks


def detect_zcr_syllables(samples: np.ndarray, sample_rate: int) -> List[int]:
    """Midpoint frame index of every voiced run (25 ms frames, 10 ms hop)."""
    frame = max(1, int(ZCR_FRAME * sample_rate))
    hop = max(1, int(ZCR_HOP * sample_rate))
    min_distance = int(ZCR_MIN_SPACING * sample_rate / hop)
    starts = window_starts(len(samples), frame, hop)
    if len(starts) == 0:
        return []

    zcr = np.empty(len(starts))
    energy = np.empty(len(starts))
    for i, start in enumerate(starts):
        chunk = samples[start:start + frame]
        negative = chunk < 0
        zcr[i] = np.count_nonzero(negative[1:] != negative[:-1]) / frame
        energy[i] = rms(chunk)

    energy_threshold = energy.max() * ZCR_ENERGY_RATIO
    low, high = ZCR_VOICED_RANGE
    voiced = (energy > energy_threshold) & (zcr > low) & (zcr < high)

    syllables: List[int] = []
    run_start = None
    for i, is_voiced in enumerate(voiced):
        if is_voiced and run_start is None:
            run_start = i
        elif not is_voiced and run_start is not None:
            mid = (run_start + i) // 2
            run_start = None
            if not syllables or mid - syllables[-1] >= min_distance:
                syllables.append(mid)
    return syllables


class EnergyPeaksEstimator(SpeechRateEstimator):
    """Syllable count from loudness peaks.

    Args:
        volume_db: Overall loudness of the buffer if already measured;
            computed from the samples otherwise.
    """

    method = SpeechRateMethod.ENERGY_PEAKS

    def __init__(self, volume_db: Optional[float] = None):
        self.volume_db = volume_db

    def estimate(self, samples, sample_rate, duration):
        volume_db = self.volume_db if self.volume_db is not None else segment_db(samples)
        peaks = detect_energy_peaks(samples, sample_rate, volume_db)
        sps = len(peaks) / max(duration, MIN_RATE_DURATION)
        return RateEstimate(sps * 60 * PEAK_WORDS_PER_SYLLABLE, sps, self.method)


class ZeroCrossingRateEstimator(SpeechRateEstimator):
    method = SpeechRateMethod.ZERO_CROSSING_RATE

    def estimate(self, samples, sample_rate, duration):
        syllables = detect_zcr_syllables(samples, sample_rate)
        sps = len(syllables) / max(duration, MIN_RATE_DURATION)
        return RateEstimate(sps * 60 / ZCR_SYLLABLES_PER_WORD, sps, self.method)


class RemoteTranscriptionEstimator(SpeechRateEstimator):
    """Word rate reported by a speech-to-text service.

    A failed transcription is not replaced by a local estimate: the estimate
    comes back at 0 wpm with ``error`` set, and the caller decides whether to
    retry.

    Args:
        transcriber: Object with ``transcribe(audio, content_type)`` returning
            a :class:`~voice_core.asr.transcribe.Transcription`.
        audio: Raw encoded audio bytes as recorded.
        content_type: MIME type of ``audio``.
    """

    method = SpeechRateMethod.REMOTE_TRANSCRIPTION

    def __init__(self, transcriber, audio: bytes, content_type: str = "audio/webm"):
        self.transcriber = transcriber
        self.audio = audio
        self.content_type = content_type

    def _failed(self, error: str) -> RateEstimate:
        warnings.warn(f"Transcription failed, speech rate scored 0: {error}")
        return RateEstimate(0.0, 0.0, self.method, transcript=TRANSCRIPTION_ERROR_MARKER, error=error)

    def estimate(self, samples, sample_rate, duration):
        try:
            result = self.transcriber.transcribe(self.audio, self.content_type)
        except TranscriptionError as e:
            return self._failed(str(e))

        wpm = result.words_per_minute
        if wpm is None:
            spoken = result.duration or duration
            wpm = result.word_count / spoken * 60 if spoken > 0 else 0.0
        wpm = float(wpm)
        if not math.isfinite(wpm) or wpm < 0:
            return self._failed(f"unusable word rate from transcription: {wpm}")
        return RateEstimate(wpm, wpm / 60 / PEAK_WORDS_PER_SYLLABLE, self.method, transcript=result.transcript)


def score_speech_rate(words_per_minute: float, thresholds: Thresholds) -> int:
    """100 at or above ``ideal``; up to 50 below ``min``; 50-100 in between."""
    if words_per_minute >= thresholds.ideal:
        return 100
    if words_per_minute < thresholds.min:
        score = max(0.0, words_per_minute / thresholds.min * 50)
    else:
        score = 50 + (words_per_minute - thresholds.min) / (thresholds.ideal - thresholds.min) * 50
    return clamp_score(score)


def to_result(estimate: RateEstimate, thresholds: Thresholds) -> SpeechRateResult:
    score = 0 if estimate.error else score_speech_rate(estimate.words_per_minute, thresholds)
    return SpeechRateResult(
        words_per_minute=round_half_up(estimate.words_per_minute),
        syllables_per_second=round_to(estimate.syllables_per_second, 1),
        score=score,
        method=estimate.method.value,
        transcript=estimate.transcript,
        error=estimate.error,
    )


def calculate_speech_rate(
    samples: np.ndarray,
    sample_rate: int,
    thresholds: Thresholds,
    estimator: Optional[SpeechRateEstimator] = None,
) -> SpeechRateResult:
    """Estimate and score the speech rate (EnergyPeaks unless told otherwise)."""
    if estimator is None:
        estimator = EnergyPeaksEstimator()
    duration = len(samples) / sample_rate
    return to_result(estimator.estimate(samples, sample_rate, duration), thresholds)
