"""Per-metric results and the aggregate analysis result."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class VolumeResult:
    average_db: float
    score: int
    tag: str = field(default="ENERGY", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"averageDb": self.average_db, "score": self.score, "tag": self.tag}


@dataclass(frozen=True)
class SpeechRateResult:
    """Speech rate score plus the estimator that produced it.

    Attributes:
        words_per_minute: Estimated rate, rounded to an integer.
        syllables_per_second: Syllable (or word-equivalent) rate, one decimal.
        score: 0-100.
        method: Wire value of the estimator used ("energy-peaks", ...).
        transcript: Only set by the remote transcription estimator.
        error: Set when the remote transcription failed; the score is then 0.
    """
    words_per_minute: int
    syllables_per_second: float
    score: int
    method: str
    transcript: Optional[str] = None
    error: Optional[str] = None
    tag: str = field(default="FLUENCY", init=False)

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "wordsPerMinute": self.words_per_minute,
            "syllablesPerSecond": self.syllables_per_second,
            "score": self.score,
            "tag": self.tag,
            "method": self.method,
        }
        if self.transcript is not None:
            out["transcript"] = self.transcript
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class AccelerationResult:
    score: int
    segment1_volume: float
    segment2_volume: float
    segment1_rate: int
    segment2_rate: int
    is_accelerating: bool
    tag: str = field(default="DYNAMICS", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "segment1Volume": self.segment1_volume,
            "segment2Volume": self.segment2_volume,
            "segment1Rate": self.segment1_rate,
            "segment2Rate": self.segment2_rate,
            "isAccelerating": self.is_accelerating,
            "tag": self.tag,
        }


@dataclass(frozen=True)
class ResponseTimeResult:
    response_time_ms: int
    score: int
    tag: str = field(default="READINESS", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"responseTimeMs": self.response_time_ms, "score": self.score, "tag": self.tag}


@dataclass(frozen=True)
class PauseManagementResult:
    pause_count: int
    avg_pause_duration: float
    max_pause_duration: float
    score: int
    tag: str = field(default="FLUIDITY", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pauseCount": self.pause_count,
            "avgPauseDuration": self.avg_pause_duration,
            "maxPauseDuration": self.max_pause_duration,
            "score": self.score,
            "tag": self.tag,
        }


@dataclass(frozen=True)
class AnalysisResult:
    volume: VolumeResult
    speech_rate: SpeechRateResult
    acceleration: AccelerationResult
    response_time: ResponseTimeResult
    pause_management: PauseManagementResult
    overall_score: int
    emotional_feedback: str  # "excellent" | "good" | "poor"
    feedback: Tuple[str, ...]

    @property
    def metrics(self) -> Dict[str, int]:
        """Score-only view keyed by the external metric names."""
        return {
            "volume": self.volume.score,
            "speechRate": self.speech_rate.score,
            "pauses": self.pause_management.score,
            "latency": self.response_time.score,
            "endIntensity": self.acceleration.score,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "volume": self.volume.to_dict(),
            "speechRate": self.speech_rate.to_dict(),
            "acceleration": self.acceleration.to_dict(),
            "responseTime": self.response_time.to_dict(),
            "pauseManagement": self.pause_management.to_dict(),
            "overallScore": self.overall_score,
            "emotionalFeedback": self.emotional_feedback,
            "metrics": self.metrics,
            "feedback": list(self.feedback),
        }
