"""Result data models returned by the metrics and the aggregator."""
from .results import (
    AccelerationResult,
    AnalysisResult,
    PauseManagementResult,
    ResponseTimeResult,
    SpeechRateResult,
    VolumeResult,
)

__all__ = [
    "AccelerationResult",
    "AnalysisResult",
    "PauseManagementResult",
    "ResponseTimeResult",
    "SpeechRateResult",
    "VolumeResult",
]
