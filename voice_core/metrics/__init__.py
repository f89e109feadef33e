"""Acoustic metrics computed from a mono sample buffer."""
from .acceleration import calculate_acceleration
from .latency import calculate_response_time, detect_speech_onset, score_latency
from .pauses import Pause, calculate_pause_management, detect_pauses, score_pauses
from .speech_rate import (
    EnergyPeaksEstimator,
    RateEstimate,
    RemoteTranscriptionEstimator,
    SpeechRateEstimator,
    ZeroCrossingRateEstimator,
    calculate_speech_rate,
    detect_energy_peaks,
    detect_zcr_syllables,
    peak_threshold,
    score_speech_rate,
)
from .volume import calculate_volume, score_volume

__all__ = [
    "calculate_acceleration",
    "calculate_response_time",
    "detect_speech_onset",
    "score_latency",
    "Pause",
    "calculate_pause_management",
    "detect_pauses",
    "score_pauses",
    "EnergyPeaksEstimator",
    "RateEstimate",
    "RemoteTranscriptionEstimator",
    "SpeechRateEstimator",
    "ZeroCrossingRateEstimator",
    "calculate_speech_rate",
    "detect_energy_peaks",
    "detect_zcr_syllables",
    "peak_threshold",
    "score_speech_rate",
    "calculate_volume",
    "score_volume",
]
