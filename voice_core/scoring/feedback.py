"""Human-readable improvement hints."""
from __future__ import annotations

from typing import List

from ..models.results import (
    AccelerationResult,
    PauseManagementResult,
    ResponseTimeResult,
    SpeechRateResult,
    VolumeResult,
)

# A metric below this score gets a targeted hint
HINT_SCORE_THRESHOLD = 60

QUIET_DB = -30.0
LOUD_DB = -10.0
SLOW_WPM = 100
FAST_WPM = 200
MANY_PAUSES = 3
LONG_PAUSE_SECONDS = 2.0


def generate_feedback(
    volume: VolumeResult,
    speech_rate: SpeechRateResult,
    pause_management: PauseManagementResult,
    response_time: ResponseTimeResult,
    acceleration: AccelerationResult,
    overall: int,
) -> List[str]:
    """One hint per weak metric, or a single encouragement if none is weak.

    Hints come out in the order volume, speech rate, pauses, latency,
    dynamics.
    """
    feedback: List[str] = []

    if volume.score < HINT_SCORE_THRESHOLD:
        if volume.average_db < QUIET_DB:
            feedback.append("Speak louder and closer to the microphone for better clarity.")
        elif volume.average_db > LOUD_DB:
            feedback.append("Your volume is good, but try to maintain consistent energy.")

    if speech_rate.score < HINT_SCORE_THRESHOLD:
        if speech_rate.words_per_minute < SLOW_WPM:
            feedback.append("Try to speak a bit faster to sound more natural and fluent.")
        elif speech_rate.words_per_minute > FAST_WPM:
            feedback.append("Slow down slightly - speaking too fast can reduce clarity.")

    if pause_management.score < HINT_SCORE_THRESHOLD:
        if pause_management.pause_count > MANY_PAUSES:
            feedback.append("Try to reduce pauses for smoother, more fluent speech.")
        elif pause_management.max_pause_duration > LONG_PAUSE_SECONDS:
            feedback.append("Keep pauses shorter to maintain speech flow and engagement.")

    if response_time.score < HINT_SCORE_THRESHOLD:
        feedback.append("Start speaking sooner after the prompt for better responsiveness.")

    if acceleration.score < HINT_SCORE_THRESHOLD and not acceleration.is_accelerating:
        feedback.append("Try to build energy as you speak - start steady and finish strong.")

    if not feedback:
        if overall >= 90:
            feedback.append("Excellent work! Your pronunciation and delivery are outstanding.")
        elif overall >= 70:
            feedback.append("Great job! Keep practicing to maintain this level of performance.")
        else:
            feedback.append("Good effort! Keep practicing to improve your scores.")

    return feedback
