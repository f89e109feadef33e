"""Exception types raised by the scoring engine."""
from __future__ import annotations

from typing import Optional


class VoiceCoreError(Exception):
    """Base class for all scoring engine errors."""


class InvalidAudioError(VoiceCoreError, ValueError):
    """The audio buffer cannot be scored (empty, bad sample rate, NaN samples)."""


class ConfigurationUnavailable(VoiceCoreError):
    """The scoring configuration could not be fetched or parsed.

    Never reaches callers of the engine: the config manager catches it and
    substitutes the default definitions.
    """


class TranscriptionError(VoiceCoreError):
    """The remote transcription service failed, timed out or returned garbage."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
