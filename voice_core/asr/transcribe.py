"""Client for the remote speech-to-text service."""
from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from ..errors import TranscriptionError

# Configuration for the external transcription service
TRANSCRIBE_SERVICE_URL = os.getenv("VOICE_TRANSCRIBE_URL", "http://localhost:8000/transcribe")
TRANSCRIBE_TIMEOUT = float(os.getenv("VOICE_TRANSCRIBE_TIMEOUT", "30"))


def _non_negative(data: Dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    if value is None:
        return None
    number = float(value)
    if not math.isfinite(number) or number < 0:
        raise ValueError(f"{key}={value!r} is not a non-negative finite number")
    return number


@dataclass(frozen=True)
class Transcription:
    transcript: str
    word_count: int
    words_per_minute: Optional[float] = None
    duration: Optional[float] = None
    confidence: Optional[float] = None


def parse_transcription(data: Dict[str, Any]) -> Transcription:
    """Build a Transcription from the service's JSON body.

    The service reports ``wordCount`` and usually ``wordsPerMinute``; when the
    word count is missing it is taken from the ``words`` list, then from the
    transcript itself. Non-finite or negative rates and durations are
    rejected.
    """
    if not isinstance(data, dict):
        raise TranscriptionError(f"unexpected response body: {type(data).__name__}")
    if data.get("error"):
        raise TranscriptionError(str(data["error"]))

    transcript = str(data.get("transcript") or data.get("text") or "").strip()
    try:
        if data.get("wordCount") is not None:
            word_count = int(data["wordCount"])
        elif isinstance(data.get("words"), list):
            word_count = len(data["words"])
        else:
            word_count = len(transcript.split())

        if word_count < 0:
            raise ValueError(f"wordCount={word_count} is negative")

        confidence = data.get("confidence")
        return Transcription(
            transcript=transcript,
            word_count=word_count,
            words_per_minute=_non_negative(data, "wordsPerMinute"),
            duration=_non_negative(data, "duration"),
            confidence=float(confidence) if confidence is not None else None,
        )
    except (TypeError, ValueError, OverflowError) as e:
        raise TranscriptionError(f"malformed transcription response: {e}") from e


class TranscriptionClient:
    """Posts recorded audio to the transcription service.

    Every failure (timeout, connection error, non-2xx status, unreadable
    body) raises :class:`TranscriptionError`; nothing is silently mapped to
    an empty transcript.
    """

    def __init__(self, url: str = TRANSCRIBE_SERVICE_URL, timeout: float = TRANSCRIBE_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def transcribe(self, audio: bytes, content_type: str = "audio/webm") -> Transcription:
        if not audio:
            raise TranscriptionError("no audio provided")

        files = {"audio": ("recording", audio, content_type)}
        try:
            response = self.session.post(self.url, files=files, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise TranscriptionError(f"transcription timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise TranscriptionError(f"could not reach transcription service: {e}") from e

        if not 200 <= response.status_code < 300:
            raise TranscriptionError(
                f"transcription service returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TranscriptionError(f"transcription response is not JSON: {e}") from e
        return parse_transcription(data)
