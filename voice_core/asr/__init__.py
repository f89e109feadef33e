"""Remote speech-to-text integration."""
from .transcribe import TranscriptionClient, Transcription, parse_transcription

__all__ = ["TranscriptionClient", "Transcription", "parse_transcription"]
