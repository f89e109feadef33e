"""Speech-to-text proxy service (Deepgram)."""
