import base64
import binascii
import logging
import os
import re
from typing import Any, Dict, List, Optional

import requests
from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEEPGRAM_LISTEN_URL = os.getenv(
    "DEEPGRAM_LISTEN_URL",
    "https://api.deepgram.com/v1/listen?model=nova-2&language=en-US&smart_format=true"
    "&punctuate=true&filler_words=false&numerals=true",
)
DEEPGRAM_TIMEOUT = float(os.getenv("DEEPGRAM_TIMEOUT", "60"))
DEFAULT_MIME_TYPE = "audio/webm"

app = FastAPI(title="Voice Energy Transcription Service")


# --- Data Models ---
class TranscribeRequest(BaseModel):
    audio: str
    mimeType: Optional[str] = None


class TranscribeResponse(BaseModel):
    transcript: str
    confidence: float
    duration: float
    words: List[Dict[str, Any]]
    wordCount: int
    wordsPerMinute: int


def decode_base64_audio(data: str) -> bytes:
    """Decode base64 audio, tolerating a ``data:<mime>;base64,`` prefix."""
    normalized = re.sub(r"^data:[^;]+;base64,", "", data)
    return base64.b64decode(normalized, validate=True)


def summarize_deepgram(result: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce a Deepgram /listen response to transcript, word count and rate."""
    channels = (result.get("results") or {}).get("channels") or [{}]
    alternatives = channels[0].get("alternatives") or [{}]
    alt = alternatives[0]

    words = alt.get("words") or []
    duration = float((result.get("metadata") or {}).get("duration") or 0.0)
    word_count = len(words)
    return {
        "transcript": (alt.get("transcript") or "").strip(),
        "confidence": float(alt.get("confidence") or 0.0),
        "duration": duration,
        "words": words,
        "wordCount": word_count,
        "wordsPerMinute": int(round(word_count / duration * 60)) if duration > 0 else 0,
    }


def deepgram_transcribe(audio: bytes, mime_type: str) -> Dict[str, Any]:
    api_key = os.getenv("DEEPGRAM_API_KEY")
    if not api_key:
        raise HTTPException(status_code=500, detail="DEEPGRAM_API_KEY is not configured")

    try:
        response = requests.post(
            DEEPGRAM_LISTEN_URL,
            headers={"Authorization": f"Token {api_key}", "Content-Type": mime_type or DEFAULT_MIME_TYPE},
            data=audio,
            timeout=DEEPGRAM_TIMEOUT,
        )
    except requests.exceptions.RequestException as e:
        logger.error(f"Deepgram request failed: {e}")
        raise HTTPException(status_code=500, detail=f"Deepgram request failed: {e}")

    if not response.ok:
        logger.error(f"Deepgram API error: {response.status_code} {response.text[:500]}")
        raise HTTPException(status_code=500, detail=f"Deepgram API error: {response.status_code}")

    try:
        return summarize_deepgram(response.json())
    except (ValueError, AttributeError, TypeError) as e:
        raise HTTPException(status_code=500, detail=f"Unreadable Deepgram response: {e}")


# --- Endpoints ---

@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "deepgram_key": bool(os.getenv("DEEPGRAM_API_KEY")),
    }


@app.post("/transcribe", response_model=TranscribeResponse)
async def transcribe(request: Request):
    """
    Transcribe recorded audio with Deepgram.

    Accepts either multipart form data with an ``audio`` file, or JSON
    ``{"audio": <base64>, "mimeType": "audio/webm"}``.
    """
    content_type = request.headers.get("content-type", "")

    if "multipart/form-data" in content_type:
        form = await request.form()
        upload = form.get("audio")
        if upload is None or isinstance(upload, str):
            raise HTTPException(status_code=400, detail="No audio file provided")
        mime_type = upload.content_type or DEFAULT_MIME_TYPE
        audio = await upload.read()
    else:
        try:
            body = TranscribeRequest(**(await request.json()))
        except (ValueError, TypeError):
            raise HTTPException(status_code=400, detail="No audio data provided")
        mime_type = body.mimeType or DEFAULT_MIME_TYPE
        try:
            audio = decode_base64_audio(body.audio)
        except (binascii.Error, ValueError):
            raise HTTPException(status_code=400, detail="Audio is not valid base64")

    if not audio:
        raise HTTPException(status_code=400, detail="No audio data provided")

    logger.info(f"Transcribing {len(audio)} bytes ({mime_type})")
    return await run_in_threadpool(deepgram_transcribe, audio, mime_type)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
