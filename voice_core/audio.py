"""Audio buffer container and decoding helpers."""
from __future__ import annotations

import io
import math
import numbers
from dataclasses import dataclass, field
from typing import Sequence, Tuple, Union

import numpy as np
import soundfile as sf

from .errors import InvalidAudioError


@dataclass(frozen=True)
class AudioBuffer:
    """Mono PCM samples in [-1, 1] and their sample rate.

    The sample array is copied and marked read-only on construction so a
    buffer can be shared between metrics without anyone mutating it.
    """

    samples: np.ndarray = field(repr=False)
    sample_rate: int

    def __post_init__(self):
        samples, sample_rate = validate_audio(self.samples, self.sample_rate)
        object.__setattr__(self, "samples", samples)
        object.__setattr__(self, "sample_rate", sample_rate)

    @property
    def duration(self) -> float:
        return len(self.samples) / self.sample_rate

    def __len__(self) -> int:
        return len(self.samples)


def validate_audio(samples: Union[np.ndarray, Sequence[float]], sample_rate) -> Tuple[np.ndarray, int]:
    """Coerce samples to a read-only float32 vector and check the sample rate.

    Raises:
        InvalidAudioError: empty or multi-dimensional buffer, non-finite
            samples, or a sample rate that is not a positive integer.
    """
    if isinstance(sample_rate, bool) or not isinstance(sample_rate, numbers.Real):
        raise InvalidAudioError(f"sample rate must be a number, got {type(sample_rate).__name__}")
    if not math.isfinite(sample_rate) or sample_rate != int(sample_rate) or sample_rate <= 0:
        raise InvalidAudioError(f"sample rate must be a positive integer, got {sample_rate}")

    try:
        arr = np.array(samples, dtype=np.float32)
    except (TypeError, ValueError) as e:
        raise InvalidAudioError(f"samples are not numeric: {e}") from e
    if arr.ndim != 1:
        raise InvalidAudioError(f"expected a mono 1-D buffer, got shape {arr.shape}")
    if arr.size == 0:
        raise InvalidAudioError("audio buffer is empty")
    if not np.all(np.isfinite(arr)):
        raise InvalidAudioError("audio buffer contains NaN or infinite samples")

    arr.setflags(write=False)
    return arr, int(sample_rate)


def read_audio_mono(source: Union[str, bytes]) -> AudioBuffer:
    """
    Decode a WAV/FLAC/OGG file (path or raw bytes) into a mono AudioBuffer.

    Integer PCM is scaled to float32 in [-1, 1]; multi-channel audio is
    averaged down to one channel.
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    try:
        y, sr = sf.read(source, dtype="float32", always_2d=False)
    except RuntimeError as e:
        raise InvalidAudioError(f"could not decode audio: {e}") from e

    y = np.asarray(y)
    if y.ndim == 2:
        y = y.mean(axis=1)
    return AudioBuffer(y.astype(np.float32), int(sr))
