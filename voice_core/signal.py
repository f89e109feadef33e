"""Loudness primitives shared by every metric."""
from __future__ import annotations

import numpy as np

# Floor applied to RMS before taking the log, so silence maps to -100 dB
# instead of -inf.
RMS_FLOOR = 1e-5


def rms(samples: np.ndarray) -> float:
    """Root-mean-square amplitude of a slice (0.0 for an empty slice)."""
    if len(samples) == 0:
        return 0.0
    x = np.asarray(samples, dtype=np.float64)
    return float(np.sqrt(np.mean(x * x)))


def segment_db(samples: np.ndarray) -> float:
    """Loudness of a slice in dB: ``20 * log10(max(rms, 1e-5))``."""
    return float(20.0 * np.log10(max(rms(samples), RMS_FLOOR)))


def window_starts(n_samples: int, window: int, hop: int) -> range:
    """Start offsets of full windows; the trailing partial window is dropped.

    Windows start at 0, hop, 2*hop, ... while ``start < n_samples - window``.
    """
    if window <= 0 or hop <= 0:
        return range(0)
    return range(0, max(0, n_samples - window), hop)


def frame_db(samples: np.ndarray, window: int, hop: int) -> np.ndarray:
    """Per-window loudness in dB for the windows given by :func:`window_starts`."""
    starts = window_starts(len(samples), window, hop)
    out = np.empty(len(starts), dtype=np.float64)
    for i, start in enumerate(starts):
        out[i] = segment_db(samples[start:start + window])
    return out
