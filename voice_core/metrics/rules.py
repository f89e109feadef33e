"""Fixed detection constants for the acoustic metrics."""
from __future__ import annotations

# Anything quieter than this (dB) is silence for latency and pause detection
SILENCE_THRESHOLD_DB = -45.0

# Energy-peak syllable detection
PEAK_WINDOW = 0.02              # seconds per analysis window
PEAK_MIN_SPACING = 0.1          # seconds between accepted peaks
LOUD_VOLUME_DB = -10.0          # at or above: fixed peak threshold
QUIET_VOLUME_DB = -40.0         # below: threshold tracks the volume
LOUD_PEAK_THRESHOLD_DB = -30.0
QUIET_PEAK_MARGIN_DB = 5.0      # quiet threshold = volume + margin
PEAK_WORDS_PER_SYLLABLE = 0.6   # empirical syllable -> word correction

# Zero-crossing-rate syllable detection
ZCR_FRAME = 0.025
ZCR_HOP = 0.010
ZCR_MIN_SPACING = 0.08
ZCR_ENERGY_RATIO = 0.1          # voiced frames exceed this share of the peak energy
ZCR_VOICED_RANGE = (0.02, 0.35)
ZCR_SYLLABLES_PER_WORD = 1.5

# Lower bound on the duration used to turn counts into rates
MIN_RATE_DURATION = 0.1

# Acceleration (first half vs second half)
MIN_SEGMENT_DURATION = 0.5
NEUTRAL_ACCELERATION_SCORE = 50
PARTIAL_ACCELERATION_SCORE = 30
FLAT_ACCELERATION_SCORE = 10
ACCELERATION_VOLUME_FLOOR_DB = -40.0

# Response latency
SPEECH_ONSET_WINDOW = 0.2
SPEECH_ONSET_STEP = 0.05

# Pause management
PAUSE_WINDOW = 0.05
MIN_PAUSE_DURATION = 0.15
PAUSE_COUNT_PENALTY = 30
PAUSE_LENGTH_PENALTY = 40
WARNING_PAUSE_PENALTY = 10
WARNING_PAUSE_RATIO = 0.5       # share of the max duration that triggers a warning
