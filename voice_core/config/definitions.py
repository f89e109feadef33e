"""Metric definitions: ids, thresholds, weights and the row merge logic."""
from __future__ import annotations

import math
import numbers
import warnings
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from ..errors import ConfigurationUnavailable
from .rules import DEFAULT_DEFINITIONS, DEFAULT_SPEECH_RATE_METHOD, METRIC_NAME_MAP


class MetricId(Enum):
    VOLUME = "volume"
    SPEECH_RATE = "speechRate"
    ACCELERATION = "acceleration"
    RESPONSE_LATENCY = "responseTime"
    PAUSE_MANAGEMENT = "pauseManagement"


class SpeechRateMethod(Enum):
    ENERGY_PEAKS = "energy-peaks"
    ZERO_CROSSING_RATE = "zero-crossing-rate"
    REMOTE_TRANSCRIPTION = "deepgram-stt"

    @classmethod
    def parse(cls, value: Any) -> "SpeechRateMethod":
        """Accept an enum member, its wire value or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.upper().replace("-", "_") == member.name:
                return member
        raise ValueError(f"unknown speech rate method: {value!r}")


@dataclass(frozen=True)
class Thresholds:
    min: float
    ideal: float
    max: float


@dataclass(frozen=True)
class MetricDefinition:
    """One metric's weight (a percentage, 0-100) and thresholds.

    Raises:
        ValueError: the weight or a threshold is not a finite number, or the
            weight is outside 0-100.
    """

    id: MetricId
    weight: float
    thresholds: Thresholds
    method: Optional[SpeechRateMethod] = None

    def __post_init__(self):
        values = (self.weight, self.thresholds.min, self.thresholds.ideal, self.thresholds.max)
        if not all(isinstance(v, numbers.Real) and not isinstance(v, bool) and math.isfinite(v) for v in values):
            raise ValueError(f"{self.id.value}: weight and thresholds must be finite numbers")
        if not 0 <= self.weight <= 100:
            raise ValueError(f"{self.id.value}: weight {self.weight} is outside 0-100")


# Internal id -> external table name, for writing rows back out
_EXTERNAL_NAMES = {internal: external for external, internal in METRIC_NAME_MAP.items()}


@dataclass(frozen=True)
class ScoringConfig:
    """One definition per MetricId, in MetricId declaration order.

    Immutable: a refresh builds a new ScoringConfig and swaps it in whole.
    """

    definitions: tuple

    def __post_init__(self):
        by_id = {d.id: d for d in self.definitions}
        missing = [m.value for m in MetricId if m not in by_id]
        if missing:
            raise ValueError(f"configuration is missing metrics: {missing}")
        object.__setattr__(self, "definitions", tuple(by_id[m] for m in MetricId))

    def __iter__(self) -> Iterator[MetricDefinition]:
        return iter(self.definitions)

    def __len__(self) -> int:
        return len(self.definitions)

    def get(self, metric_id: MetricId) -> MetricDefinition:
        for definition in self.definitions:
            if definition.id is metric_id:
                return definition
        raise KeyError(metric_id)

    def weight_fraction(self, metric_id: MetricId) -> float:
        return self.get(metric_id).weight / 100.0

    @property
    def speech_rate_method(self) -> SpeechRateMethod:
        return self.get(MetricId.SPEECH_RATE).method or SpeechRateMethod.ENERGY_PEAKS

    @property
    def total_weight(self) -> float:
        return sum(d.weight for d in self.definitions)

    def to_rows(self) -> List[Dict[str, Any]]:
        """Convert back to the external row shape (fractional weights).

        ``max_value`` carries the "good" target except for pauses, where it is
        the maximum pause duration.
        """
        rows = []
        for d in self.definitions:
            if d.id is MetricId.PAUSE_MANAGEMENT:
                max_value = d.thresholds.max
            else:
                max_value = d.thresholds.ideal
            row = {
                "metric_name": _EXTERNAL_NAMES[d.id.value],
                "weight": round(d.weight / 100.0, 4),
                "min_value": d.thresholds.min,
                "max_value": max_value,
            }
            if d.method is not None:
                row["method"] = d.method.value
            rows.append(row)
        return rows


def _default_method() -> SpeechRateMethod:
    try:
        return SpeechRateMethod.parse(DEFAULT_SPEECH_RATE_METHOD)
    except ValueError:
        warnings.warn(
            f"Ignoring unknown VOICE_SPEECH_RATE_METHOD={DEFAULT_SPEECH_RATE_METHOD!r}; using energy-peaks."
        )
        return SpeechRateMethod.ENERGY_PEAKS


def default_config() -> ScoringConfig:
    """Build the hard-coded fallback configuration."""
    definitions = []
    for metric in MetricId:
        entry = DEFAULT_DEFINITIONS[metric.value]
        method = None
        if metric is MetricId.SPEECH_RATE:
            method = _default_method()
        definitions.append(
            MetricDefinition(
                id=metric,
                weight=float(entry["weight"]),
                thresholds=Thresholds(*entry["thresholds"]),
                method=method,
            )
        )
    return ScoringConfig(tuple(definitions))


def _number(row: Mapping[str, Any], key: str) -> Optional[float]:
    value = row.get(key)
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationUnavailable(f"{key}={value!r} is not numeric") from e
    if not math.isfinite(number):
        raise ConfigurationUnavailable(f"{key}={value!r} is not finite")
    return number


def merge_rows(rows: Iterable[Mapping[str, Any]], base: Optional[ScoringConfig] = None) -> ScoringConfig:
    """Merge external config rows onto a base configuration, field by field.

    Each row looks like ``{"metric_name": "speech_rate", "weight": 0.25,
    "min_value": 80, "max_value": 150, "method": "energy-peaks"}``. Unknown
    metric names are ignored and metrics without a row keep their base
    definition. ``max_value`` is the external "good" target, so it feeds both
    ``ideal`` and ``max``.

    Raises:
        ConfigurationUnavailable: a row is not a mapping, holds a
            non-numeric value, or sets a weight outside 0-1.
    """
    if base is None:
        base = default_config()
    merged = {d.id: d for d in base}

    for row in rows:
        if not isinstance(row, Mapping):
            raise ConfigurationUnavailable(f"config row is not an object: {row!r}")
        internal = METRIC_NAME_MAP.get(str(row.get("metric_name", "")))
        if internal is None:
            continue
        metric = MetricId(internal)
        existing = merged[metric]

        weight = _number(row, "weight")
        min_value = _number(row, "min_value")
        max_value = _number(row, "max_value")

        method = existing.method
        if metric is MetricId.SPEECH_RATE and row.get("method"):
            try:
                method = SpeechRateMethod.parse(row["method"])
            except ValueError as e:
                raise ConfigurationUnavailable(str(e)) from e

        try:
            merged[metric] = replace(
                existing,
                weight=existing.weight if weight is None else weight * 100.0,
                thresholds=Thresholds(
                    min=existing.thresholds.min if min_value is None else min_value,
                    ideal=existing.thresholds.ideal if max_value is None else max_value,
                    max=existing.thresholds.max if max_value is None else max_value,
                ),
                method=method,
            )
        except ValueError as e:
            raise ConfigurationUnavailable(str(e)) from e

    return ScoringConfig(tuple(merged[m] for m in MetricId))


def rebalance_weights(config: ScoringConfig) -> ScoringConfig:
    """Scale weights so they total exactly 100 (integer percentages).

    Uses largest-remainder rounding so the result always sums to 100. A
    configuration whose weights are all zero is split evenly.
    """
    total = config.total_weight
    metrics = list(MetricId)
    if total <= 0:
        raw = [100.0 / len(metrics)] * len(metrics)
    else:
        raw = [config.get(m).weight * 100.0 / total for m in metrics]

    floors = [math.floor(w) for w in raw]
    remainder = 100 - sum(floors)
    order = sorted(range(len(raw)), key=lambda i: raw[i] - floors[i], reverse=True)
    for i in order[:remainder]:
        floors[i] += 1

    return ScoringConfig(
        tuple(replace(config.get(m), weight=float(w)) for m, w in zip(metrics, floors))
    )
