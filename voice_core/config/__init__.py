"""Scoring configuration: metric definitions, defaults and the TTL cache."""
from .cache import ConfigManager, ConfigSource
from .definitions import (
    MetricDefinition,
    MetricId,
    ScoringConfig,
    SpeechRateMethod,
    Thresholds,
    default_config,
    merge_rows,
    rebalance_weights,
)
from .rules import CONFIG_CACHE_TTL, DEFAULT_DEFINITIONS, METRIC_NAME_MAP
from .source import HttpConfigSource, source_from_env

__all__ = [
    "ConfigManager",
    "ConfigSource",
    "HttpConfigSource",
    "source_from_env",
    "MetricDefinition",
    "MetricId",
    "ScoringConfig",
    "SpeechRateMethod",
    "Thresholds",
    "default_config",
    "merge_rows",
    "rebalance_weights",
    "CONFIG_CACHE_TTL",
    "DEFAULT_DEFINITIONS",
    "METRIC_NAME_MAP",
]
