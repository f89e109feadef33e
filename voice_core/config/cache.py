"""Time-boxed configuration cache with fallback defaults."""
from __future__ import annotations

import threading
import time
import warnings
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple

from .definitions import ScoringConfig, default_config, merge_rows
from .rules import CONFIG_CACHE_TTL

ConfigSource = Callable[[], Iterable[Mapping[str, Any]]]


class ConfigManager:
    """Holds the last fetched ScoringConfig and refreshes it lazily.

    The cached value is a single ``(config, fetched_at)`` tuple that is
    replaced whole, so a reader sees either the old snapshot or the new one,
    never a mix. Refreshes are serialised by a lock; callers that were
    waiting on a refresh reuse its result instead of fetching again.

    Args:
        source: Callable returning external config rows, or None to always
            use the defaults.
        clock: Monotonic clock in seconds (injectable for tests).
        ttl: Seconds before a cached configuration is considered stale.
    """

    def __init__(
        self,
        source: Optional[ConfigSource] = None,
        clock: Callable[[], float] = time.monotonic,
        ttl: float = CONFIG_CACHE_TTL,
    ):
        self.source = source
        self.clock = clock
        self.ttl = ttl
        self._defaults = default_config()
        self._entry: Optional[Tuple[ScoringConfig, float]] = None
        self._lock = threading.Lock()

    def get_config(self) -> ScoringConfig:
        """Return the cached configuration without any I/O (defaults if empty)."""
        entry = self._entry
        if entry is None:
            return self._defaults
        return entry[0]

    def get_config_fresh(self) -> ScoringConfig:
        """Return the configuration, fetching from the source if the cache is stale."""
        entry = self._entry
        if entry is not None and not self._is_stale(entry):
            return entry[0]

        with self._lock:
            entry = self._entry
            if entry is not None and not self._is_stale(entry):
                return entry[0]
            config = self._fetch()
            self._entry = (config, self.clock())
            return config

    @property
    def last_fetch_time(self) -> Optional[float]:
        entry = self._entry
        return None if entry is None else entry[1]

    def _is_stale(self, entry: Tuple[ScoringConfig, float]) -> bool:
        return self.clock() - entry[1] > self.ttl

    def _fetch(self) -> ScoringConfig:
        if self.source is None:
            return self._defaults
        try:
            rows = list(self.source())
            if not rows:
                return self._defaults
            return merge_rows(rows, self._defaults)
        except Exception as e:
            warnings.warn(f"Scoring config unavailable ({e}); using default configuration.")
            return self._defaults
