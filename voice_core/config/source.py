"""HTTP source for the scoring_config table."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from ..errors import ConfigurationUnavailable
from .rules import CONFIG_FETCH_TIMEOUT, CONFIG_SOURCE_API_KEY, CONFIG_SOURCE_URL


class HttpConfigSource:
    """Reads metric rows from a Supabase-style REST endpoint.

    The endpoint must return a JSON array of objects with ``metric_name``,
    ``weight`` and optional ``min_value``/``max_value``/``method`` fields.
    """

    def __init__(self, url: str, api_key: str = "", timeout: float = CONFIG_FETCH_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def __call__(self) -> List[Dict[str, Any]]:
        try:
            response = self.session.get(
                self.url,
                params={"select": "*"},
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise ConfigurationUnavailable(f"config fetch failed: {e}") from e
        except ValueError as e:
            raise ConfigurationUnavailable(f"config response is not JSON: {e}") from e

        if not isinstance(data, list):
            raise ConfigurationUnavailable(f"expected a list of rows, got {type(data).__name__}")
        return data


def source_from_env() -> Optional[HttpConfigSource]:
    """Build the config source from VOICE_CONFIG_URL, or None when unset."""
    if not CONFIG_SOURCE_URL:
        return None
    return HttpConfigSource(CONFIG_SOURCE_URL, CONFIG_SOURCE_API_KEY)
