# src/sources/increases_client.py

"""Pass-through client for the third-party price-increase predictions."""

from typing import Any

from src.sources.base_source import BaseSource
from src.storage.response_cache import ResponseCache

_CACHE_KEY = "increases"


class IncreasesClient(BaseSource):
    """Fetches the prediction payload, revalidated every 20 days."""

    def __init__(self, cache: ResponseCache | None = None) -> None:
        super().__init__("increases")
        self.cache = cache or ResponseCache(
            self.settings.INCREASES_REVALIDATE
        )

    def health_url(self) -> str:
        return self.settings.INCREASES_URL

    def fetch(self) -> Any:
        """Return the upstream JSON unchanged, served from cache when fresh."""
        cached = self.cache.get(_CACHE_KEY)
        if cached is not None:
            return cached

        resp = self._fetch_get(
            self.settings.INCREASES_URL,
            headers={"Content-Type": "application/json"},
        )
        data = self._decode_json(resp)
        self.cache.store(_CACHE_KEY, data)
        return data
