# src/storage/response_cache.py

"""In-memory TTL cache for upstream responses."""

import logging
import time
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger("naftas.cache")


@dataclass
class CacheEntry:
    """A cached upstream payload and the time it was stored."""

    key: str
    value: Any
    timestamp: float


class ResponseCache:
    """Keyed cache whose entries expire ``ttl`` seconds after storage.

    Expired entries are evicted lazily on every lookup.
    """

    def __init__(self, ttl: float) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._ttl: float = ttl

    def get(self, key: str) -> Any | None:
        """Return the cached value for *key*, or ``None`` on miss."""
        self._evict_expired(time.time())
        entry = self._entries.get(key)
        if entry is None:
            return None
        logger.info("Cache hit for '%s'", key)
        return entry.value

    def store(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous entry."""
        self._entries[key] = CacheEntry(
            key=key, value=value, timestamp=time.time()
        )
        logger.info("Cached response for '%s'", key)

    def clear(self) -> int:
        """Purge all cached entries.

        Returns the number of entries that were removed.
        """
        count = len(self._entries)
        self._entries.clear()
        logger.info("Cache manually purged (%d entries removed)", count)
        return count

    def _evict_expired(self, now: float) -> None:
        """Remove entries older than the TTL threshold."""
        expired = [
            key
            for key, entry in self._entries.items()
            if now - entry.timestamp >= self._ttl
        ]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Evicted %d expired cache entries", len(expired))
