"""In-memory cache of the last good lookup per city."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional


DEFAULT_TTL_SECONDS = 300  # 5 minutes


@dataclass(frozen=True)
class CacheEntry:
    """Payloads from one successful lookup and when they were fetched."""
    key: str
    current: Dict[str, Any]
    forecast: Dict[str, Any]
    fetched_at: float


class WeatherCache:
    """
    Keyed cache with time-based expiry.

    Expired entries are never evicted, only ignored on lookup; the next
    successful fetch for the same key overwrites them. There is no capacity
    bound since keys are the distinct city names entered in one session.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Age at which an entry is considered stale
        """
        self.ttl_seconds = ttl_seconds
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str, now: float) -> Optional[CacheEntry]:
        """
        Look up a fresh entry.

        Args:
            key: Normalized city name
            now: Current clock reading in seconds

        Returns:
            The entry, or None if absent or stale
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        age = now - entry.fetched_at
        if age >= self.ttl_seconds:
            logging.debug(f"Cache entry for '{key}' expired (age: {age:.1f}s, TTL: {self.ttl_seconds}s)")
            return None

        logging.debug(f"Cache hit for '{key}' (age: {age:.1f}s, TTL: {self.ttl_seconds}s)")
        return entry

    def put(self, key: str, current: Dict[str, Any], forecast: Dict[str, Any], now: float) -> CacheEntry:
        """Store both payloads for key, replacing any previous entry."""
        entry = CacheEntry(key=key, current=current, forecast=forecast, fetched_at=now)
        self._entries[key] = entry
        return entry

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
