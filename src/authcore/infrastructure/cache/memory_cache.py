"""In-process TTL cache.

Used when no Redis URL is configured (development, tests, single-process
deployments). Thread-safe. Expired entries are dropped on access and swept
from the whole map by writes at most once per cleanup interval.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any

from authcore.infrastructure.cache.base import CacheBackend


@dataclass
class CacheEntry:
    """Cache entry with TTL support.

    Attributes:
        value: The cached value.
        expires_at: Unix timestamp when this entry expires.
    """

    value: Any
    expires_at: float


class MemoryCache(CacheBackend):
    """Thread-safe dictionary cache with per-key expiry."""

    def __init__(self, cleanup_interval: int = 300) -> None:
        """Initialize the cache.

        Args:
            cleanup_interval: Minimum seconds between sweeps of expired entries.
        """
        self._cache: dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._cleanup_interval = cleanup_interval
        self._last_cleanup = time.time()

    def _cleanup_expired(self, now: float) -> None:
        if now - self._last_cleanup < self._cleanup_interval:
            return
        expired = [key for key, entry in self._cache.items() if now >= entry.expires_at]
        for key in expired:
            del self._cache[key]
        self._last_cleanup = now

    def _get_live(self, key: str) -> CacheEntry | None:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if time.time() >= entry.expires_at:
            del self._cache[key]
            return None
        return entry

    async def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._get_live(key)
            return entry.value if entry is not None else None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        with self._lock:
            now = time.time()
            self._cleanup_expired(now)
            self._cache[key] = CacheEntry(value=value, expires_at=now + ttl_seconds)

    async def delete(self, key: str) -> None:
        with self._lock:
            self._cache.pop(key, None)

    async def increment(self, key: str, ttl_seconds: int, initial: int = 0) -> int:
        with self._lock:
            now = time.time()
            self._cleanup_expired(now)
            entry = self._get_live(key)
            current = int(entry.value) if entry is not None else initial
            value = current + 1
            self._cache[key] = CacheEntry(value=value, expires_at=now + ttl_seconds)
            return value

    def size(self) -> int:
        """Get number of live entries in cache."""
        with self._lock:
            now = time.time()
            return sum(1 for entry in self._cache.values() if entry.expires_at > now)

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()
