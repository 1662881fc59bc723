"""Key-value cache interface.

The cache backs two things: the login failure counters and the mirrors of
live sessions. Values are JSON-compatible (str, int, bool, dict, list).
"""

from abc import ABC, abstractmethod
from typing import Any


class CacheBackend(ABC):
    """Async key-value cache with per-key TTL."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the value stored under ``key``, or None if absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key``. Missing keys are ignored."""

    @abstractmethod
    async def increment(self, key: str, ttl_seconds: int, initial: int = 0) -> int:
        """Atomically increment an integer counter and reset its TTL.

        Args:
            key: Counter key.
            ttl_seconds: TTL applied on every increment.
            initial: Value an absent counter is treated as before incrementing.

        Returns:
            The counter value after the increment.
        """

    async def close(self) -> None:
        """Release connections held by the backend."""
