"""Redis-backed cache.

Values are stored JSON-encoded. Counter increments run as a Lua script so
that read, increment and TTL reset happen atomically on the server.
"""

import json
from typing import Any

import redis.asyncio as aioredis

from authcore.core.logging import get_logger
from authcore.infrastructure.cache.base import CacheBackend

logger = get_logger(__name__)


class RedisCache(CacheBackend):
    """Thin Redis wrapper implementing ``CacheBackend``."""

    # KEYS[1] counter key; ARGV[1] ttl seconds; ARGV[2] initial value
    _INCREMENT_SCRIPT = """
local current = redis.call('GET', KEYS[1])
local value
if current then
  value = tonumber(current)
else
  value = tonumber(ARGV[2])
end
value = value + 1
redis.call('SET', KEYS[1], value, 'EX', tonumber(ARGV[1]))
return value
"""

    def __init__(
        self,
        redis_url: str | None = None,
        *,
        socket_timeout: float = 5.0,
        client: aioredis.Redis | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            redis_url: Redis connection URL. Ignored when ``client`` is given.
            socket_timeout: Connect and command timeout in seconds.
            client: Pre-built async Redis client.
        """
        if client is None:
            if redis_url is None:
                raise ValueError("redis_url or client is required")
            client = aioredis.from_url(
                redis_url,
                decode_responses=True,
                socket_timeout=socket_timeout,
                socket_connect_timeout=socket_timeout,
            )
        self.client = client
        self._increment = self.client.register_script(self._INCREMENT_SCRIPT)

    async def get(self, key: str) -> Any | None:
        raw = await self.client.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        await self.client.set(key, json.dumps(value), ex=max(1, int(ttl_seconds)))

    async def delete(self, key: str) -> None:
        await self.client.delete(key)

    async def increment(self, key: str, ttl_seconds: int, initial: int = 0) -> int:
        value = await self._increment(keys=[key], args=[max(1, int(ttl_seconds)), initial])
        return int(value)

    async def ping(self) -> bool:
        """Check Redis connectivity."""
        try:
            return bool(await self.client.ping())
        except aioredis.RedisError as e:
            logger.error("Redis ping failed", error=str(e))
            return False

    async def close(self) -> None:
        await self.client.aclose()
