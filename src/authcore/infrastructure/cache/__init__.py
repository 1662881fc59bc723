"""Cache backends for session mirrors and login throttling."""

from authcore.core.config import Settings
from authcore.infrastructure.cache.base import CacheBackend
from authcore.infrastructure.cache.memory_cache import MemoryCache
from authcore.infrastructure.cache.redis_cache import RedisCache


def create_cache(settings: Settings) -> CacheBackend:
    """Build the cache backend selected by ``settings.redis_url``."""
    if settings.redis_url:
        return RedisCache(settings.redis_url, socket_timeout=settings.redis_socket_timeout)
    return MemoryCache()


__all__ = [
    "CacheBackend",
    "MemoryCache",
    "RedisCache",
    "create_cache",
]
