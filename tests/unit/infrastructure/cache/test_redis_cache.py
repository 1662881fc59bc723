"""Tests for the Redis cache backend against a mocked client."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
import redis.asyncio as aioredis

from authcore.core.config import Settings
from authcore.infrastructure.cache import MemoryCache, RedisCache, create_cache


@pytest.fixture
def increment_script() -> AsyncMock:
    return AsyncMock(return_value=2)


@pytest.fixture
def client(increment_script) -> MagicMock:
    mock = MagicMock()
    mock.get = AsyncMock(return_value=None)
    mock.set = AsyncMock(return_value=True)
    mock.delete = AsyncMock(return_value=1)
    mock.ping = AsyncMock(return_value=True)
    mock.aclose = AsyncMock()
    mock.register_script = MagicMock(return_value=increment_script)
    return mock


@pytest.fixture
def cache(client) -> RedisCache:
    return RedisCache(client=client)


def test_requires_url_or_client():
    with pytest.raises(ValueError):
        RedisCache()


def test_registers_increment_script(client, cache):
    client.register_script.assert_called_once()
    script = client.register_script.call_args.args[0]
    assert "redis.call('SET', KEYS[1], value, 'EX'" in script


@pytest.mark.asyncio
async def test_set_stores_json_with_ttl(client, cache):
    await cache.set("session:abc", {"id": "s1"}, 120)

    client.set.assert_awaited_once_with("session:abc", json.dumps({"id": "s1"}), ex=120)


@pytest.mark.asyncio
async def test_set_clamps_ttl_to_one_second(client, cache):
    await cache.set("key", "v", 0)

    assert client.set.call_args.kwargs["ex"] == 1


@pytest.mark.asyncio
async def test_get_decodes_json(client, cache):
    client.get.return_value = json.dumps({"id": "s1", "user_id": "u1"})

    assert await cache.get("session:abc") == {"id": "s1", "user_id": "u1"}


@pytest.mark.asyncio
async def test_get_missing(client, cache):
    client.get.return_value = None

    assert await cache.get("missing") is None


@pytest.mark.asyncio
async def test_delete(client, cache):
    await cache.delete("key")

    client.delete.assert_awaited_once_with("key")


@pytest.mark.asyncio
async def test_increment_runs_script(cache, increment_script):
    result = await cache.increment("login_attempts:a@x.com", 1800, initial=1)

    assert result == 2
    increment_script.assert_awaited_once_with(keys=["login_attempts:a@x.com"], args=[1800, 1])


@pytest.mark.asyncio
async def test_ping_failure_returns_false(client, cache):
    client.ping.side_effect = aioredis.ConnectionError("down")

    assert await cache.ping() is False


@pytest.mark.asyncio
async def test_close(client, cache):
    await cache.close()

    client.aclose.assert_awaited_once()


def test_create_cache_without_redis_url_is_memory(settings):
    assert isinstance(create_cache(settings), MemoryCache)


def test_create_cache_with_redis_url(settings):
    redis_settings = settings.model_copy(update={"redis_url": "redis://localhost:6379/0"})

    assert isinstance(create_cache(redis_settings), RedisCache)


def test_settings_default_has_no_redis(settings: Settings):
    assert settings.redis_url is None
