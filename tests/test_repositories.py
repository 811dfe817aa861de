"""
Tests for the cache store implementations.
"""

from fnmatch import fnmatch
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from generation_pipeline.entities import CachedEntry
from generation_pipeline.errors import CacheStoreError
from generation_pipeline.repositories import InMemoryCacheRepository, RedisCacheRepository


class FakeRedis:
    """Just enough of ``redis.asyncio.Redis`` for the repository."""

    def __init__(self):
        self.data = {}
        self.expiry = {}
        self.closed = False

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value
        self.expiry[key] = ex
        return True

    async def delete(self, key):
        return 1 if self.data.pop(key, None) is not None else 0

    async def scan_iter(self, match="*"):
        for key in list(self.data):
            if fnmatch(key, match):
                yield key

    async def ping(self):
        return True

    async def aclose(self):
        self.closed = True


@pytest.fixture
def entry(valid_plan, clock):
    return CachedEntry(payload=valid_plan, cached_at=clock(), ttl_seconds=60, is_fallback=True)


async def test_memory_round_trip(memory_cache, entry):
    assert await memory_cache.set("k", entry, 60, "gen:plan")
    assert await memory_cache.get("k", "gen:plan") == entry
    assert await memory_cache.get("k", "gen:training-plan") is None


async def test_memory_entries_expire(memory_cache, entry, clock):
    await memory_cache.set("k", entry, 60, "gen:plan")

    clock.advance(59)
    assert await memory_cache.get("k", "gen:plan") is not None
    clock.advance(1)
    assert await memory_cache.get("k", "gen:plan") is None
    assert (await memory_cache.get_stats())["total_entries"] == 0


async def test_memory_last_writer_wins(memory_cache, entry, valid_training_plan):
    newer = CachedEntry(payload=valid_training_plan, cached_at=entry.cached_at + 1, ttl_seconds=60)
    await memory_cache.set("k", entry, 60, "ns")
    await memory_cache.set("k", newer, 60, "ns")
    assert await memory_cache.get("k", "ns") == newer


async def test_memory_delete(memory_cache, entry):
    await memory_cache.set("k", entry, 60, "ns")
    assert await memory_cache.delete("k", "ns") is True
    assert await memory_cache.delete("k", "ns") is False


async def test_memory_clear_namespace_leaves_other_families(memory_cache, entry):
    await memory_cache.set("a", entry, 60, "gen:plan")
    await memory_cache.set("b", entry, 60, "gen:plan")
    await memory_cache.set("a", entry, 60, "gen:training-plan")

    assert await memory_cache.clear_namespace("gen:plan") == 2
    assert await memory_cache.get("a", "gen:plan") is None
    assert await memory_cache.get("a", "gen:training-plan") == entry
    assert await memory_cache.clear_namespace("gen:plan") == 0


async def test_redis_round_trip_uses_namespaced_key_and_expiry(entry):
    client = FakeRedis()
    repository = RedisCacheRepository(redis_client=client, namespace_prefix="gen")

    await repository.set("v4:plan:free:x", entry, 120, "gen:plan")

    assert "gen:plan:v4:plan:free:x" in client.data
    assert client.expiry["gen:plan:v4:plan:free:x"] == 120
    assert await repository.get("v4:plan:free:x", "gen:plan") == entry
    assert await repository.count_all() == 1

    stats = await repository.get_stats()
    assert stats["backend"] == "redis"
    assert stats["total_entries"] == 1

    assert await repository.delete("v4:plan:free:x", "gen:plan") is True
    assert await repository.get("v4:plan:free:x", "gen:plan") is None


async def test_redis_corrupt_entry_raises_cache_error():
    client = FakeRedis()
    client.data["ns:k"] = "{not json"
    repository = RedisCacheRepository(redis_client=client)

    with pytest.raises(CacheStoreError):
        await repository.get("k", "ns")


async def test_redis_errors_become_cache_errors(entry):
    client = AsyncMock()
    client.get.side_effect = RedisConnectionError("down")
    client.set.side_effect = RedisConnectionError("down")
    client.ping.side_effect = RedisConnectionError("down")
    repository = RedisCacheRepository(redis_client=client)

    with pytest.raises(CacheStoreError):
        await repository.get("k", "ns")
    with pytest.raises(CacheStoreError):
        await repository.set("k", entry, 60, "ns")
    assert await repository.health_check() is False


async def test_redis_close(entry):
    client = FakeRedis()
    repository = RedisCacheRepository(redis_client=client)
    assert await repository.health_check() is True
    await repository.close()
    assert client.closed


async def test_redis_clear_namespace_deletes_matching_keys(entry):
    client = FakeRedis()
    repository = RedisCacheRepository(redis_client=client, namespace_prefix="gen")
    await repository.set("one", entry, 60, "gen:plan")
    await repository.set("two", entry, 60, "gen:plan")
    await repository.set("one", entry, 60, "gen:resume-rewrite")

    assert await repository.clear_namespace("gen:plan") == 2
    assert list(client.data) == ["gen:resume-rewrite:one"]


async def test_redis_clear_namespace_errors_become_cache_errors():
    class BrokenScan(FakeRedis):
        async def scan_iter(self, match="*"):
            raise RedisConnectionError("down")
            yield

    repository = RedisCacheRepository(redis_client=BrokenScan())

    with pytest.raises(CacheStoreError):
        await repository.clear_namespace("gen:plan")


def test_cached_entry_json_round_trip(entry):
    assert CachedEntry.from_json(entry.to_json()) == entry
