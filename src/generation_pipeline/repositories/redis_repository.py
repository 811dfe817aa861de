"""Redis implementation of CacheStore.

Entries are stored as JSON strings under ``"{namespace}:{key}"`` with a
native Redis expiry, so stale entries disappear without any eviction logic
in this package.
"""

import json

import redis.asyncio as redis
from redis.exceptions import RedisError

from generation_pipeline.config import get_redis_client, settings
from generation_pipeline.entities import CachedEntry
from generation_pipeline.errors import CacheStoreError


class RedisCacheRepository:
    """Redis implementation of the CacheStore protocol.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        namespace_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Async Redis client instance. If None, creates default.
            namespace_prefix: Prefix used when counting keys for stats.
        """
        self._client = redis_client or get_redis_client()
        self._namespace_prefix = namespace_prefix or settings.cache_namespace_prefix

    @classmethod
    def create(cls, url: str | None = None) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository with defaults.

        Args:
            url: Redis URL. If None, uses settings.

        Returns:
            Configured RedisCacheRepository
        """
        return cls(redis_client=get_redis_client(url))

    @staticmethod
    def _full_key(key: str, namespace: str) -> str:
        return f"{namespace}:{key}"

    async def get(self, key: str, namespace: str) -> CachedEntry | None:
        try:
            raw = await self._client.get(self._full_key(key, namespace))
        except RedisError as e:
            raise CacheStoreError(f"Redis GET failed: {e}") from e

        if raw is None:
            return None

        try:
            return CachedEntry.from_json(raw)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise CacheStoreError(f"Corrupted cache entry for {key}: {e}") from e

    async def set(self, key: str, entry: CachedEntry, ttl_seconds: int, namespace: str) -> bool:
        try:
            await self._client.set(self._full_key(key, namespace), entry.to_json(), ex=ttl_seconds)
        except RedisError as e:
            raise CacheStoreError(f"Redis SET failed: {e}") from e
        return True

    async def delete(self, key: str, namespace: str) -> bool:
        try:
            result: int = await self._client.delete(self._full_key(key, namespace))
        except RedisError as e:
            raise CacheStoreError(f"Redis DEL failed: {e}") from e
        return result > 0

    async def clear_namespace(self, namespace: str) -> int:
        """Delete every key SCAN finds under ``namespace``."""
        count = 0
        try:
            async for full_key in self._client.scan_iter(match=f"{namespace}:*"):
                count += await self._client.delete(full_key)
        except RedisError as e:
            raise CacheStoreError(f"Redis clear of {namespace} failed: {e}") from e
        return count

    async def count_all(self) -> int:
        """Count entries under the configured namespace prefix."""
        count = 0
        async for _ in self._client.scan_iter(match=f"{self._namespace_prefix}:*"):
            count += 1
        return count

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False

    async def get_stats(self) -> dict:
        return {
            "backend": "redis",
            "namespace_prefix": self._namespace_prefix,
            "total_entries": await self.count_all(),
        }

    async def close(self) -> None:
        await self._client.aclose()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
