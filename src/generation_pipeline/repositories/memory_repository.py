"""In-memory implementation of CacheStore.

Used when no Redis URL is configured and throughout the test-suite. Expiry
is passive: an entry past its TTL is dropped the next time it is read.
"""

import time
from collections.abc import Callable

from generation_pipeline.entities import CachedEntry


class InMemoryCacheRepository:
    """Process-local CacheStore with an injectable clock.

    No method awaits while touching the dictionary, so operations are
    atomic with respect to other tasks on the same event loop.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._store: dict[str, tuple[float, CachedEntry]] = {}

    @staticmethod
    def _full_key(key: str, namespace: str) -> str:
        return f"{namespace}:{key}"

    async def get(self, key: str, namespace: str) -> CachedEntry | None:
        full_key = self._full_key(key, namespace)
        item = self._store.get(full_key)
        if item is None:
            return None
        expires_at, entry = item
        if self._clock() >= expires_at:
            del self._store[full_key]
            return None
        return entry

    async def set(self, key: str, entry: CachedEntry, ttl_seconds: int, namespace: str) -> bool:
        self._store[self._full_key(key, namespace)] = (self._clock() + ttl_seconds, entry)
        return True

    async def delete(self, key: str, namespace: str) -> bool:
        return self._store.pop(self._full_key(key, namespace), None) is not None

    async def clear_namespace(self, namespace: str) -> int:
        prefix = f"{namespace}:"
        stale = [full_key for full_key in self._store if full_key.startswith(prefix)]
        for full_key in stale:
            del self._store[full_key]
        return len(stale)

    async def health_check(self) -> bool:
        return True

    async def get_stats(self) -> dict:
        now = self._clock()
        live = sum(1 for expires_at, _ in self._store.values() if expires_at > now)
        return {"backend": "memory", "total_entries": live}
