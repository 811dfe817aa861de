"""Cache storage protocol.

Defines the interface for any key/value store that can hold generation
results with a time-to-live, grouped under a namespace.

Implementations can include:
- Redis (default)
- In-memory dictionary (development and tests)
- Any other TTL-capable key/value store
"""

from typing import Protocol, runtime_checkable

from generation_pipeline.entities import CachedEntry


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed. Implementations raise ``CacheStoreError``
    on backend failures; the service layer decides how to degrade.
    """

    async def get(self, key: str, namespace: str) -> CachedEntry | None:
        """Fetch a cache entry.

        Args:
            key: The cache key fingerprint
            namespace: Fixed prefix for the content-type family

        Returns:
            The entry, or None on a miss (absent or expired)
        """
        ...

    async def set(self, key: str, entry: CachedEntry, ttl_seconds: int, namespace: str) -> bool:
        """Store a cache entry, overwriting any previous value.

        Args:
            key: The cache key fingerprint
            entry: The entry to store
            ttl_seconds: Time-to-live in seconds
            namespace: Fixed prefix for the content-type family

        Returns:
            True once the write is acknowledged
        """
        ...

    async def delete(self, key: str, namespace: str) -> bool:
        """Delete a cache entry.

        Returns:
            True if an entry was removed, False otherwise
        """
        ...

    async def clear_namespace(self, namespace: str) -> int:
        """Delete every entry stored under a namespace.

        Used to retire a content-type family without touching the others.

        Returns:
            The number of entries removed
        """
        ...

    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        ...

    async def get_stats(self) -> dict:
        """Get store statistics (implementation-specific)."""
        ...
