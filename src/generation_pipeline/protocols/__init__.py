"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis → in-memory, Gemini → Groq, etc.)
- Unit testing with stub implementations
- Clear separation of concerns

Usage:
    ```python
    from generation_pipeline.protocols import CacheStore, GenerationProvider

    store: CacheStore = RedisCacheRepository.create()
    store: CacheStore = InMemoryCacheRepository()
    ```
"""

from .cache_store import CacheStore
from .generation_provider import GenerationParams, GenerationProvider
from .telemetry_sink import TelemetrySink

__all__ = [
    "CacheStore",
    "GenerationParams",
    "GenerationProvider",
    "TelemetrySink",
]
