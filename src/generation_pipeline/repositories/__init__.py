"""Repository layer for data access.

This layer abstracts external dependencies (Redis, text-generation APIs)
behind protocol-based interfaces. This enables:
- Easy swapping of implementations (Redis → in-memory, Gemini → Groq, etc.)
- Unit testing with stub implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from generation_pipeline.protocols import CacheStore, GenerationProvider

from .gemini_provider import GeminiProvider
from .memory_repository import InMemoryCacheRepository
from .openai_compatible_provider import GroqProvider, OpenAICompatibleProvider, OpenRouterProvider
from .redis_repository import RedisCacheRepository

__all__ = [
    "CacheStore",
    "GenerationProvider",
    "GeminiProvider",
    "GroqProvider",
    "InMemoryCacheRepository",
    "OpenAICompatibleProvider",
    "OpenRouterProvider",
    "RedisCacheRepository",
]
