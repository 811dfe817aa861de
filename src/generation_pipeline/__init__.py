"""Generation Pipeline - resilient structured content generation.

This package provides a layered architecture for generating interview plans,
training plans and resume rewrites from unreliable text-generation providers:

Layers:
    - protocols: Interface contracts (CacheStore, GenerationProvider, TelemetrySink)
    - repositories: Data access implementations (Redis, in-memory, provider clients)
    - services: Business logic (provider chain, streaming, validation, fallback)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from generation_pipeline import GenerationRequest, GenerationService

    service = GenerationService.create(cache=InMemoryCacheRepository(), providers={})
    result = await service.generate(
        GenerationRequest.create("plan", job_title="Software Engineer")
    )
    ```

For HTTP API:
    ```python
    from generation_pipeline.api.app import app
    ```
"""

from generation_pipeline.config import get_redis_client, settings
from generation_pipeline.dto import PlanRequest, ResumeRewriteRequest, TrainingPlanRequest
from generation_pipeline.entities import CachedEntry, ContentType, GenerationRequest, GenerationResult
from generation_pipeline.errors import (
    GenerationPipelineError,
    GenerationTimeoutError,
    ProviderError,
)
from generation_pipeline.handlers import GenerationHandler
from generation_pipeline.protocols import CacheStore, GenerationProvider, TelemetrySink
from generation_pipeline.repositories import InMemoryCacheRepository, RedisCacheRepository
from generation_pipeline.services import GenerationService, ProviderChain

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "CacheStore",
    "GenerationProvider",
    "TelemetrySink",
    # Services (business logic)
    "GenerationService",
    "ProviderChain",
    # Handlers (HTTP)
    "GenerationHandler",
    # Repositories (data access)
    "InMemoryCacheRepository",
    "RedisCacheRepository",
    # Entities (domain models)
    "CachedEntry",
    "ContentType",
    "GenerationRequest",
    "GenerationResult",
    # Errors
    "GenerationPipelineError",
    "GenerationTimeoutError",
    "ProviderError",
    # DTOs (API contracts)
    "PlanRequest",
    "TrainingPlanRequest",
    "ResumeRewriteRequest",
]
