"""Service layer for business logic.

This layer contains the core generation pipeline and its orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> ProviderChain -> Provider / CacheStore
    (HTTP)  -> (Business) -> (Fallback order) -> (Data Access)

Usage:
    ```python
    from generation_pipeline.services import GenerationService

    service = GenerationService.create(
        cache=InMemoryCacheRepository(),
        providers={ContentType.PLAN: [GeminiProvider.create()]},
    )
    result = await service.generate(request)
    ```
"""

from .cache_keys import SCHEMA_VERSION, build_key, namespace_for
from .cache_warmer import CacheWarmer, default_common_requests
from .extractor import extract_candidate, strip_fences
from .fallback import fallback
from .generation_service import GenerationService
from .orchestrator import ChainOutcome, ChainState, ProviderChain
from .prompts import render_prompt
from .streaming import StreamingConsumer, StreamOutcome, parse_candidate
from .telemetry import MetricsTelemetry, safe_emit
from .validator import SCHEMAS, ContentSchema, is_valid, schema_for

__all__ = [
    "GenerationService",
    "ProviderChain",
    "ChainOutcome",
    "ChainState",
    "StreamingConsumer",
    "StreamOutcome",
    "CacheWarmer",
    "MetricsTelemetry",
    "ContentSchema",
    "SCHEMAS",
    "SCHEMA_VERSION",
    "build_key",
    "namespace_for",
    "default_common_requests",
    "extract_candidate",
    "strip_fences",
    "fallback",
    "is_valid",
    "parse_candidate",
    "render_prompt",
    "safe_emit",
    "schema_for",
]
