"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from generation_pipeline.config import Settings, configure_logging, settings
from generation_pipeline.entities import ContentType
from generation_pipeline.handlers import GenerationHandler
from generation_pipeline.protocols import CacheStore, GenerationProvider
from generation_pipeline.repositories import (
    GeminiProvider,
    GroqProvider,
    InMemoryCacheRepository,
    OpenRouterProvider,
    RedisCacheRepository,
)
from generation_pipeline.services import GenerationService, MetricsTelemetry

logger = logging.getLogger(__name__)

PROVIDER_FACTORIES: dict[str, Callable[[], GenerationProvider]] = {
    "openrouter": OpenRouterProvider.create,
    "gemini": GeminiProvider.create,
    "groq": GroqProvider.create,
}


def get_handler(request: Request) -> GenerationHandler:
    """Dependency injection for GenerationHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "generation_handler", None)
    if handler is None:
        raise RuntimeError("GenerationHandler not initialized. Check lifespan setup.")
    return handler


def build_cache_store(config: Settings = settings) -> CacheStore:
    """Redis when ``REDIS_URL`` is set, otherwise the in-memory store."""
    if config.redis_url:
        return RedisCacheRepository.create(config.redis_url)
    logger.warning("REDIS_URL is not set; using the in-memory cache store")
    return InMemoryCacheRepository()


def build_providers(config: Settings = settings) -> dict[ContentType, list[GenerationProvider]]:
    """Instantiate each configured provider once and order it per content type."""
    orders = {
        ContentType.PLAN: config.plan_provider_order,
        ContentType.TRAINING_PLAN: config.training_plan_provider_order,
        ContentType.RESUME_REWRITE: config.resume_provider_order,
    }
    instances: dict[str, GenerationProvider] = {}
    providers: dict[ContentType, list[GenerationProvider]] = {}
    for content_type, order in orders.items():
        for name in order:
            if name not in instances:
                instances[name] = PROVIDER_FACTORIES[name]()
        providers[content_type] = [instances[name] for name in order]
    return providers


async def _close_all(cache: CacheStore, providers: dict[ContentType, list[GenerationProvider]]) -> None:
    seen: set[int] = set()
    for provider in (p for chain in providers.values() for p in chain):
        if id(provider) in seen:
            continue
        seen.add(id(provider))
        close = getattr(provider, "close", None)
        if close is not None:
            await close()

    close_cache = getattr(cache, "close", None)
    if close_cache is not None:
        await close_cache()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores the handler in app.state:
    1. Cache store and provider clients (data access)
    2. Service (business logic), owned by the handler
    3. Handler (HTTP endpoints) - stored in app.state.generation_handler

    Cleanup:
        Stops the cache warmer, closes HTTP and Redis clients and removes
        the handler from app.state on shutdown
    """
    configure_logging()

    cache = build_cache_store()
    providers = build_providers()
    telemetry = MetricsTelemetry()

    generation_service = GenerationService.create(
        cache=cache,
        providers=providers,
        telemetry=telemetry,
    )
    generation_handler = GenerationHandler(service=generation_service, telemetry=telemetry)

    app.state.generation_handler = generation_handler

    logger.info("Generation service initialized")
    for content_type, chain in providers.items():
        logger.info("%s chain: %s", content_type.value, " -> ".join(p.name for p in chain))
    logger.info("Cache healthy: %s", await generation_service.is_healthy())

    yield

    await generation_service.close()
    await _close_all(cache, providers)

    del app.state.generation_handler
    logger.info("Generation service shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[GenerationHandler, Depends(get_handler)]