"""Generation service for core business logic.

This service ties the pipeline together for one request:

1. Build the versioned cache key and check the cache store
2. On a miss, kick off background warming and run the provider chain
3. Write-through valid results with the normal TTL
4. When the chain is exhausted, serve the fallback generator's output and
   cache it with half the TTL

Cache store failures are never fatal: a failed read is a miss and a failed
write is logged. The whole call is bounded by ``request_timeout``.
"""

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Callable, Mapping, Sequence
from typing import Any

from generation_pipeline.config import settings
from generation_pipeline.entities import CachedEntry, ContentType, GenerationRequest, GenerationResult
from generation_pipeline.errors import GenerationTimeoutError
from generation_pipeline.protocols import CacheStore, GenerationParams, GenerationProvider, TelemetrySink

from .cache_keys import build_key, namespace_for
from .cache_warmer import CacheWarmer
from .fallback import fallback
from .orchestrator import ProviderChain
from .prompts import render_prompt
from .streaming import ProgressCallback
from .telemetry import safe_emit

logger = logging.getLogger(__name__)


class GenerationService:
    """Core generation orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - CacheStore: can be Redis, in-memory, etc.
    - GenerationProvider: Gemini, OpenRouter, Groq or test stubs
    - TelemetrySink: metrics collector

    Example:
        ```python
        service = GenerationService.create(
            cache=InMemoryCacheRepository(),
            providers={ContentType.PLAN: [GeminiProvider.create(), GroqProvider.create()]},
        )
        result = await service.generate(
            GenerationRequest.create("plan", job_title="Software Engineer")
        )
        ```
    """

    def __init__(
        self,
        cache: CacheStore,
        chains: Mapping[ContentType, ProviderChain],
        telemetry: TelemetrySink | None = None,
        cache_ttl: int | None = None,
        request_timeout: float | None = None,
        namespace_prefix: str | None = None,
        warming_enabled: bool | None = None,
        common_requests: Mapping[ContentType, Sequence[GenerationRequest]] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the generation service.

        Args:
            cache: Cache storage backend (required).
            chains: Provider chain per content type (required).
            telemetry: Optional sink for cache and provider events.
            cache_ttl: TTL for provider results; fallbacks get half. Defaults to settings.
            request_timeout: Outer deadline in seconds. Defaults to settings.
            namespace_prefix: Cache namespace prefix. Defaults to settings.
            warming_enabled: Whether misses trigger background warming. Defaults to settings.
            common_requests: Inputs the warmer pre-populates.
            clock: Wall clock used for cache timestamps.
        """
        self._cache = cache
        self._chains = dict(chains)
        self._telemetry = telemetry
        self._ttl = cache_ttl or settings.cache_ttl
        self._request_timeout = request_timeout or settings.request_timeout
        self._namespace_prefix = namespace_prefix or settings.cache_namespace_prefix
        self._warming_enabled = (
            settings.cache_warming_enabled if warming_enabled is None else warming_enabled
        )
        self._clock = clock
        self._warmer = CacheWarmer(self, common_requests)

    @classmethod
    def create(
        cls,
        cache: CacheStore,
        providers: Mapping[ContentType, Sequence[GenerationProvider]],
        telemetry: TelemetrySink | None = None,
        attempt_timeout: float | None = None,
        params: GenerationParams | None = None,
        parse_interval: float | None = None,
        **kwargs: Any,
    ) -> "GenerationService":
        """Factory method building one ProviderChain per content type.

        Content types without an entry get an empty chain and are always
        served by the fallback generator.
        """
        chains = {
            content_type: ProviderChain(
                providers.get(content_type, ()),
                content_type,
                attempt_timeout=attempt_timeout,
                params=params,
                parse_interval=parse_interval,
                telemetry=telemetry,
            )
            for content_type in ContentType
        }
        return cls(cache=cache, chains=chains, telemetry=telemetry, **kwargs)

    @property
    def fallback_ttl(self) -> int:
        """TTL for fallback results: half the configured TTL, at least one second."""
        return max(1, self._ttl // 2)

    @property
    def warmer(self) -> CacheWarmer:
        return self._warmer

    def _namespace(self, content_type: ContentType) -> str:
        return namespace_for(content_type, self._namespace_prefix)

    async def _cache_get(self, key: str, namespace: str) -> CachedEntry | None:
        try:
            return await self._cache.get(key, namespace)
        except Exception as e:
            logger.warning("Cache read failed for %s, treating as miss: %s", namespace, e)
            safe_emit(self._telemetry, lambda sink: sink.record_cache_error(namespace, "get"))
            return None

    async def _cache_set(self, key: str, namespace: str, entry: CachedEntry) -> None:
        try:
            await self._cache.set(key, entry, entry.ttl_seconds, namespace)
        except Exception as e:
            logger.warning("Cache write failed for %s: %s", namespace, e)
            safe_emit(self._telemetry, lambda sink: sink.record_cache_error(namespace, "set"))

    async def is_cached(self, request: GenerationRequest) -> bool:
        entry = await self._cache_get(build_key(request), self._namespace(request.content_type))
        return entry is not None

    async def clear(self, content_type: ContentType) -> int:
        """Drop every cached entry for one content type.

        Store failures propagate as ``CacheStoreError``.
        """
        removed = await self._cache.clear_namespace(self._namespace(content_type))
        logger.info("Cleared %d cached %s entries", removed, content_type.value)
        return removed

    async def generate(
        self,
        request: GenerationRequest,
        bypass_cache: bool = False,
        on_progress: ProgressCallback | None = None,
        warm: bool = False,
    ) -> GenerationResult:
        """Produce validated content for ``request``.

        Args:
            request: What to generate.
            bypass_cache: Skip the cache lookup; honored for premium requests only.
            on_progress: Called with each provisional payload while streaming.
            warm: Set by the cache warmer; suppresses further warm-up scheduling.

        Returns:
            GenerationResult, possibly cached and/or flagged as fallback

        Raises:
            GenerationTimeoutError: If the outer deadline expires with no usable result
        """
        provisional: list[dict[str, Any]] = []

        async def track_progress(payload: dict[str, Any]) -> None:
            provisional.append(payload)
            if on_progress is not None:
                await on_progress(payload)

        deadline = asyncio.timeout(self._request_timeout)
        try:
            async with deadline:
                return await self._generate(request, bypass_cache, track_progress, warm)
        except TimeoutError as e:
            if not deadline.expired():
                raise
            if provisional:
                logger.warning(
                    "Deadline of %.1fs expired; returning last valid streamed payload",
                    self._request_timeout,
                )
                return GenerationResult(
                    content_type=request.content_type,
                    content=provisional[-1],
                    cached=False,
                    fallback=False,
                    provider="stream",
                    generated_at=self._clock(),
                )
            raise GenerationTimeoutError(self._request_timeout) from e

    async def _generate(
        self,
        request: GenerationRequest,
        bypass_cache: bool,
        on_progress: ProgressCallback,
        warm: bool,
    ) -> GenerationResult:
        content_type = request.content_type
        namespace = self._namespace(content_type)
        key = build_key(request)

        if bypass_cache and not request.premium:
            logger.info("Ignoring cache bypass for non-premium request")
            bypass_cache = False

        if not bypass_cache:
            entry = await self._cache_get(key, namespace)
            safe_emit(self._telemetry, lambda sink: sink.record_cache(namespace, entry is not None))
            if entry is not None:
                logger.info("Cache hit for %s", namespace)
                return GenerationResult(
                    content_type=content_type,
                    content=entry.payload,
                    cached=True,
                    fallback=entry.is_fallback,
                    provider="cache",
                    generated_at=entry.cached_at,
                )
            logger.info("Cache miss for %s", namespace)
            if self._warming_enabled and not warm:
                self._warmer.schedule(content_type)

        chain = self._chains.get(content_type) or ProviderChain((), content_type)
        outcome = await chain.run(render_prompt(request), on_progress=on_progress)
        now = self._clock()

        if outcome.payload is not None:
            await self._cache_set(key, namespace, CachedEntry(outcome.payload, now, self._ttl, False))
            return GenerationResult(
                content_type=content_type,
                content=outcome.payload,
                cached=False,
                fallback=False,
                provider=outcome.provider or "unknown",
                generated_at=now,
                attempts=outcome.attempts,
            )

        logger.warning(
            "All %d providers failed for %s; serving fallback content",
            len(outcome.attempts),
            content_type.value,
        )
        content = fallback(request)
        safe_emit(self._telemetry, lambda sink: sink.record_fallback(content_type.value))
        await self._cache_set(key, namespace, CachedEntry(content, now, self.fallback_ttl, True))
        return GenerationResult(
            content_type=content_type,
            content=content,
            cached=False,
            fallback=True,
            provider="fallback",
            generated_at=now,
            attempts=outcome.attempts,
        )

    async def stream(
        self, request: GenerationRequest, bypass_cache: bool = False
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield each provisional payload, then the final response.

        Intermediate items are ``{"content_type", "content", "partial": True}``;
        the last item is ``GenerationResult.to_response()`` with ``"partial": False``.
        """
        queue: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue()

        async def on_progress(payload: dict[str, Any]) -> None:
            await queue.put(payload)

        task = asyncio.create_task(self.generate(request, bypass_cache, on_progress=on_progress))
        task.add_done_callback(lambda _: queue.put_nowait(None))

        try:
            while (payload := await queue.get()) is not None:
                yield {"content_type": request.content_type.value, "content": payload, "partial": True}
            result = await task
            yield {**result.to_response(), "partial": False}
        finally:
            if not task.done():
                task.cancel()

    async def is_healthy(self) -> bool:
        """Check if the cache store is reachable."""
        try:
            return await self._cache.health_check()
        except Exception as e:
            logger.warning("Cache health check failed: %s", e)
            return False

    async def get_stats(self) -> dict:
        """Get cache statistics and provider chain configuration."""
        try:
            stats = await self._cache.get_stats()
        except Exception as e:
            logger.warning("Cache stats unavailable: %s", e)
            stats = {}
        stats["ttl"] = self._ttl
        stats["fallback_ttl"] = self.fallback_ttl
        stats["chains"] = {
            content_type.value: [provider.name for provider in chain.providers]
            for content_type, chain in self._chains.items()
        }
        return stats

    async def close(self) -> None:
        await self._warmer.stop()
