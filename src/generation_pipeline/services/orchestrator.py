"""Ordered provider fallback chain.

Per request the chain moves ``IDLE -> TRYING(i) -> SUCCESS | EXHAUSTED``:

- provider ``i`` produced content that validates      -> SUCCESS
- provider ``i`` errored, timed out or never validated -> TRYING(i + 1)
- the last provider failed                             -> EXHAUSTED

The chain never raises for provider failures. Caching and the fallback
generator belong to ``GenerationService``; the chain only reports which
provider (if any) produced a valid payload.
"""

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from generation_pipeline.config import settings
from generation_pipeline.entities import AttemptOutcome, ContentType, ProviderAttempt
from generation_pipeline.errors import ProviderError
from generation_pipeline.protocols import GenerationParams, GenerationProvider, TelemetrySink

from .streaming import ProgressCallback, StreamingConsumer, parse_candidate
from .telemetry import safe_emit

logger = logging.getLogger(__name__)


class ChainState(str, Enum):
    IDLE = "idle"
    TRYING = "trying"
    SUCCESS = "success"
    EXHAUSTED = "exhausted"


@dataclass
class ChainOutcome:
    """What one run of the chain produced."""

    state: ChainState
    payload: dict[str, Any] | None = None
    provider: str | None = None
    attempts: list[ProviderAttempt] = field(default_factory=list)

    @property
    def exhausted(self) -> bool:
        return self.state is ChainState.EXHAUSTED


class ProviderChain:
    """Tries providers in the configured order until one yields valid content.

    Example:
        ```python
        chain = ProviderChain(
            providers=[GeminiProvider.create(), OpenRouterProvider.create()],
            content_type=ContentType.PLAN,
        )
        outcome = await chain.run(prompt)
        ```
    """

    def __init__(
        self,
        providers: Sequence[GenerationProvider],
        content_type: ContentType,
        attempt_timeout: float | None = None,
        params: GenerationParams | None = None,
        parse_interval: float | None = None,
        telemetry: TelemetrySink | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the chain.

        Args:
            providers: Providers in priority order (first is tried first).
            content_type: Content type whose schema validates the output.
            attempt_timeout: Per-provider deadline in seconds. Defaults to settings.
            params: Sampling parameters. Defaults to settings.
            parse_interval: Streaming parse throttle. Defaults to settings.
            telemetry: Optional sink for attempt outcomes.
            clock: Wall clock used for attempt timestamps.
        """
        self._providers = list(providers)
        self._content_type = ContentType(content_type)
        self._attempt_timeout = attempt_timeout or settings.attempt_timeout
        self._params = params or GenerationParams(
            max_tokens=settings.max_tokens, temperature=settings.temperature
        )
        self._parse_interval = parse_interval
        self._telemetry = telemetry
        self._clock = clock

    @property
    def providers(self) -> list[GenerationProvider]:
        return list(self._providers)

    @property
    def content_type(self) -> ContentType:
        return self._content_type

    async def _call(
        self, provider: GenerationProvider, prompt: str, on_progress: ProgressCallback | None
    ) -> dict[str, Any] | None:
        if provider.supports_streaming:
            consumer = StreamingConsumer(
                self._content_type,
                parse_interval=self._parse_interval,
                on_progress=on_progress,
            )
            outcome = await consumer.consume(provider.stream(prompt, self._params))
            return outcome.payload

        text = await provider.generate(prompt, self._params)
        return parse_candidate(text, self._content_type)

    async def _attempt(
        self, provider: GenerationProvider, prompt: str, on_progress: ProgressCallback | None
    ) -> tuple[dict[str, Any] | None, ProviderAttempt]:
        started_at = self._clock()
        start = time.perf_counter()
        payload = None
        error: str | None = None

        try:
            async with asyncio.timeout(self._attempt_timeout):
                payload = await self._call(provider, prompt, on_progress)
        except TimeoutError:
            outcome = AttemptOutcome.TIMEOUT
            error = f"no result within {self._attempt_timeout:.1f}s"
        except ProviderError as e:
            outcome = AttemptOutcome.NETWORK_ERROR
            error = str(e)
        except Exception as e:
            logger.exception("Provider %s raised an unexpected error", provider.name)
            outcome = AttemptOutcome.NETWORK_ERROR
            error = f"{type(e).__name__}: {e}"
        else:
            outcome = AttemptOutcome.SUCCESS if payload is not None else AttemptOutcome.VALIDATION_FAILED

        attempt = ProviderAttempt(
            provider=provider.name,
            started_at=started_at,
            outcome=outcome,
            duration_ms=(time.perf_counter() - start) * 1000,
            error=error,
        )
        safe_emit(self._telemetry, lambda sink: sink.record_attempt(self._content_type.value, attempt))
        return payload, attempt

    async def run(self, prompt: str, on_progress: ProgressCallback | None = None) -> ChainOutcome:
        """Run the chain for one request.

        Args:
            prompt: Rendered prompt text sent to each provider.
            on_progress: Called with each provisional payload while streaming.

        Returns:
            ChainOutcome in state SUCCESS (with payload) or EXHAUSTED
        """
        attempts: list[ProviderAttempt] = []
        state = ChainState.IDLE

        for index, provider in enumerate(self._providers):
            state = ChainState.TRYING
            logger.info(
                "Trying provider %d/%d (%s) for %s",
                index + 1,
                len(self._providers),
                provider.name,
                self._content_type.value,
            )
            payload, attempt = await self._attempt(provider, prompt, on_progress)
            attempts.append(attempt)

            if payload is not None:
                logger.info("Provider %s produced valid %s content", provider.name, self._content_type.value)
                return ChainOutcome(ChainState.SUCCESS, payload, provider.name, attempts)

            logger.warning(
                "Provider %s failed (%s): %s",
                provider.name,
                attempt.outcome.value,
                attempt.error or "output never validated",
            )

        if state is ChainState.IDLE:
            logger.warning("No providers configured for %s", self._content_type.value)
        return ChainOutcome(ChainState.EXHAUSTED, None, None, attempts)
