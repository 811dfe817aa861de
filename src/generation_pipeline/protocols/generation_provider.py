"""Text generation provider protocol.

Defines the interface for any external text-generation backend. A provider
only handles transport: it turns a prompt into text (or a stream of text
fragments) and raises a ``ProviderError`` subclass on failure. It knows
nothing about caching, validation or fallback.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class GenerationParams:
    """Sampling parameters sent with every prompt."""

    max_tokens: int = 4000
    temperature: float = 0.7


@runtime_checkable
class GenerationProvider(Protocol):
    """Protocol for generation backends.

    Providers that cannot stream still implement ``stream`` (usually by
    raising) but report ``supports_streaming = False`` so the orchestrator
    uses ``generate`` instead.
    """

    @property
    def name(self) -> str:
        """Short identifier used in logs and telemetry (e.g. "gemini")."""
        ...

    @property
    def supports_streaming(self) -> bool:
        """Whether ``stream`` yields incremental text fragments."""
        ...

    async def generate(self, prompt: str, params: GenerationParams) -> str:
        """Generate a complete response.

        Raises:
            ProviderError: On missing credentials, rate limits, network
                failures or malformed responses
        """
        ...

    def stream(self, prompt: str, params: GenerationParams) -> AsyncIterator[str]:
        """Generate a response as a sequence of text fragments.

        Raises:
            ProviderError: As for ``generate``, possibly mid-stream
        """
        ...
