"""Exception taxonomy for the generation pipeline.

Provider errors are transient from the caller's point of view: the chain
advances to the next provider. Only ``GenerationTimeoutError`` is ever
surfaced to the HTTP caller.
"""


class GenerationPipelineError(Exception):
    """Base exception for the generation pipeline."""


class ProviderError(GenerationPipelineError):
    """Raised by a provider client when a generation call fails."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class MissingCredentialsError(ProviderError):
    """Raised when a provider has no API key configured or the key is rejected."""


class RateLimitedError(ProviderError):
    """Raised when a provider answers with HTTP 429."""


class ProviderNetworkError(ProviderError):
    """Raised on transport failures and unexpected HTTP status codes."""


class MalformedResponseError(ProviderError):
    """Raised when a provider response body cannot be decoded."""


class CacheStoreError(GenerationPipelineError):
    """Raised by cache repositories when the backing store fails."""


class GenerationTimeoutError(GenerationPipelineError):
    """Raised when the overall request deadline expires without a result."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"Generation took too long (deadline {timeout:.1f}s)")
        self.timeout = timeout
