"""Generation result domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .generation_request import ContentType
from .provider_attempt import ProviderAttempt


@dataclass
class GenerationResult:
    """Outcome of one generation request.

    Attributes:
        content_type: Content family of the payload
        content: The validated structured content
        cached: Served from the cache store
        fallback: Produced by the fallback generator (now or when cached)
        provider: Provider name, ``"fallback"`` or ``"cache"``
        generated_at: Unix timestamp of when the content was produced
        attempts: Provider attempts made for this request
    """

    content_type: ContentType
    content: dict[str, Any]
    cached: bool
    fallback: bool
    provider: str
    generated_at: float
    attempts: list[ProviderAttempt] = field(default_factory=list)

    @property
    def generated_at_iso(self) -> str:
        return datetime.fromtimestamp(self.generated_at, tz=timezone.utc).isoformat()

    def to_response(self) -> dict[str, Any]:
        """Flatten into the outbound JSON shape."""
        return {
            "content_type": self.content_type.value,
            "content": self.content,
            "cached": self.cached,
            "fallback": self.fallback,
            "provider": self.provider,
            "generated_at": self.generated_at_iso,
        }
