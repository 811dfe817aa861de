"""Telemetry sink protocol."""

from typing import Protocol, runtime_checkable

from generation_pipeline.entities import ProviderAttempt


@runtime_checkable
class TelemetrySink(Protocol):
    """Receives cache and provider events.

    Sinks may raise; callers go through ``services.telemetry.safe_emit`` so
    a failing sink never affects a response.
    """

    def record_cache(self, namespace: str, hit: bool) -> None:
        ...

    def record_attempt(self, content_type: str, attempt: ProviderAttempt) -> None:
        ...

    def record_fallback(self, content_type: str) -> None:
        ...

    def record_cache_error(self, namespace: str, operation: str) -> None:
        """Called when a cache ``get`` or ``set`` failed and was degraded."""
        ...
