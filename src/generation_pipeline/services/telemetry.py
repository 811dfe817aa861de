"""Telemetry sinks and safe emission."""

import logging
from collections.abc import Callable

from generation_pipeline.entities import ProviderAttempt
from generation_pipeline.models import GenerationMetrics
from generation_pipeline.protocols import TelemetrySink

logger = logging.getLogger(__name__)


class MetricsTelemetry:
    """In-process TelemetrySink backed by ``GenerationMetrics``."""

    def __init__(self, metrics: GenerationMetrics | None = None) -> None:
        self.metrics = metrics or GenerationMetrics()

    def record_cache(self, namespace: str, hit: bool) -> None:
        if hit:
            self.metrics.record_hit()
        else:
            self.metrics.record_miss()

    def record_attempt(self, content_type: str, attempt: ProviderAttempt) -> None:
        self.metrics.record_attempt(attempt)

    def record_fallback(self, content_type: str) -> None:
        self.metrics.record_fallback()

    def record_cache_error(self, namespace: str, operation: str) -> None:
        self.metrics.record_cache_error(operation)

    def reset(self) -> None:
        self.metrics = GenerationMetrics()


def safe_emit(sink: TelemetrySink | None, emit: Callable[[TelemetrySink], None]) -> None:
    """Send an event to ``sink``; sink failures never reach the caller."""
    if sink is None:
        return
    try:
        emit(sink)
    except Exception as e:
        logger.debug("Telemetry sink failed: %s", e)
