from collections import Counter
from dataclasses import dataclass, field

from generation_pipeline.entities import AttemptOutcome, ProviderAttempt


@dataclass
class GenerationMetrics:
    """Track cache and provider metrics for generation requests."""

    cache_hits: int = 0
    cache_misses: int = 0
    fallbacks: int = 0
    cache_errors: Counter = field(default_factory=Counter)
    provider_calls: int = 0
    total_provider_time_ms: float = 0.0
    outcomes: Counter = field(default_factory=Counter)

    @property
    def total_lookups(self) -> int:
        return self.cache_hits + self.cache_misses

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.total_lookups == 0:
            return 0.0
        return self.cache_hits / self.total_lookups

    @property
    def avg_provider_time_ms(self) -> float:
        """Calculate average provider attempt duration."""
        if self.provider_calls == 0:
            return 0.0
        return self.total_provider_time_ms / self.provider_calls

    def record_hit(self) -> None:
        self.cache_hits += 1

    def record_miss(self) -> None:
        self.cache_misses += 1

    def record_attempt(self, attempt: ProviderAttempt) -> None:
        """Record one provider attempt and its outcome."""
        self.provider_calls += 1
        self.total_provider_time_ms += attempt.duration_ms
        self.outcomes[f"{attempt.provider}:{attempt.outcome.value}"] += 1

    def record_fallback(self) -> None:
        self.fallbacks += 1

    def record_cache_error(self, operation: str) -> None:
        self.cache_errors[operation] += 1

    def outcome_count(self, provider: str, outcome: AttemptOutcome) -> int:
        return self.outcomes[f"{provider}:{outcome.value}"]

    def to_dict(self) -> dict[str, float | int | dict[str, int]]:
        """Convert metrics to dictionary."""
        return {
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "hit_rate": self.hit_rate,
            "fallbacks": self.fallbacks,
            "cache_errors": dict(self.cache_errors),
            "provider_calls": self.provider_calls,
            "avg_provider_time_ms": self.avg_provider_time_ms,
            "outcomes": dict(self.outcomes),
        }
