"""Provider attempt domain entity."""

from dataclasses import dataclass
from enum import Enum


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    VALIDATION_FAILED = "validation-failed"
    NETWORK_ERROR = "network-error"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class ProviderAttempt:
    """Record of one provider call made while resolving a request.

    Only used for logging and telemetry; never persisted.
    """

    provider: str
    started_at: float
    outcome: AttemptOutcome
    duration_ms: float = 0.0
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is AttemptOutcome.SUCCESS
