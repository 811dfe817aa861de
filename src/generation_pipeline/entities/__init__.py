"""Domain entities for internal representation.

These are pure dataclasses used internally by services and repositories.
They are NOT used for API contracts - use DTOs from the dto package for that.
"""

from .cached_entry import CachedEntry
from .generation_request import ContentType, GenerationRequest
from .generation_result import GenerationResult
from .provider_attempt import AttemptOutcome, ProviderAttempt

__all__ = [
    "AttemptOutcome",
    "CachedEntry",
    "ContentType",
    "GenerationRequest",
    "GenerationResult",
    "ProviderAttempt",
]
