"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import GenerationRequestBase, PlanRequest, ResumeRewriteRequest, TrainingPlanRequest
from .responses import GenerationResponse, HealthCheckResponse, StatsResponse

__all__ = [
    "GenerationRequestBase",
    "PlanRequest",
    "TrainingPlanRequest",
    "ResumeRewriteRequest",
    "GenerationResponse",
    "HealthCheckResponse",
    "StatsResponse",
]
