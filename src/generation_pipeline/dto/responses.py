"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class GenerationResponse(BaseModel):
    """Response DTO for a generation request."""

    content_type: str = Field(..., description="'plan', 'training-plan' or 'resume-rewrite'")
    content: dict[str, Any] = Field(..., description="Validated structured content")
    cached: bool = Field(..., description="Whether the content was served from the cache")
    fallback: bool = Field(
        ...,
        description="Whether the content came from the deterministic fallback generator",
    )
    provider: str = Field(..., description="Provider name, 'fallback' or 'cache'")
    generated_at: str = Field(..., description="ISO 8601 timestamp of generation")


class StatsResponse(BaseModel):
    """Response DTO for pipeline statistics."""

    cache: dict[str, Any] = Field(..., description="Cache store statistics and TTLs")
    performance: dict[str, Any] = Field(..., description="Hit rate and provider outcome counts")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the cache backend is reachable")
    providers: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Configured provider order per content type",
    )
