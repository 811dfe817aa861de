"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class GenerationRequestBase(BaseModel):
    """Fields shared by every generation request.

    The handler converts these DTOs into ``GenerationRequest`` entities.
    """

    is_premium: bool = Field(False, description="Whether the caller is on the premium tier")
    bypass_cache: bool = Field(
        False,
        description="Skip the cache lookup (honored for premium requests only)",
    )


class PlanRequest(GenerationRequestBase):
    """Request DTO for an interview preparation plan."""

    job_title: str = Field(..., description="Target job title", min_length=1)
    company: str | None = Field(None, description="Company name")
    industry: str | None = Field(None, description="Industry or sector")
    job_level: str | None = Field(None, description="Seniority, e.g. 'junior' or 'senior'")
    description: str | None = Field(None, description="Free-text job description")
    required_skills: list[str] = Field(
        default_factory=list,
        description="Skills the role requires",
    )
    resume_text: str | None = Field(None, description="Candidate resume as plain text")


class TrainingPlanRequest(GenerationRequestBase):
    """Request DTO for a training plan."""

    title: str = Field(..., description="Training title", min_length=1)
    description: str | None = Field(None, description="What the training should cover")
    objectives: list[str] = Field(
        default_factory=list,
        description="Learning objectives; stock objectives are used when empty",
    )
    target_audience_level: str | None = Field(None, description="e.g. 'beginner'")
    duration: str | None = Field(None, description="e.g. '2 weeks'")
    learning_style: str | None = Field(None, description="e.g. 'hands-on'")
    industry: str | None = Field(None, description="Industry or sector")
    materials_required: list[str] = Field(
        default_factory=list,
        description="Materials participants need",
    )


class ResumeRewriteRequest(GenerationRequestBase):
    """Request DTO for a targeted resume rewrite."""

    resume_text: str = Field(..., description="Resume to rewrite", min_length=1)
    job_title: str | None = Field(None, description="Role the resume should target")
    job_description: str | None = Field(None, description="Free-text job description")
    required_skills: list[str] = Field(
        default_factory=list,
        description="Skills the role requires",
    )
