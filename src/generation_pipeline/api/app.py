from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from generation_pipeline.api.dependencies import HandlerDep, lifespan
from generation_pipeline.config import settings
from generation_pipeline.dto import (
    GenerationResponse,
    HealthCheckResponse,
    PlanRequest,
    ResumeRewriteRequest,
    StatsResponse,
    TrainingPlanRequest,
)
from generation_pipeline.entities import ContentType

app = FastAPI(
    title="Generation Pipeline API",
    description="Resilient structured content generation with provider fallback and caching",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Generation Pipeline API",
        "version": "0.1.0",
        "description": "Resilient structured content generation with provider fallback and caching",
        "endpoints": {
            "generate": [f"/generate/{content_type.value}" for content_type in ContentType],
            "stream": [f"/generate/{content_type.value}/stream" for content_type in ContentType],
            "stats": "/stats",
            "clear": "/cache/{content_type}",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@app.get("/stats", response_model=StatsResponse)
async def get_stats(handler: HandlerDep) -> StatsResponse:
    """Get cache statistics and provider metrics."""
    return await handler.get_stats()


@app.delete("/cache/{content_type}", response_model=dict[str, Any])
async def clear_cache(content_type: ContentType, handler: HandlerDep) -> dict[str, Any]:
    """Clear every cached entry of one content type."""
    return await handler.clear_cache(content_type)


@app.post("/generate/plan", response_model=GenerationResponse)
async def generate_plan(request: PlanRequest, handler: HandlerDep) -> GenerationResponse:
    """Generate an interview preparation plan with practice questions."""
    return await handler.generate(ContentType.PLAN, request)


@app.post("/generate/training-plan", response_model=GenerationResponse)
async def generate_training_plan(
    request: TrainingPlanRequest, handler: HandlerDep
) -> GenerationResponse:
    """Generate a training plan."""
    return await handler.generate(ContentType.TRAINING_PLAN, request)


@app.post("/generate/resume-rewrite", response_model=GenerationResponse)
async def generate_resume_rewrite(
    request: ResumeRewriteRequest, handler: HandlerDep
) -> GenerationResponse:
    """Generate a targeted resume rewrite."""
    return await handler.generate(ContentType.RESUME_REWRITE, request)


@app.post("/generate/plan/stream")
async def stream_plan(request: PlanRequest, handler: HandlerDep) -> StreamingResponse:
    """Stream provisional plans as newline-delimited JSON."""
    return handler.stream(ContentType.PLAN, request)


@app.post("/generate/training-plan/stream")
async def stream_training_plan(request: TrainingPlanRequest, handler: HandlerDep) -> StreamingResponse:
    """Stream provisional training plans as newline-delimited JSON."""
    return handler.stream(ContentType.TRAINING_PLAN, request)


@app.post("/generate/resume-rewrite/stream")
async def stream_resume_rewrite(
    request: ResumeRewriteRequest, handler: HandlerDep
) -> StreamingResponse:
    """Stream provisional resume rewrites as newline-delimited JSON."""
    return handler.stream(ContentType.RESUME_REWRITE, request)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "generation_pipeline.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
