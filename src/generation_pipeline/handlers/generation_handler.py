"""HTTP handlers for generation operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, streaming bodies and error
handling.
"""

import json
import logging
from collections.abc import AsyncIterator

from fastapi import HTTPException, status
from fastapi.responses import StreamingResponse

from generation_pipeline.dto import (
    GenerationRequestBase,
    GenerationResponse,
    HealthCheckResponse,
    StatsResponse,
)
from generation_pipeline.entities import ContentType, GenerationRequest
from generation_pipeline.errors import GenerationTimeoutError
from generation_pipeline.services import GenerationService, MetricsTelemetry

logger = logging.getLogger(__name__)

NDJSON_MEDIA_TYPE = "application/x-ndjson"


def to_entity(content_type: ContentType, request: GenerationRequestBase) -> GenerationRequest:
    """Convert a request DTO into the internal ``GenerationRequest``."""
    fields = request.model_dump(exclude={"is_premium", "bypass_cache"})
    return GenerationRequest.create(content_type, premium=request.is_premium, **fields)


class GenerationHandler:
    """HTTP handlers for generation operations.

    This handler delegates business logic to GenerationService
    and handles HTTP-specific concerns like:
    - Converting DTOs to entities and results to DTOs
    - Mapping the outer deadline to 504 Gateway Timeout
    - Encoding streamed payloads as newline-delimited JSON

    Example:
        ```python
        handler = GenerationHandler(service=service, telemetry=telemetry)

        @app.post("/generate/plan", response_model=GenerationResponse)
        async def generate_plan(request: PlanRequest):
            return await handler.generate(ContentType.PLAN, request)
        ```
    """

    def __init__(self, service: GenerationService, telemetry: MetricsTelemetry | None = None) -> None:
        """Initialize the generation handler.

        Args:
            service: The generation service for business logic (required).
            telemetry: Metrics collector reported by the stats endpoint.
        """
        self._service = service
        self._telemetry = telemetry

    async def generate(
        self, content_type: ContentType, request: GenerationRequestBase
    ) -> GenerationResponse:
        """Handle POST /generate/{content_type} requests.

        Raises:
            HTTPException: 504 when the request deadline expires, 500 otherwise
        """
        try:
            result = await self._service.generate(
                to_entity(content_type, request), bypass_cache=request.bypass_cache
            )
        except GenerationTimeoutError as e:
            raise HTTPException(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                detail=str(e),
            ) from e
        except Exception as e:
            logger.exception("Generation failed for %s", content_type.value)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to generate {content_type.value}: {e}",
            ) from e

        return GenerationResponse(**result.to_response())

    def stream(self, content_type: ContentType, request: GenerationRequestBase) -> StreamingResponse:
        """Handle POST /generate/{content_type}/stream requests.

        Each line of the body is one JSON object: provisional payloads carry
        ``"partial": true`` and the final line is the full response. Errors
        after the response has started are reported as a final ``error`` line.
        """
        entity = to_entity(content_type, request)
        return StreamingResponse(
            self._ndjson(entity, request.bypass_cache),
            media_type=NDJSON_MEDIA_TYPE,
        )

    async def _ndjson(self, request: GenerationRequest, bypass_cache: bool) -> AsyncIterator[str]:
        try:
            async for item in self._service.stream(request, bypass_cache=bypass_cache):
                yield json.dumps(item) + "\n"
        except GenerationTimeoutError as e:
            yield json.dumps({"error": str(e), "status": status.HTTP_504_GATEWAY_TIMEOUT}) + "\n"
        except Exception as e:
            logger.exception("Streaming generation failed for %s", request.content_type.value)
            yield json.dumps({"error": str(e), "status": status.HTTP_500_INTERNAL_SERVER_ERROR}) + "\n"

    async def clear_cache(self, content_type: ContentType) -> dict:
        """Handle DELETE /cache/{content_type} requests.

        Returns:
            Dict with clear operation result
        """
        try:
            count = await self._service.clear(content_type)
        except Exception as e:
            logger.exception("Cache clear failed for %s", content_type.value)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to clear cache: {e}",
            ) from e

        return {
            "success": True,
            "content_type": content_type.value,
            "deleted_count": count,
        }

    async def get_stats(self) -> StatsResponse:
        """Handle GET /stats requests."""
        cache_stats = await self._service.get_stats()
        performance = self._telemetry.metrics.to_dict() if self._telemetry else {}
        return StatsResponse(cache=cache_stats, performance=performance)

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        is_healthy = await self._service.is_healthy()
        stats = await self._service.get_stats()

        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            cache_healthy=is_healthy,
            providers=stats.get("chains", {}),
        )
