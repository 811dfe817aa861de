"""Background cache warming for common inputs.

The request path only calls ``schedule``, which enqueues a content type and
returns immediately. A single worker task drains the queue and generates
any common request whose key is not cached yet. Each content type is warmed
at most once per process.
"""

import asyncio
import contextlib
import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from generation_pipeline.entities import ContentType, GenerationRequest

if TYPE_CHECKING:
    from .generation_service import GenerationService

logger = logging.getLogger(__name__)

COMMON_JOB_TITLES = (
    "Software Engineer",
    "Product Manager",
    "Data Scientist",
    "Marketing Manager",
    "Sales Representative",
)

COMMON_TRAINING_TITLES = (
    "Leadership Fundamentals",
    "Customer Service Excellence",
    "Project Management Basics",
)


def default_common_requests() -> dict[ContentType, list[GenerationRequest]]:
    return {
        ContentType.PLAN: [
            GenerationRequest.create(ContentType.PLAN, job_title=title) for title in COMMON_JOB_TITLES
        ],
        ContentType.TRAINING_PLAN: [
            GenerationRequest.create(ContentType.TRAINING_PLAN, title=title)
            for title in COMMON_TRAINING_TITLES
        ],
    }


class CacheWarmer:
    """Queue-backed warmer decoupled from the foreground request path."""

    def __init__(
        self,
        service: "GenerationService",
        common_requests: Mapping[ContentType, Sequence[GenerationRequest]] | None = None,
    ) -> None:
        self._service = service
        self._common = default_common_requests() if common_requests is None else dict(common_requests)
        self._queue: asyncio.Queue[ContentType] | None = None
        self._worker: asyncio.Task | None = None
        self._scheduled: set[ContentType] = set()
        self.warmed = 0

    def start(self) -> None:
        """Spawn the worker task; must be called from a running event loop."""
        self._ensure_worker()

    def schedule(self, content_type: ContentType) -> bool:
        """Enqueue a warm pass for ``content_type``; never blocks or raises.

        Returns:
            True if a pass was enqueued, False if already scheduled or nothing to warm
        """
        if content_type in self._scheduled or not self._common.get(content_type):
            return False
        self._scheduled.add(content_type)

        try:
            self._ensure_worker().put_nowait(content_type)
        except RuntimeError as e:
            # no running loop: warming is best effort
            logger.debug("Cache warm-up not scheduled: %s", e)
            self._scheduled.discard(content_type)
            return False
        return True

    def _ensure_worker(self) -> asyncio.Queue[ContentType]:
        loop = asyncio.get_running_loop()
        queue = self._queue
        if queue is None:
            queue = self._queue = asyncio.Queue()
        if self._worker is None or self._worker.done():
            self._worker = loop.create_task(self._run(queue), name="cache-warmer")
        return queue

    async def _run(self, queue: asyncio.Queue[ContentType]) -> None:
        while True:
            content_type = await queue.get()
            try:
                await self.warm(content_type)
            finally:
                queue.task_done()

    async def warm(self, content_type: ContentType) -> int:
        """Generate every uncached common request for ``content_type``.

        Returns:
            Number of entries generated
        """
        generated = 0
        for request in self._common.get(content_type, ()):
            try:
                if await self._service.is_cached(request):
                    continue
                await self._service.generate(request, warm=True)
                generated += 1
            except Exception as e:
                logger.warning("Cache warm-up failed for %s: %s", content_type.value, e)

        self.warmed += generated
        logger.info("Cache warm-up for %s generated %d entries", content_type.value, generated)
        return generated

    async def join(self) -> None:
        """Wait until every scheduled warm pass has finished."""
        if self._queue is not None:
            await self._queue.join()

    async def stop(self) -> None:
        """Cancel the worker task."""
        if self._worker is not None:
            self._worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._worker
            self._worker = None
        self._queue = None
