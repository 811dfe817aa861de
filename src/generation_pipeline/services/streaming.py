"""Incremental parse-and-validate loop over a provider's token stream.

Chunks are appended to a buffer in arrival order. At most once every
``parse_interval`` seconds (and once more when the stream ends, cleanly or
with a provider error) the buffer goes through ``extract_candidate`` ->
``json.loads`` -> ``is_valid``. Most intermediate buffers are incomplete
JSON, so failed attempts are expected and only logged at debug level. The
latest valid payload wins.
"""

import json
import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from generation_pipeline.config import settings
from generation_pipeline.entities import ContentType
from generation_pipeline.errors import ProviderError

from .extractor import extract_candidate
from .validator import is_valid

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[dict[str, Any]], Awaitable[None]]


def parse_candidate(text: str, content_type: ContentType) -> dict[str, Any] | None:
    """Extract, decode and validate ``text``; None when any step fails."""
    candidate = extract_candidate(text)
    if candidate is None:
        return None
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.debug("Candidate not yet decodable (%d chars): %s", len(candidate), e)
        return None
    if not is_valid(parsed, content_type):
        logger.debug("Candidate decoded but does not match the %s schema", content_type.value)
        return None
    return parsed


@dataclass
class StreamOutcome:
    """Result of consuming one provider stream."""

    payload: dict[str, Any] | None
    chunks: int
    parse_attempts: int

    @property
    def succeeded(self) -> bool:
        return self.payload is not None


class StreamingConsumer:
    """Drives one provider stream to a validated payload (or none)."""

    def __init__(
        self,
        content_type: ContentType,
        parse_interval: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._content_type = content_type
        self._parse_interval = settings.stream_parse_interval if parse_interval is None else parse_interval
        self._clock = clock
        self._on_progress = on_progress

    async def _accept(self, payload: dict[str, Any]) -> None:
        if self._on_progress is not None:
            await self._on_progress(payload)

    async def consume(self, chunks: AsyncIterator[str]) -> StreamOutcome:
        """Consume ``chunks`` until the stream ends.

        The buffer gets one last parse whether the stream ends cleanly or
        with a provider error. The error propagates only when no valid
        payload came out of the stream at all.
        """
        buffer: list[str] = []
        payload: dict[str, Any] | None = None
        chunk_count = 0
        attempts = 0
        last_attempt: float | None = None
        dirty = False
        error: ProviderError | None = None

        try:
            async for chunk in chunks:
                if not chunk:
                    continue
                buffer.append(chunk)
                chunk_count += 1
                dirty = True

                now = self._clock()
                if last_attempt is not None and now - last_attempt < self._parse_interval:
                    continue

                last_attempt = now
                attempts += 1
                dirty = False
                parsed = parse_candidate("".join(buffer), self._content_type)
                if parsed is not None:
                    payload = parsed
                    await self._accept(parsed)
        except ProviderError as e:
            error = e
        finally:
            aclose = getattr(chunks, "aclose", None)
            if aclose is not None:
                await aclose()

        if dirty:
            attempts += 1
            parsed = parse_candidate("".join(buffer), self._content_type)
            if parsed is not None:
                payload = parsed
                await self._accept(parsed)

        if error is not None:
            if payload is None:
                raise error
            logger.warning("Stream ended early (%s); keeping last valid payload", error)

        return StreamOutcome(payload=payload, chunks=chunk_count, parse_attempts=attempts)
