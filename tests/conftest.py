"""
Shared fixtures: scripted providers, a fake clock and valid payloads.
"""

import asyncio
import json

import pytest

from generation_pipeline.repositories import InMemoryCacheRepository
from generation_pipeline.services import MetricsTelemetry


class FakeClock:
    """Manually advanced clock, usable wherever a ``time.time`` is injected."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedProvider:
    """GenerationProvider stub that replays a fixed script.

    Single-shot providers return ``text``; streaming providers yield
    ``chunks`` one by one. ``error`` is raised after the script has played
    out, and ``delay`` is slept before every response or chunk.
    """

    def __init__(
        self,
        name: str,
        text: str | None = None,
        chunks: list[str] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self.text = text
        self.chunks = chunks
        self.error = error
        self.delay = delay
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def supports_streaming(self) -> bool:
        return self.chunks is not None

    async def generate(self, prompt, params) -> str:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text or ""

    async def stream(self, prompt, params):
        self.calls += 1
        for chunk in self.chunks or []:
            if self.delay:
                await asyncio.sleep(self.delay)
            yield chunk
        if self.error is not None:
            raise self.error


def plan_payload(questions: int = 10) -> dict:
    return {
        "sections": [
            {"type": "timeline", "title": "Timeline Overview", "content": "Start a week ahead."},
            {"type": "phase", "title": "Research Phase", "items": ["Read the company blog"]},
        ],
        "questions": [f"Question {i}?" for i in range(1, questions + 1)],
    }


def training_plan_payload() -> dict:
    return {
        "title": "Leadership Fundamentals",
        "sections": [
            {"type": "overview", "title": "Overview", "content": "A short course."},
            {"type": "module", "title": "Module 1", "items": ["Delegation basics"]},
        ],
        "objectives": ["Delegate", "Give feedback", "Run one-on-ones"],
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_provider():
    """Factory for ScriptedProvider instances."""
    return ScriptedProvider


@pytest.fixture
def valid_plan():
    return plan_payload()


@pytest.fixture
def valid_plan_text(valid_plan):
    return json.dumps(valid_plan)


@pytest.fixture
def valid_training_plan():
    return training_plan_payload()


@pytest.fixture
def memory_cache(clock):
    return InMemoryCacheRepository(clock=clock)


@pytest.fixture
def telemetry():
    return MetricsTelemetry()
