#!/usr/bin/env python3
"""
Demo script for the generation pipeline.

Runs the configured provider chains against an in-memory cache. Providers
without an API key fail immediately, so with no keys set the demo shows the
fallback path followed by a cache hit.
"""

import asyncio
import time

from generation_pipeline.api.dependencies import build_providers
from generation_pipeline.config import configure_logging
from generation_pipeline.entities import ContentType, GenerationRequest
from generation_pipeline.repositories import InMemoryCacheRepository
from generation_pipeline.services import GenerationService, MetricsTelemetry


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_generate(service: GenerationService) -> None:
    """Generate a plan twice: the second call is served from the cache."""
    print_section("Generate and Cache")

    request = GenerationRequest.create(
        ContentType.PLAN,
        job_title="Software Engineer",
        company="Acme",
        required_skills=["Python", "SQL"],
    )

    for label in ("first call", "second call"):
        start = time.time()
        result = await service.generate(request)
        duration = (time.time() - start) * 1000
        print(f"\n  {label}: provider={result.provider} cached={result.cached} fallback={result.fallback}")
        print(f"  Time: {duration:.2f}ms")
        for attempt in result.attempts:
            print(f"    - {attempt.provider}: {attempt.outcome.value} ({attempt.error or 'ok'})")

    sections = [section["title"] for section in result.content["sections"]]
    print(f"\n  Sections: {', '.join(sections)}")
    print(f"  Questions: {len(result.content['questions'])}")


async def demo_stream(service: GenerationService) -> None:
    """Stream a training plan and show every provisional payload."""
    print_section("Streaming")

    request = GenerationRequest.create(ContentType.TRAINING_PLAN, title="Data Literacy", premium=True)
    async for item in service.stream(request, bypass_cache=True):
        kind = "partial" if item["partial"] else "final"
        print(f"  [{kind}] {len(item['content'].get('sections', []))} sections")


async def main() -> None:
    """Run all demos."""
    configure_logging("WARNING")
    print("\n🚀 Generation Pipeline Demo")
    print("=" * 70)

    telemetry = MetricsTelemetry()
    service = GenerationService.create(
        cache=InMemoryCacheRepository(),
        providers=build_providers(),
        telemetry=telemetry,
        warming_enabled=False,
    )

    try:
        await demo_generate(service)
        await demo_stream(service)

        print_section("Metrics")
        for name, value in telemetry.metrics.to_dict().items():
            print(f"  {name}: {value}")

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)
    finally:
        await service.close()


if __name__ == "__main__":
    asyncio.run(main())
