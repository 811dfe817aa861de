"""
Tests for the incremental streaming consumer.
"""

import json

import pytest

from generation_pipeline.entities import ContentType
from generation_pipeline.errors import ProviderNetworkError
from generation_pipeline.services.streaming import StreamingConsumer, parse_candidate


async def chunks_of(parts, error=None):
    for part in parts:
        yield part
    if error is not None:
        raise error


def split_in_three(text: str) -> list[str]:
    third = len(text) // 3
    return [text[:third], text[third : 2 * third], text[2 * third :]]


async def test_stream_becomes_valid_only_after_last_chunk(valid_plan_text):
    progress = []

    async def on_progress(payload):
        progress.append(payload)

    consumer = StreamingConsumer(ContentType.PLAN, parse_interval=0, on_progress=on_progress)
    outcome = await consumer.consume(chunks_of(split_in_three(valid_plan_text)))

    assert outcome.succeeded
    assert outcome.chunks == 3
    assert outcome.parse_attempts == 3
    assert outcome.payload == json.loads(valid_plan_text)
    assert len(progress) == 1


async def test_fenced_stream_with_commentary(valid_plan_text):
    parts = ["Here is the plan:\n```json\n", valid_plan_text, "\n```\nGood luck!"]
    outcome = await StreamingConsumer(ContentType.PLAN, parse_interval=0).consume(chunks_of(parts))
    assert outcome.succeeded


async def test_parse_attempts_are_throttled(clock, valid_plan_text):
    parts = [valid_plan_text[i : i + 20] for i in range(0, len(valid_plan_text), 20)]
    consumer = StreamingConsumer(ContentType.PLAN, parse_interval=1.0, clock=clock)

    outcome = await consumer.consume(chunks_of(parts))

    # one immediate attempt, then one more at end of stream
    assert outcome.parse_attempts == 2
    assert outcome.succeeded


async def test_later_invalid_buffer_keeps_previous_payload(valid_plan):
    first = json.dumps(valid_plan)
    updated = dict(valid_plan, questions=[f"Better question {i}?" for i in range(12)])
    parts = [first, " ", json.dumps(updated)]

    outcome = await StreamingConsumer(ContentType.PLAN, parse_interval=0).consume(
        chunks_of(["[", *parts, "]"])
    )
    # the buffer is now an array of two objects, which is not a valid plan,
    # so the earlier provisional payload is kept
    assert outcome.payload == valid_plan


async def test_stream_that_never_validates():
    outcome = await StreamingConsumer(ContentType.PLAN, parse_interval=0).consume(
        chunks_of(['{"sections": [', '], "questions": []}'])
    )
    assert not outcome.succeeded
    assert outcome.payload is None


async def test_mid_stream_error_without_payload_propagates():
    consumer = StreamingConsumer(ContentType.PLAN, parse_interval=0)
    with pytest.raises(ProviderNetworkError):
        await consumer.consume(chunks_of(['{"sections"'], error=ProviderNetworkError("x", "reset")))


async def test_mid_stream_error_after_valid_payload_keeps_it(valid_plan_text):
    consumer = StreamingConsumer(ContentType.PLAN, parse_interval=0)
    outcome = await consumer.consume(
        chunks_of([valid_plan_text], error=ProviderNetworkError("x", "reset"))
    )
    assert outcome.succeeded


async def test_error_inside_throttle_window_still_parses_the_buffer(clock, valid_plan_text):
    half = len(valid_plan_text) // 2
    parts = [valid_plan_text[:half], valid_plan_text[half:]]
    consumer = StreamingConsumer(ContentType.PLAN, parse_interval=0.5, clock=clock)

    outcome = await consumer.consume(chunks_of(parts, error=ProviderNetworkError("x", "reset")))

    assert outcome.payload == json.loads(valid_plan_text)
    assert outcome.parse_attempts == 2


async def test_error_after_unparseable_tail_still_propagates(clock, valid_plan_text):
    consumer = StreamingConsumer(ContentType.PLAN, parse_interval=0.5, clock=clock)
    with pytest.raises(ProviderNetworkError):
        await consumer.consume(
            chunks_of(["{", valid_plan_text[:-1]], error=ProviderNetworkError("x", "reset"))
        )


def test_parse_candidate_rejects_decodable_but_invalid():
    assert parse_candidate('{"sections": [], "questions": []}', ContentType.PLAN) is None
    assert parse_candidate("not json at all", ContentType.PLAN) is None
