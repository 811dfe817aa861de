"""
Tests for the deterministic fallback generator.
"""

import random
import socket
import string

import httpx
import pytest

from generation_pipeline.entities import ContentType, GenerationRequest
from generation_pipeline.services.fallback import fallback
from generation_pipeline.services.validator import is_valid


@pytest.fixture
def no_network(monkeypatch):
    """Fail the test on any attempt to open a connection."""

    def forbidden(*args, **kwargs):
        raise AssertionError("network access attempted")

    monkeypatch.setattr(socket.socket, "connect", forbidden)
    monkeypatch.setattr(socket, "create_connection", forbidden)
    monkeypatch.setattr(httpx.AsyncClient, "send", forbidden)
    monkeypatch.setattr(httpx.Client, "send", forbidden)


FIELD_NAMES = {
    ContentType.PLAN: ["job_title", "company", "industry", "job_level", "description", "required_skills"],
    ContentType.TRAINING_PLAN: [
        "title",
        "description",
        "objectives",
        "target_audience_level",
        "duration",
        "learning_style",
        "industry",
        "materials_required",
    ],
    ContentType.RESUME_REWRITE: ["resume_text", "job_title", "job_description", "required_skills"],
}


def random_value(rng: random.Random):
    alphabet = string.ascii_letters + string.digits + " {}[]\"',.-\n\t"
    choice = rng.randrange(5)
    if choice == 0:
        return ""
    if choice == 1:
        return [rng.choice(["", " ", "Python", "SQL", "{x}"]) for _ in range(rng.randrange(5))]
    if choice == 2:
        return "   "
    return "".join(rng.choice(alphabet) for _ in range(rng.randrange(1, 300)))


def random_request(rng: random.Random) -> GenerationRequest:
    content_type = rng.choice(list(ContentType))
    names = FIELD_NAMES[content_type]
    fields = {name: random_value(rng) for name in rng.sample(names, rng.randrange(len(names) + 1))}
    return GenerationRequest.create(content_type, premium=rng.random() < 0.5, **fields)


@pytest.mark.parametrize("seed", range(200))
def test_fallback_is_always_valid_and_offline(no_network, seed):
    request = random_request(random.Random(seed))
    content = fallback(request)
    assert is_valid(content, request.content_type)


@pytest.mark.parametrize("content_type", list(ContentType))
def test_fallback_is_deterministic(content_type):
    request = GenerationRequest.create(content_type, job_title="Engineer", title="Onboarding")
    assert fallback(request) == fallback(request)


def test_plan_fallback_shape():
    content = fallback(GenerationRequest.create(ContentType.PLAN, job_title="Software Engineer"))

    titles = [section["title"] for section in content["sections"]]
    assert titles[0] == "Preparation Timeline"
    assert "Follow-up" not in titles
    assert len(content["questions"]) == 10
    assert "Software Engineer" in content["questions"][0]


def test_premium_plan_gets_follow_up_and_more_questions():
    content = fallback(
        GenerationRequest.create(ContentType.PLAN, premium=True, job_title="Data Scientist")
    )

    titles = [section["title"] for section in content["sections"]]
    assert "Follow-up" in titles
    assert len(content["questions"]) == 20


def test_plan_fallback_lists_required_skills():
    content = fallback(
        GenerationRequest.create(ContentType.PLAN, job_title="Analyst", required_skills="SQL, Excel")
    )
    skills = next(s for s in content["sections"] if s["title"] == "Skills to Demonstrate")
    assert len(skills["items"]) == 2


def test_training_plan_keeps_given_objectives_and_pads_to_three():
    content = fallback(
        GenerationRequest.create(ContentType.TRAINING_PLAN, title="Sales", objectives=["Close deals"])
    )
    assert content["objectives"][0] == "Close deals"
    assert len(content["objectives"]) == 3


def test_premium_training_plan_sections():
    content = fallback(GenerationRequest.create(ContentType.TRAINING_PLAN, premium=True, title="Sales"))
    titles = [section["title"] for section in content["sections"]]
    assert "Advanced Resources" in titles
    assert "Certification Path" in titles


def test_resume_rewrite_fallback():
    content = fallback(
        GenerationRequest.create(ContentType.RESUME_REWRITE, premium=True, resume_text="...")
    )
    titles = [section["title"] for section in content["sections"]]
    assert titles[0] == "Professional Summary"
    assert "Cover Letter Outline" in titles
    assert len(content["changes"]) >= 3
