"""
Tests for the generation pipeline API.
"""

import json

import pytest
from fastapi.testclient import TestClient

from generation_pipeline.api.app import app
from generation_pipeline.api.dependencies import build_providers, get_handler
from generation_pipeline.config import Settings
from generation_pipeline.entities import ContentType
from generation_pipeline.handlers import GenerationHandler
from generation_pipeline.repositories import InMemoryCacheRepository
from generation_pipeline.services import GenerationService, MetricsTelemetry


def make_client(providers, **kwargs) -> TestClient:
    telemetry = MetricsTelemetry()
    options = {"parse_interval": 0, "warming_enabled": False, "attempt_timeout": 5.0}
    options.update(kwargs)
    service = GenerationService.create(
        cache=InMemoryCacheRepository(),
        providers=providers,
        telemetry=telemetry,
        **options,
    )
    handler = GenerationHandler(service=service, telemetry=telemetry)
    app.dependency_overrides[get_handler] = lambda: handler
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_overrides():
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_provider, valid_plan_text):
    """Create a test client whose plan chain has one working provider."""
    return make_client({ContentType.PLAN: [make_provider("gemini", text=valid_plan_text)]})


@pytest.fixture
def offline_client():
    """Create a test client with no providers, so every request falls back."""
    return make_client({})


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Generation Pipeline API"
    assert "/generate/plan" in data["endpoints"]["generate"]


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["providers"]["plan"] == ["gemini"]


def test_generate_plan_then_cached(client, valid_plan):
    """Test plan generation and the cached repeat."""
    body = {"job_title": "Software Engineer", "required_skills": ["Python"]}

    first = client.post("/generate/plan", json=body)
    assert first.status_code == 200
    data = first.json()
    assert data["content_type"] == "plan"
    assert data["provider"] == "gemini"
    assert data["cached"] is False
    assert data["content"] == valid_plan

    second = client.post("/generate/plan", json=body).json()
    assert second["cached"] is True
    assert second["content"] == data["content"]


def test_generate_plan_requires_job_title(client):
    response = client.post("/generate/plan", json={"company": "Acme"})
    assert response.status_code == 422


def test_fallback_endpoints(offline_client):
    """Every content type still answers when no provider is available."""
    requests = {
        "/generate/plan": {"job_title": "Software Engineer"},
        "/generate/training-plan": {"title": "Leadership", "is_premium": True},
        "/generate/resume-rewrite": {"resume_text": "Ten years of retail management."},
    }
    for path, body in requests.items():
        response = offline_client.post(path, json=body)
        assert response.status_code == 200, path
        data = response.json()
        assert data["fallback"] is True
        assert data["provider"] == "fallback"

    plan = offline_client.post("/generate/plan", json=requests["/generate/plan"]).json()
    assert plan["content"]["sections"][0]["title"] == "Preparation Timeline"
    assert len(plan["content"]["questions"]) >= 10


def test_stream_plan(make_provider, valid_plan_text):
    third = len(valid_plan_text) // 3
    chunks = [valid_plan_text[:third], valid_plan_text[third : 2 * third], valid_plan_text[2 * third :]]
    client = make_client({ContentType.PLAN: [make_provider("openrouter", chunks=chunks)]})

    response = client.post("/generate/plan/stream", json={"job_title": "Software Engineer"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/x-ndjson")
    lines = [json.loads(line) for line in response.text.splitlines() if line]
    assert lines[0]["partial"] is True
    assert lines[-1]["partial"] is False
    assert lines[-1]["provider"] == "openrouter"


def test_timeout_maps_to_504(make_provider, valid_plan_text):
    slow = make_provider("gemini", text=valid_plan_text, delay=2.0)
    client = make_client({ContentType.PLAN: [slow]}, request_timeout=0.05)

    response = client.post("/generate/plan", json={"job_title": "Software Engineer"})

    assert response.status_code == 504
    assert "took too long" in response.json()["detail"]


def test_stream_timeout_reports_error_line(make_provider, valid_plan_text):
    slow = make_provider("gemini", text=valid_plan_text, delay=2.0)
    client = make_client({ContentType.PLAN: [slow]}, request_timeout=0.05)

    response = client.post("/generate/plan/stream", json={"job_title": "Software Engineer"})

    last = json.loads(response.text.splitlines()[-1])
    assert last["status"] == 504


def test_get_stats(offline_client):
    """Test stats endpoint."""
    offline_client.post("/generate/resume-rewrite", json={"resume_text": "Cashier"})
    offline_client.post("/generate/resume-rewrite", json={"resume_text": "Cashier"})

    response = offline_client.get("/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["performance"]["cache_hits"] == 1
    assert data["performance"]["cache_misses"] == 1
    assert data["performance"]["fallbacks"] == 1
    assert data["cache"]["total_entries"] == 1


def test_clear_cache_for_one_content_type(offline_client):
    offline_client.post("/generate/resume-rewrite", json={"resume_text": "Cashier"})

    response = offline_client.delete("/cache/resume-rewrite")
    assert response.status_code == 200
    assert response.json()["deleted_count"] == 1

    again = offline_client.post("/generate/resume-rewrite", json={"resume_text": "Cashier"}).json()
    assert again["cached"] is False

    assert offline_client.delete("/cache/unknown").status_code == 422


def test_build_providers_shares_instances():
    settings = Settings(
        plan_provider_order=("gemini", "groq"),
        training_plan_provider_order=("groq",),
        resume_provider_order=(),
    )
    providers = build_providers(settings)

    assert [p.name for p in providers[ContentType.PLAN]] == ["gemini", "groq"]
    assert providers[ContentType.PLAN][1] is providers[ContentType.TRAINING_PLAN][0]
    assert providers[ContentType.RESUME_REWRITE] == []
