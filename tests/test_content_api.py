"""HTTP tests for intake, polling and audio download."""

from __future__ import annotations

import asyncio
import base64
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from app.config.dependencies import get_content_pipeline
from app.main import app
from app.pipelines.blog import ContentPipeline, RetryPolicy
from app.services.keyed_store import BLOG_NAMESPACE, TTS_NAMESPACE, InMemoryKeyedStore
from app.services.stage_queue import InProcessStageQueue

from conftest import FakeSynthesizer, ScriptedTextClient

RECORD = {
    "id": "req-1",
    "article": {
        "title": "Título",
        "introduction": "Intro",
        "sections": [{"heading": "H", "content": "C", "order": 0}],
        "conclusion": None,
        "metadata": {"keywords": ["x"]},
        "status": "completed",
        "generatedAt": "2026-01-01T00:00:00Z",
        "wordCount": 3,
    },
    "status": "completed",
    "generatedAt": "2026-01-01T00:00:00Z",
    "fullContent": "# Título\n\nIntro",
}
PCM = b"\x01\x00\x02\x00"
AUDIO = {
    "requestId": "req-1",
    "audioData": base64.b64encode(PCM).decode("ascii"),
    "format": "pcm",
    "sampleRate": 16000,
    "channels": 1,
    "articleTitle": "Título",
    "generatedAt": "2026-01-01T00:00:05Z",
}


@pytest.fixture
def store() -> InMemoryKeyedStore:
    return InMemoryKeyedStore()


@pytest.fixture
def pipeline(store) -> ContentPipeline:
    return ContentPipeline(
        store=store,
        text_client=ScriptedTextClient(),
        synthesizer=FakeSynthesizer(),
        queue=InProcessStageQueue(),
        retry_policy=RetryPolicy(max_attempts=1, base_delay=0),
    )


@pytest.fixture
def client(pipeline):
    app.dependency_overrides[get_content_pipeline] = lambda: pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_generate_content_is_accepted_immediately(client, store):
    response = client.post(
        "/api/generate-content",
        json={"topic": "Topic A", "keywords": ["x"]},
    )

    assert response.status_code == 202
    payload = response.json()
    assert payload["status"] == "accepted"
    assert payload["message"] == "Your content generation request has been queued for processing"
    request_id = str(UUID(payload["id"]))
    assert asyncio.run(store.get(BLOG_NAMESPACE, request_id)) is None


def test_generate_content_returns_unique_ids(client):
    body = {"topic": "Topic A", "keywords": ["x"]}

    ids = {client.post("/api/generate-content", json=body).json()["id"] for _ in range(5)}

    assert len(ids) == 5


def test_generate_content_accepts_full_options(client):
    response = client.post(
        "/api/generate-content",
        json={
            "topic": "Topic A",
            "keywords": ["x", "y"],
            "targetAudience": "Devs",
            "additionalContext": "Be brief",
            "options": {
                "tone": "casual",
                "style": "technical",
                "wordCount": 800,
                "sectionCount": 3,
                "includeIntro": False,
                "includeConclusion": True,
                "formatting": {"useMarkdown": True, "useHeadings": True, "includeTOC": True},
            },
        },
    )

    assert response.status_code == 202


@pytest.mark.parametrize(
    "body",
    [
        {"topic": "", "keywords": ["x"]},
        {"topic": "   ", "keywords": ["x"]},
        {"topic": "Topic", "keywords": []},
        {"topic": "Topic", "keywords": ["  "]},
        {"keywords": ["x"]},
        {"topic": "Topic", "keywords": ["x"], "options": {"tone": "sarcastic"}},
        {"topic": "Topic", "keywords": ["x"], "options": {"style": "poetry"}},
        {"topic": "Topic", "keywords": ["x"], "options": {"wordCount": 0}},
        {"topic": "Topic", "keywords": ["x"], "options": {"sectionCount": -1}},
    ],
)
def test_invalid_requests_are_rejected(client, pipeline, body):
    response = client.post("/api/generate-content", json=body)

    assert response.status_code == 422


def test_get_content_not_found(client):
    response = client.get("/api/content/unknown-id")

    assert response.status_code == 404
    payload = response.json()
    assert payload["error"] == "Not Found"
    assert "unknown-id" in payload["message"]


def test_get_content_without_audio(client, store):
    asyncio.run(store.set(BLOG_NAMESPACE, "req-1", RECORD))

    response = client.get("/api/content/req-1")

    assert response.status_code == 200
    assert response.json() == RECORD


def test_get_content_with_audio(client, store):
    asyncio.run(store.set(BLOG_NAMESPACE, "req-1", RECORD))
    asyncio.run(store.set(TTS_NAMESPACE, "req-1", AUDIO))

    first = client.get("/api/content/req-1")
    second = client.get("/api/content/req-1")

    assert first.status_code == 200
    assert first.json()["audio"] == AUDIO
    assert first.content == second.content


def test_get_content_with_failed_audio(client, store):
    asyncio.run(store.set(BLOG_NAMESPACE, "req-1", RECORD))
    asyncio.run(
        store.set(TTS_NAMESPACE, "req-1", {"requestId": "req-1", "error": "boom", "status": "failed"})
    )

    response = client.get("/api/content/req-1")

    assert response.status_code == 200
    assert "audio" not in response.json()


def test_get_audio_returns_wav_attachment(client, store):
    asyncio.run(store.set(BLOG_NAMESPACE, "req-1", RECORD))
    asyncio.run(store.set(TTS_NAMESPACE, "req-1", AUDIO))

    response = client.get("/api/audio/req-1")

    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/wav"
    assert response.headers["content-disposition"] == 'attachment; filename="blog-audio-req-1.wav"'
    assert response.headers["x-audio-format"] == "wav"
    assert response.headers["x-audio-sample-rate"] == "16000"
    assert response.headers["x-audio-channels"] == "1"
    assert response.headers["x-article-title"] == "T%C3%ADtulo"
    assert response.content[:4] == b"RIFF"
    assert response.content[44:] == PCM


def test_get_audio_not_found(client):
    response = client.get("/api/audio/req-1")

    assert response.status_code == 404
    assert response.json()["error"] == "Not Found"


def test_get_audio_failure_marker(client, store):
    asyncio.run(store.set(BLOG_NAMESPACE, "req-1", RECORD))
    asyncio.run(
        store.set(TTS_NAMESPACE, "req-1", {"requestId": "req-1", "error": "boom", "status": "failed"})
    )

    response = client.get("/api/audio/req-1")

    assert response.status_code == 500
    assert response.json() == {
        "error": "TTS Generation Failed",
        "message": "Audio generation failed: boom",
    }


def test_health_and_metrics(client):
    assert client.get("/health").json()["status"] == "healthy"

    metrics = client.get("/metrics")

    assert metrics.status_code == 200
    assert "http_requests_total" in metrics.text
