"""End-to-end pipeline behaviour with fake collaborators."""

from __future__ import annotations

import asyncio

import pytest

from app.pipelines.blog import (
    ENHANCE_TOPIC,
    GENERATE_TOPIC,
    SPEECH_TOPIC,
    BlogContentPipeline,
    ContentPipeline,
    RetryPolicy,
)
from app.pipelines.blog.generation import ContentGenerationError, generate_article
from app.services.keyed_store import BLOG_NAMESPACE, TTS_NAMESPACE, InMemoryKeyedStore
from app.services.llm_client import LlmInvocationError
from app.services.response_contract import EnhancedBrief
from app.services.speech import SpeechSynthesisError
from app.services.stage_queue import InProcessStageQueue
from app.views.content import GenerationRequest

from conftest import FakeSynthesizer, ScriptedTextClient


def _pipeline(store, client, synthesizer, max_attempts=3) -> ContentPipeline:
    return ContentPipeline(
        store=store,
        text_client=client,
        synthesizer=synthesizer,
        queue=InProcessStageQueue(workers_per_topic=2),
        retry_policy=RetryPolicy(
            max_attempts=max_attempts,
            base_delay=0,
            transient_markers=("rate limit",),
        ),
    )


def test_progressive_completion_scenario(run):
    async def scenario():
        generation_gate = asyncio.Event()
        speech_gate = asyncio.Event()
        store = InMemoryKeyedStore()
        client = ScriptedTextClient(generation_gate=generation_gate)
        synthesizer = FakeSynthesizer(gate=speech_gate)
        synthesizer.started = asyncio.Event()
        pipeline = _pipeline(store, client, synthesizer)
        await pipeline.start()

        request_id = await pipeline.submit(GenerationRequest(topic="Topic A", keywords=["x"]))
        for _ in range(5):
            await asyncio.sleep(0)
        before_generation = await pipeline.get_content(request_id)

        generation_gate.set()
        await asyncio.wait_for(synthesizer.started.wait(), timeout=2)
        article_only = await pipeline.get_content(request_id)

        speech_gate.set()
        await asyncio.wait_for(pipeline.join(), timeout=2)
        complete = await pipeline.get_content(request_id)
        await pipeline.stop()
        return request_id, before_generation, article_only, complete

    request_id, before_generation, article_only, complete = run(scenario())

    assert before_generation is None
    assert article_only["id"] == request_id
    assert article_only["article"]["title"] == "Title"
    assert "audio" not in article_only
    assert complete["audio"]["requestId"] == request_id
    assert complete["audio"]["articleTitle"] == "Title"
    assert complete["article"] == article_only["article"]


def test_stored_article_shape(run):
    async def scenario():
        store = InMemoryKeyedStore()
        pipeline = _pipeline(store, ScriptedTextClient(), FakeSynthesizer())
        await pipeline.start()
        request_id = await pipeline.submit(
            GenerationRequest(topic="Topic A", keywords=["x"], target_audience="Devs")
        )
        await pipeline.join()
        await pipeline.stop()
        return await pipeline.get_blog(request_id)

    record = run(scenario())

    article = record["article"]
    assert record["status"] == "completed"
    assert record["fullContent"].startswith("# Title")
    assert [section["order"] for section in article["sections"]] == [0, 1]
    assert article["conclusion"] == "Wrapping up everything."
    assert article["wordCount"] == len(record["fullContent"].split())
    assert article["metadata"]["keywords"] == ["new keyword", "x"]
    assert article["metadata"]["primaryKeyword"] == "new keyword"
    assert article["metadata"]["targetAudience"] == "Devs"
    assert article["metadata"]["seoDescription"].startswith("Title - Opening paragraph one.")


def test_enhancement_failure_still_generates_with_original_keywords(run):
    async def scenario():
        store = InMemoryKeyedStore()
        client = ScriptedTextClient(enhancement=LlmInvocationError("throttled"))
        pipeline = _pipeline(store, client, FakeSynthesizer())
        await pipeline.start()
        request_id = await pipeline.submit(
            GenerationRequest(topic="Topic A", keywords=["alpha", "beta"])
        )
        await pipeline.join()
        await pipeline.stop()
        return client, await pipeline.get_content(request_id)

    client, content = run(scenario())

    generation_prompt = client.calls[1]["user_prompt"]
    assert "- alpha" in generation_prompt
    assert "- beta" in generation_prompt
    assert content["article"]["metadata"]["keywords"] == ["alpha", "beta"]


def test_generation_failure_leaves_request_not_found(run):
    async def scenario():
        store = InMemoryKeyedStore()
        client = ScriptedTextClient(generation=LlmInvocationError("model down"))
        synthesizer = FakeSynthesizer()
        pipeline = _pipeline(store, client, synthesizer)
        await pipeline.start()
        request_id = await pipeline.submit(GenerationRequest(topic="Topic A", keywords=["x"]))
        await pipeline.join()
        await pipeline.stop()
        return (
            synthesizer,
            await pipeline.get_content(request_id),
            await store.get(TTS_NAMESPACE, request_id),
        )

    synthesizer, content, audio = run(scenario())

    assert content is None
    assert audio is None
    assert synthesizer.texts == []


def test_synthesis_failure_keeps_article_without_audio(run):
    async def scenario():
        store = InMemoryKeyedStore()
        synthesizer = FakeSynthesizer([SpeechSynthesisError("rate limit")] * 5)
        pipeline = _pipeline(store, ScriptedTextClient(), synthesizer, max_attempts=2)
        await pipeline.start()
        request_id = await pipeline.submit(GenerationRequest(topic="Topic A", keywords=["x"]))
        await pipeline.join()
        await pipeline.stop()
        return (
            synthesizer,
            await pipeline.get_content(request_id),
            await store.get(TTS_NAMESPACE, request_id),
        )

    synthesizer, content, audio = run(scenario())

    assert len(synthesizer.texts) == 2
    assert content["article"]["title"] == "Title"
    assert "audio" not in content
    assert audio["status"] == "failed"


def test_request_ids_are_unique(run):
    async def scenario():
        pipeline = _pipeline(InMemoryKeyedStore(), ScriptedTextClient(), FakeSynthesizer())
        request = GenerationRequest(topic="Topic A", keywords=["x"])
        return [await pipeline.submit(request) for _ in range(20)]

    ids = run(scenario())

    assert len(set(ids)) == 20


def test_stage_map_matches_subscribed_topics():
    pipeline = _pipeline(InMemoryKeyedStore(), ScriptedTextClient(), FakeSynthesizer())

    stages = list(BlogContentPipeline.describe())

    assert [stage.order for stage in stages] == [1, 2, 3, 4, 5]
    assert BlogContentPipeline.topics() == (ENHANCE_TOPIC, GENERATE_TOPIC, SPEECH_TOPIC)
    assert pipeline.queue.topics == BlogContentPipeline.topics()


def test_blank_generation_stores_fallback_article(run):
    async def scenario():
        store = InMemoryKeyedStore()
        synthesizer = FakeSynthesizer()
        pipeline = _pipeline(store, ScriptedTextClient(generation="\n \n"), synthesizer)
        await pipeline.start()
        request_id = await pipeline.submit(GenerationRequest(topic="Topic A", keywords=["x"]))
        await pipeline.join()
        await pipeline.stop()
        return synthesizer, await pipeline.get_content(request_id)

    synthesizer, content = run(scenario())

    assert content["article"]["title"] == "Enhanced Title"
    assert content["article"]["sections"] == []
    assert content["article"]["wordCount"] == 0
    assert content["audio"]["articleTitle"] == "Enhanced Title"
    assert synthesizer.texts == ["Enhanced Title"]


class _SilentClient:
    async def invoke(self, *, system_prompt, user_prompt, max_tokens=None):
        return None


def test_missing_generation_reply_uses_brief_title(run):
    store = InMemoryKeyedStore()
    brief = EnhancedBrief(enhanced_title="Brief Title", enhanced_keywords=["x"])

    record = run(
        generate_article(
            GenerationRequest(topic="Topic A", keywords=["x"]),
            brief,
            request_id="req-1",
            client=_SilentClient(),
            store=store,
        )
    )

    stored = run(store.get(BLOG_NAMESPACE, "req-1"))
    assert record.article.title == "Brief Title"
    assert stored["article"]["title"] == "Brief Title"
    assert stored["fullContent"] == ""


def test_generation_collaborator_error_is_fatal(run):
    store = InMemoryKeyedStore()
    brief = EnhancedBrief(enhanced_title="T", enhanced_keywords=["x"])

    with pytest.raises(ContentGenerationError):
        run(
            generate_article(
                GenerationRequest(topic="T", keywords=["x"]),
                brief,
                request_id="req-1",
                client=ScriptedTextClient(generation=LlmInvocationError("model down")),
                store=store,
            )
        )

    assert run(store.get(BLOG_NAMESPACE, "req-1")) is None
