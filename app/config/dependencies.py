"""Process-wide collaborators built from settings.

Each builder is cached so the web app, the stage workers and FastAPI
dependencies share one instance. Tests swap them through
``app.dependency_overrides`` instead of touching these caches.
"""

from __future__ import annotations

from functools import lru_cache

from app.application.interfaces import (
    KeyedStoreInterface,
    SpeechSynthesizerInterface,
    TextModelClientInterface,
)
from app.pipelines.blog import ContentPipeline, RetryPolicy
from app.services.gemini_client import GeminiTextClient
from app.services.keyed_store import build_keyed_store
from app.services.llm_client import BedrockLlmClient
from app.services.speech import PollySpeechService
from app.services.stage_queue import InProcessStageQueue

from .settings import settings


@lru_cache(maxsize=1)
def get_text_client() -> TextModelClientInterface:
    """Text model used for enhancement, generation and metadata suggestions."""

    if settings.pipeline.llm_provider == "gemini":
        return GeminiTextClient()
    return BedrockLlmClient()


@lru_cache(maxsize=1)
def get_speech_service() -> SpeechSynthesizerInterface:
    return PollySpeechService()


@lru_cache(maxsize=1)
def get_keyed_store() -> KeyedStoreInterface:
    return build_keyed_store(settings.store.backend)


@lru_cache(maxsize=1)
def get_content_pipeline() -> ContentPipeline:
    """Pipeline wired to the configured store, models and queue."""

    return ContentPipeline(
        store=get_keyed_store(),
        text_client=get_text_client(),
        synthesizer=get_speech_service(),
        queue=InProcessStageQueue(workers_per_topic=settings.pipeline.stage_workers),
        retry_policy=RetryPolicy.from_settings(),
        generation_max_tokens=settings.pipeline.generation_max_tokens,
    )


__all__ = [
    "get_content_pipeline",
    "get_keyed_store",
    "get_speech_service",
    "get_text_client",
]
