"""Service layer helpers for external integrations."""

from .email import EmailServiceError, render_article_text, send_email
from .gemini_client import GeminiClientError, GeminiTextClient
from .keyed_store import (
    BLOG_NAMESPACE,
    TTS_NAMESPACE,
    InMemoryKeyedStore,
    KeyedStoreConflictError,
    KeyedStoreError,
    SqlAlchemyKeyedStore,
    build_keyed_store,
)
from .llm_client import BedrockLlmClient, LlmInvocationError
from .speech import PollySpeechService, SpeechResult, SpeechSynthesisError
from .stage_queue import InProcessStageQueue, StageQueueError

__all__ = [
    "BLOG_NAMESPACE",
    "TTS_NAMESPACE",
    "BedrockLlmClient",
    "LlmInvocationError",
    "GeminiTextClient",
    "GeminiClientError",
    "PollySpeechService",
    "SpeechResult",
    "SpeechSynthesisError",
    "InMemoryKeyedStore",
    "SqlAlchemyKeyedStore",
    "KeyedStoreError",
    "KeyedStoreConflictError",
    "build_keyed_store",
    "InProcessStageQueue",
    "StageQueueError",
    "EmailServiceError",
    "render_article_text",
    "send_email",
]
