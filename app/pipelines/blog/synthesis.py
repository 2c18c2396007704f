"""Speech synthesis stage for the blog pipeline (Stage 04).

Reads the stored article back from the ``blog`` namespace and writes exactly
one ``tts`` entry: the audio on success, a failure marker otherwise. A
synthesis failure is recorded, never raised, so the article stays usable.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from app.application.interfaces import KeyedStoreInterface, SpeechSynthesizerInterface
from app.services.keyed_store import BLOG_NAMESPACE, TTS_NAMESPACE
from app.telemetry import increment_tts_retry

from .retry import RetryPolicy
from .types import AudioArtifact, AudioFailure

logger = logging.getLogger("app.services.content_pipeline")


class PipelineStateError(RuntimeError):
    """Raised when a stage runs before the state it depends on exists."""


def article_to_speech_text(article: Mapping[str, Any]) -> str:
    """Narration order: title, introduction, each section, conclusion."""

    parts = [str(article.get("title") or "").strip()]
    introduction = article.get("introduction")
    if introduction:
        parts.append(str(introduction))
    for section in article.get("sections") or []:
        parts.append(f"{section.get('heading', '')}\n{section.get('content', '')}")
    conclusion = article.get("conclusion")
    if conclusion:
        parts.append(str(conclusion))
    return "\n\n".join(part for part in parts if part.strip())


async def load_article(store: KeyedStoreInterface, request_id: str) -> dict[str, Any]:
    record = await store.get(BLOG_NAMESPACE, request_id)
    if record is None:
        raise PipelineStateError(f"Blog content not found for request ID: {request_id}")
    article = record.get("article")
    if not isinstance(article, dict) or "sections" not in article:
        raise PipelineStateError(f"Blog article data is incomplete for request ID: {request_id}")
    return article


async def synthesize_article_audio(
    request_id: str,
    *,
    store: KeyedStoreInterface,
    synthesizer: SpeechSynthesizerInterface,
    policy: Optional[RetryPolicy] = None,
) -> dict[str, Any]:
    """Narrate the stored article and persist the outcome under ``tts``.

    Returns the stored entry. Only :class:`PipelineStateError` escapes, and in
    that case nothing is written.
    """

    article = await load_article(store, request_id)
    policy = policy or RetryPolicy.from_settings()
    title = str(article.get("title") or "")
    text = article_to_speech_text(article)
    logger.info(
        "Starting speech synthesis request_id=%s title=%r chars=%s",
        request_id,
        title,
        len(text),
    )

    def _on_retry(attempt: int, delay: float, error: BaseException) -> None:
        increment_tts_retry()
        logger.info(
            "Speech synthesis retry scheduled request_id=%s attempt=%s delay=%.1fs",
            request_id,
            attempt,
            delay,
        )

    try:
        result = await policy.run(lambda: synthesizer.synthesize(text), on_retry=_on_retry)
    except Exception as exc:
        logger.error("Speech synthesis failed request_id=%s: %s", request_id, exc)
        entry = AudioFailure(request_id=request_id, error=str(exc) or type(exc).__name__)
        state = entry.to_state()
        await store.set(TTS_NAMESPACE, request_id, state)
        logger.warning(
            "Audio unavailable but article remains readable request_id=%s", request_id
        )
        return state

    entry = AudioArtifact(
        request_id=request_id,
        audio_data=result.audio_data,
        format=result.format,
        sample_rate=result.sample_rate,
        channels=result.channels,
        article_title=title,
    )
    state = entry.to_state()
    await store.set(TTS_NAMESPACE, request_id, state)
    logger.info(
        "Audio stored request_id=%s format=%s sample_rate=%s bytes_b64=%s",
        request_id,
        result.format,
        result.sample_rate,
        len(result.audio_data),
    )
    return state


__all__ = [
    "PipelineStateError",
    "article_to_speech_text",
    "load_article",
    "synthesize_article_audio",
]
