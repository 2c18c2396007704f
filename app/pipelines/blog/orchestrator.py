"""Wire the blog stages to the stage queue.

:class:`ContentPipeline` is the object the HTTP layer talks to. It owns the
collaborators, subscribes one handler per topic and exposes the intake and
retrieval operations. Each handler publishes the next topic only after its own
work (and any store write) has finished, which keeps the stages of one request
strictly ordered while unrelated requests interleave freely.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from app.application.interfaces import (
    KeyedStoreInterface,
    MessageQueueInterface,
    SpeechSynthesizerInterface,
    TextModelClientInterface,
)
from app.services.keyed_store import BLOG_NAMESPACE
from app.services.response_contract import EnhancedBrief
from app.services.stage_queue import InProcessStageQueue
from app.telemetry import observe_stage
from app.views.content import GenerationRequest

from . import retrieval
from .enhancement import enhance_prompt
from .flow import ENHANCE_TOPIC, GENERATE_TOPIC, SPEECH_TOPIC
from .generation import generate_article
from .intake import accept_request, stage_payload
from .retry import RetryPolicy
from .synthesis import synthesize_article_audio
from .types import is_audio_failure

logger = logging.getLogger("app.services.content_pipeline")


class ContentPipeline:
    """Request intake, the three background stages and the read side."""

    def __init__(
        self,
        *,
        store: KeyedStoreInterface,
        text_client: TextModelClientInterface,
        synthesizer: SpeechSynthesizerInterface,
        queue: Optional[MessageQueueInterface] = None,
        retry_policy: Optional[RetryPolicy] = None,
        generation_max_tokens: Optional[int] = None,
    ) -> None:
        self.store = store
        self.queue = queue or InProcessStageQueue()
        self._text_client = text_client
        self._synthesizer = synthesizer
        self._retry_policy = retry_policy or RetryPolicy.from_settings()
        self._generation_max_tokens = generation_max_tokens

        self.queue.subscribe(ENHANCE_TOPIC, self._handle_enhancement)
        self.queue.subscribe(GENERATE_TOPIC, self._handle_generation)
        self.queue.subscribe(SPEECH_TOPIC, self._handle_speech)

    async def start(self) -> None:
        await self.queue.start()

    async def stop(self) -> None:
        await self.queue.stop()

    async def join(self) -> None:
        """Wait for every accepted request to finish all of its stages."""

        await self.queue.join()

    async def submit(self, request: GenerationRequest) -> str:
        return await accept_request(request, queue=self.queue)

    async def get_content(self, request_id: str) -> Optional[dict[str, Any]]:
        return await retrieval.get_content(self.store, request_id)

    async def get_audio(self, request_id: str) -> Optional[retrieval.WavAudio]:
        return await retrieval.get_audio(self.store, request_id)

    async def get_blog(self, request_id: str) -> Optional[dict[str, Any]]:
        """Raw ``blog`` record without audio merging."""

        return await self.store.get(BLOG_NAMESPACE, request_id)

    async def _handle_enhancement(self, payload: dict[str, Any]) -> None:
        request_id = payload["request_id"]
        request = GenerationRequest.model_validate(payload["request"])
        started = time.perf_counter()
        outcome = await enhance_prompt(
            request,
            request_id=request_id,
            client=self._text_client,
        )
        observe_stage(
            "enhancement",
            "fallback" if outcome.used_fallback else "success",
            time.perf_counter() - started,
        )
        await self.queue.publish(
            GENERATE_TOPIC,
            stage_payload(
                request_id,
                request,
                brief=outcome.brief.model_dump(mode="json", by_alias=True),
            ),
        )
        logger.info("Handed off to content generation request_id=%s", request_id)

    async def _handle_generation(self, payload: dict[str, Any]) -> None:
        request_id = payload["request_id"]
        request = GenerationRequest.model_validate(payload["request"])
        brief = EnhancedBrief.model_validate(payload["brief"])
        started = time.perf_counter()
        try:
            await generate_article(
                request,
                brief,
                request_id=request_id,
                client=self._text_client,
                store=self.store,
                max_tokens=self._generation_max_tokens,
            )
        except Exception:
            observe_stage("generation", "failed", time.perf_counter() - started)
            raise
        observe_stage("generation", "success", time.perf_counter() - started)
        await self.queue.publish(SPEECH_TOPIC, {"request_id": request_id})
        logger.info("Handed off to speech synthesis request_id=%s", request_id)

    async def _handle_speech(self, payload: dict[str, Any]) -> None:
        request_id = payload["request_id"]
        started = time.perf_counter()
        try:
            entry = await synthesize_article_audio(
                request_id,
                store=self.store,
                synthesizer=self._synthesizer,
                policy=self._retry_policy,
            )
        except Exception:
            observe_stage("synthesis", "failed", time.perf_counter() - started)
            raise
        observe_stage(
            "synthesis",
            "failed" if is_audio_failure(entry) else "success",
            time.perf_counter() - started,
        )
        logger.info("Content pipeline finished request_id=%s", request_id)


__all__ = ["ContentPipeline"]
