"""High-level orchestration map for the blog content pipeline.

Each stage is a handler subscribed to a queue topic; finishing one stage
publishes the next topic for the same request id:

1. ``intake`` – validate the brief, mint the request id, publish ``enhance-prompt``.
2. ``enhancement`` – ask the text model for an SEO brief (degrades to a fallback).
3. ``generation`` – generate the Markdown article, parse it, store it under ``blog``.
4. ``synthesis`` – narrate the stored article, store audio (or a failure) under ``tts``.
5. ``retrieval`` – merge ``blog`` and ``tts`` entries for pollers.

``orchestrator.ContentPipeline`` wires stages 2-4 to the queue.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

ENHANCE_TOPIC = "enhance-prompt"
GENERATE_TOPIC = "generate-content"
SPEECH_TOPIC = "generate-tts"


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the blog pipeline."""

    order: int
    name: str
    module: str
    topic: str | None
    summary: str


class BlogContentPipeline:
    """Utility wrapper for documenting the ``/api/generate-content`` flow."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(
            1,
            "Request Intake",
            "app.pipelines.blog.intake",
            None,
            "Validate the brief, mint a request id and enqueue prompt enhancement.",
        ),
        PipelineStage(
            2,
            "Prompt Enhancement",
            "app.pipelines.blog.enhancement",
            ENHANCE_TOPIC,
            "Expand keywords and gather SEO insights; fall back to the original brief on failure.",
        ),
        PipelineStage(
            3,
            "Content Generation",
            "app.pipelines.blog.generation",
            GENERATE_TOPIC,
            "Generate the Markdown article, parse it and persist it in the blog namespace.",
        ),
        PipelineStage(
            4,
            "Speech Synthesis",
            "app.pipelines.blog.synthesis",
            SPEECH_TOPIC,
            "Narrate the stored article with retries and persist audio or a failure marker.",
        ),
        PipelineStage(
            5,
            "Retrieval",
            "app.pipelines.blog.retrieval",
            None,
            "Merge the article with successful audio for polling clients.",
        ),
    ]

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)

    @classmethod
    def topics(cls) -> tuple[str, ...]:
        return tuple(stage.topic for stage in cls._STAGES if stage.topic)


__all__ = [
    "BlogContentPipeline",
    "ENHANCE_TOPIC",
    "GENERATE_TOPIC",
    "PipelineStage",
    "SPEECH_TOPIC",
]
