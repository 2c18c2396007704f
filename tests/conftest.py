"""Shared fakes for the content pipeline tests."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
import sys
from typing import Any, Callable, Iterable, Optional, Union

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from app.application.interfaces import (  # noqa: E402
    SpeechSynthesizerInterface,
    TextModelClientInterface,
)
from app.pipelines.blog.prompts import (  # noqa: E402
    ENHANCEMENT_SYSTEM_PROMPT,
    GENERATION_SYSTEM_PROMPT,
)
from app.services.speech import SpeechResult  # noqa: E402

SAMPLE_ARTICLE = """# Title

Opening paragraph one.

Opening paragraph two.

## First Heading

Body of the first section.

### Second Heading

Body of the second section.
More of the second section.

## Conclusion

Wrapping up everything.
"""

SAMPLE_BRIEF = {
    "enhancedTitle": "Enhanced Title",
    "titleAlternatives": ["Alt One", "Alt Two"],
    "enhancedKeywords": ["new keyword", "x"],
    "seoInsights": {
        "searchTrends": "rising",
        "competitiveLandscape": "crowded",
        "opportunities": "plenty",
    },
    "keyPointsToCover": ["point"],
    "recommendedStructure": ["Intro", "Body", "Conclusion"],
    "trendingAngles": ["angle"],
    "targetedQuestions": ["why?"],
    "additionalContext": "context",
}

Reply = Union[str, None, BaseException]


class ScriptedTextClient(TextModelClientInterface):
    """Text model fake answering per stage based on the system prompt."""

    def __init__(
        self,
        *,
        enhancement: Reply = None,
        generation: Reply = None,
        default: Reply = None,
        generation_gate: Optional[asyncio.Event] = None,
    ) -> None:
        self.enhancement = json.dumps(SAMPLE_BRIEF) if enhancement is None else enhancement
        self.generation = SAMPLE_ARTICLE if generation is None else generation
        self.default = default
        self.generation_gate = generation_gate
        self.calls: list[dict[str, Any]] = []

    async def invoke(self, *, system_prompt, user_prompt, max_tokens=None):
        self.calls.append(
            {"system_prompt": system_prompt, "user_prompt": user_prompt, "max_tokens": max_tokens}
        )
        if system_prompt == ENHANCEMENT_SYSTEM_PROMPT:
            reply = self.enhancement
        elif system_prompt == GENERATION_SYSTEM_PROMPT:
            if self.generation_gate is not None:
                await self.generation_gate.wait()
            reply = self.generation
        else:
            reply = self.default
        if isinstance(reply, BaseException):
            raise reply
        return reply


class FakeSynthesizer(SpeechSynthesizerInterface):
    """Speech fake; each entry of ``outcomes`` is an exception to raise or ``None``."""

    def __init__(
        self,
        outcomes: Iterable[Optional[BaseException]] = (),
        *,
        gate: Optional[asyncio.Event] = None,
    ) -> None:
        self.outcomes = list(outcomes)
        self.gate = gate
        self.texts: list[str] = []
        self.started: Optional[asyncio.Event] = None

    async def synthesize(self, text: str) -> SpeechResult:
        self.texts.append(text)
        if self.started is not None:
            self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.outcomes:
            outcome = self.outcomes.pop(0)
            if outcome is not None:
                raise outcome
        return SpeechResult(
            audio_data="AAABAAIAAwA=",
            format="pcm",
            sample_rate=16000,
            channels=1,
        )


async def no_sleep(_delay: float) -> None:
    return None


@pytest.fixture
def run() -> Callable:
    """Run a coroutine to completion on a fresh event loop."""

    return asyncio.run


@pytest.fixture
def sample_article() -> str:
    return SAMPLE_ARTICLE
