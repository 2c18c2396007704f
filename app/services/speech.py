"""Amazon Polly speech synthesis returning raw 16-bit PCM."""

from __future__ import annotations

import base64
import logging
import re
from dataclasses import dataclass
from typing import Any, Iterator

from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from app.application.interfaces import SpeechSynthesizerInterface
from app.config.settings import settings
from app.services.aws import create_boto3_client

logger = logging.getLogger(__name__)

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


@dataclass(frozen=True)
class SpeechResult:
    """Base64 encoded PCM audio plus the metadata needed to play it back."""

    audio_data: str
    format: str
    sample_rate: int
    channels: int


class SpeechSynthesisError(RuntimeError):
    """Raised when Polly cannot synthesise the requested text."""


def split_for_synthesis(text: str, max_chars: int) -> list[str]:
    """Split text on paragraph, then sentence, then word boundaries.

    Every returned chunk is non-empty and at most ``max_chars`` long.
    """

    chunks: list[str] = []
    current = ""

    def _pieces() -> Iterator[str]:
        for paragraph in re.split(r"\n\s*\n", text):
            paragraph = " ".join(paragraph.split())
            if not paragraph:
                continue
            if len(paragraph) <= max_chars:
                yield paragraph
                continue
            for sentence in _SENTENCE_BOUNDARY.split(paragraph):
                if len(sentence) <= max_chars:
                    yield sentence
                    continue
                words: list[str] = []
                for word in sentence.split(" "):
                    while len(word) > max_chars:
                        if words:
                            yield " ".join(words)
                            words = []
                        yield word[:max_chars]
                        word = word[max_chars:]
                    if not word:
                        continue
                    if words and len(" ".join(words + [word])) > max_chars:
                        yield " ".join(words)
                        words = []
                    words.append(word)
                if words:
                    yield " ".join(words)

    for piece in _pieces():
        candidate = f"{current}\n\n{piece}" if current else piece
        if len(candidate) <= max_chars:
            current = candidate
            continue
        if current:
            chunks.append(current)
        current = piece
    if current:
        chunks.append(current)
    return chunks


class PollySpeechService(SpeechSynthesizerInterface):
    """Convert article text to speech with Amazon Polly."""

    def __init__(
        self,
        *,
        voice_id: str = settings.polly.voice_id,
        engine: str = settings.polly.engine,
        sample_rate: int = settings.polly.sample_rate,
        max_chars_per_request: int = settings.polly.max_chars_per_request,
    ) -> None:
        self._voice_id = voice_id
        self._engine = engine
        self._sample_rate = sample_rate
        self._max_chars = max_chars_per_request
        self._client = create_boto3_client("polly", region_name=settings.polly.region)

    async def synthesize(self, text: str) -> SpeechResult:
        """Synthesise ``text`` chunk by chunk and join the raw PCM frames."""

        if not text or not text.strip():
            raise SpeechSynthesisError("Text cannot be empty")

        chunks = split_for_synthesis(text, self._max_chars)
        logger.info(
            "Synthesising speech voice=%s chunks=%s chars=%s",
            self._voice_id,
            len(chunks),
            len(text),
        )

        pcm = bytearray()
        for chunk in chunks:
            pcm.extend(await self._synthesize_pcm(chunk))

        return SpeechResult(
            audio_data=base64.b64encode(bytes(pcm)).decode("ascii"),
            format="pcm",
            sample_rate=self._sample_rate,
            channels=1,
        )

    async def _synthesize_pcm(self, text: str) -> bytes:
        try:
            response: dict[str, Any] = await run_in_threadpool(
                self._client.synthesize_speech,
                TextType="text",
                Text=text,
                VoiceId=self._voice_id,
                Engine=self._engine,
                OutputFormat="pcm",
                SampleRate=str(self._sample_rate),
            )
        except ClientError as exc:
            error = exc.response.get("Error", {})
            status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            raise SpeechSynthesisError(
                f"Polly error {error.get('Code', 'Unknown')} ({status}): "
                f"{error.get('Message', exc)}"
            ) from exc
        except BotoCoreError as exc:
            raise SpeechSynthesisError(f"Failed to synthesize speech: {exc}") from exc

        audio_stream = response.get("AudioStream")
        if audio_stream is None:
            raise SpeechSynthesisError("Polly returned no audio stream.")
        pcm_bytes = audio_stream.read()
        if not pcm_bytes:
            raise SpeechSynthesisError("Polly returned an empty audio stream.")
        return pcm_bytes


__all__ = [
    "PollySpeechService",
    "SpeechResult",
    "SpeechSynthesisError",
    "split_for_synthesis",
]
