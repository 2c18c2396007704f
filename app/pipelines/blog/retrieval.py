"""Read side of the pipeline: merge ``blog`` and ``tts`` entries for pollers.

Nothing here writes to the store, so repeated reads of a finished request
always return the same payload.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import wave
from dataclasses import dataclass
from typing import Any, Optional

from app.application.interfaces import KeyedStoreInterface
from app.services.keyed_store import BLOG_NAMESPACE, TTS_NAMESPACE

from .types import is_audio_failure

logger = logging.getLogger("app.services.content_pipeline")

DEFAULT_SAMPLE_RATE = 24000
DEFAULT_CHANNELS = 1
SAMPLE_WIDTH_BYTES = 2


class AudioUnavailableError(RuntimeError):
    """Raised when a ``tts`` entry exists but holds no playable audio."""

    def __init__(self, error: str, message: str) -> None:
        self.error = error
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class WavAudio:
    content: bytes
    sample_rate: int
    channels: int
    article_title: str
    filename: str


def build_wav_file(pcm: bytes, *, sample_rate: int, channels: int) -> bytes:
    """Wrap raw 16-bit little-endian PCM in a 44-byte RIFF/WAVE header."""

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(channels)
        wav_file.setsampwidth(SAMPLE_WIDTH_BYTES)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(pcm)
    return buffer.getvalue()


async def get_content(store: KeyedStoreInterface, request_id: str) -> Optional[dict[str, Any]]:
    """Stored article record, with ``audio`` merged in once synthesis succeeded.

    ``None`` means the article does not exist yet (or never will).
    """

    record = await store.get(BLOG_NAMESPACE, request_id)
    if record is None:
        logger.info("Blog content not found request_id=%s", request_id)
        return None

    audio = await store.get(TTS_NAMESPACE, request_id)
    if audio is None:
        logger.info("Blog content ready, audio pending request_id=%s", request_id)
    elif is_audio_failure(audio):
        logger.warning(
            "Blog content ready, audio failed request_id=%s error=%s",
            request_id,
            audio.get("error"),
        )
    else:
        record["audio"] = audio
    return record


async def get_audio(store: KeyedStoreInterface, request_id: str) -> Optional[WavAudio]:
    """Stored audio re-encoded as a WAV file, or ``None`` when absent."""

    entry = await store.get(TTS_NAMESPACE, request_id)
    if entry is None:
        logger.info("Audio not found request_id=%s", request_id)
        return None

    if is_audio_failure(entry):
        raise AudioUnavailableError(
            "TTS Generation Failed",
            f"Audio generation failed: {entry.get('error') or 'Unknown error'}",
        )

    audio_data = entry.get("audioData")
    if not audio_data:
        raise AudioUnavailableError("Invalid Data", "Audio data is missing or corrupted.")
    try:
        pcm = base64.b64decode(audio_data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise AudioUnavailableError("Invalid Data", "Audio data is missing or corrupted.") from exc

    sample_rate = int(entry.get("sampleRate") or DEFAULT_SAMPLE_RATE)
    channels = int(entry.get("channels") or DEFAULT_CHANNELS)
    content = build_wav_file(pcm, sample_rate=sample_rate, channels=channels)
    logger.info(
        "Audio prepared request_id=%s pcm_bytes=%s wav_bytes=%s",
        request_id,
        len(pcm),
        len(content),
    )
    return WavAudio(
        content=content,
        sample_rate=sample_rate,
        channels=channels,
        article_title=str(entry.get("articleTitle") or "Unknown"),
        filename=f"blog-audio-{request_id}.wav",
    )


__all__ = [
    "AudioUnavailableError",
    "WavAudio",
    "build_wav_file",
    "get_audio",
    "get_content",
]
