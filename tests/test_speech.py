"""Tests for Polly chunking and PCM assembly."""

import base64
import io

import pytest
from botocore.exceptions import ClientError

from app.services import speech
from app.services.speech import (
    PollySpeechService,
    SpeechSynthesisError,
    split_for_synthesis,
)


class FakePollyClient:
    def __init__(self, frames=None, error=None):
        self.frames = list(frames or [])
        self.error = error
        self.calls = []

    def synthesize_speech(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return {"AudioStream": io.BytesIO(self.frames.pop(0))}


@pytest.fixture
def make_service(monkeypatch):
    def _make(client, max_chars=3000):
        monkeypatch.setattr(speech, "create_boto3_client", lambda *args, **kwargs: client)
        return PollySpeechService(
            voice_id="Joanna",
            engine="neural",
            sample_rate=16000,
            max_chars_per_request=max_chars,
        )

    return _make


def test_split_keeps_short_text_whole():
    assert split_for_synthesis("Hello there.\n\nSecond paragraph.", 100) == [
        "Hello there.\n\nSecond paragraph."
    ]


def test_split_respects_the_limit():
    text = "First sentence here. Second sentence here.\n\n" + "word " * 60

    chunks = split_for_synthesis(text, 40)

    assert chunks
    assert all(0 < len(chunk) <= 40 for chunk in chunks)
    assert " ".join(" ".join(chunks).split()).startswith("First sentence here.")


def test_split_breaks_oversized_words():
    chunks = split_for_synthesis("x" * 25, 10)

    assert chunks == ["x" * 10, "x" * 10, "x" * 5]


def test_split_ignores_blank_text():
    assert split_for_synthesis("  \n\n  ", 10) == []


def test_synthesize_joins_chunk_frames(run, make_service):
    client = FakePollyClient(frames=[b"\x01\x00", b"\x02\x00"])
    service = make_service(client, max_chars=20)

    result = run(service.synthesize("First paragraph.\n\nSecond paragraph."))

    assert base64.b64decode(result.audio_data) == b"\x01\x00\x02\x00"
    assert result.format == "pcm"
    assert result.sample_rate == 16000
    assert result.channels == 1
    assert [call["Text"] for call in client.calls] == ["First paragraph.", "Second paragraph."]
    assert client.calls[0]["OutputFormat"] == "pcm"
    assert client.calls[0]["SampleRate"] == "16000"
    assert client.calls[0]["VoiceId"] == "Joanna"


def test_synthesize_rejects_empty_text(run, make_service):
    service = make_service(FakePollyClient())

    with pytest.raises(SpeechSynthesisError):
        run(service.synthesize("   "))


def test_client_errors_are_wrapped(run, make_service):
    error = ClientError(
        {
            "Error": {"Code": "ThrottlingException", "Message": "Rate exceeded"},
            "ResponseMetadata": {"HTTPStatusCode": 400},
        },
        "SynthesizeSpeech",
    )
    service = make_service(FakePollyClient(error=error))

    with pytest.raises(SpeechSynthesisError) as excinfo:
        run(service.synthesize("Hello."))

    assert "ThrottlingException" in str(excinfo.value)
    assert "Rate exceeded" in str(excinfo.value)


def test_empty_audio_stream_is_an_error(run, make_service):
    service = make_service(FakePollyClient(frames=[b""]))

    with pytest.raises(SpeechSynthesisError):
        run(service.synthesize("Hello."))
