"""Tests for the Bedrock text client wrapper."""

import base64

import pytest

from app.services import llm_client
from app.services.llm_client import (
    BedrockLlmClient,
    LlmInvocationError,
    _decode_bedrock_api_key,
)


class FakeBedrockRuntime:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def converse(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def make_client(monkeypatch):
    def _make(runtime, **overrides):
        monkeypatch.setattr(llm_client, "create_boto3_client", lambda *args, **kwargs: runtime)
        return BedrockLlmClient(**overrides)

    return _make


def test_invoke_joins_text_blocks(run, make_client):
    runtime = FakeBedrockRuntime(
        {
            "output": {
                "message": {
                    "content": [{"text": "# Title"}, {"image": {}}, {"text": "Body"}],
                }
            }
        }
    )
    client = make_client(runtime)

    result = run(client.invoke(system_prompt="sys", user_prompt="user", max_tokens=512))

    assert result == "# Title\nBody"
    call = runtime.calls[0]
    assert call["system"] == [{"text": "sys"}]
    assert call["messages"][0]["content"] == [{"text": "user"}]
    assert call["inferenceConfig"]["maxTokens"] == 512


def test_invoke_returns_none_for_empty_output(run, make_client):
    client = make_client(FakeBedrockRuntime({"output": {"message": {"content": []}}}))

    assert run(client.invoke(system_prompt="sys", user_prompt="user")) is None


def test_invoke_wraps_runtime_errors(run, make_client):
    client = make_client(FakeBedrockRuntime(error=RuntimeError("ThrottlingException")))

    with pytest.raises(LlmInvocationError, match="ThrottlingException"):
        run(client.invoke(system_prompt="sys", user_prompt="user"))


def test_decode_api_key():
    encoded = base64.b64encode(b"AKIA123:secret/value").decode("ascii")

    assert _decode_bedrock_api_key(encoded) == ("AKIA123", "secret/value")
    assert _decode_bedrock_api_key(None) is None


def test_bedrock_gets_a_longer_read_timeout():
    from app.config.settings import settings
    from app.services.aws import client_config

    bedrock = client_config("bedrock-runtime")
    polly = client_config("polly")

    assert bedrock.read_timeout == settings.aws.bedrock_read_timeout
    assert polly.read_timeout == settings.aws.read_timeout
    assert polly.retries == {"max_attempts": 1, "mode": "standard"}


def test_instance_defaults_and_per_call_max_tokens(run, make_client):
    runtime = FakeBedrockRuntime({"output": {"message": {"content": [{"text": "ok"}]}}})
    client = make_client(
        runtime, model_id="custom-model", max_tokens=300, temperature=0.2, top_p=0.5
    )

    run(client.invoke(system_prompt="sys", user_prompt="user"))
    run(client.invoke(system_prompt="sys", user_prompt="user", max_tokens=8192))

    first, second = runtime.calls
    assert first["modelId"] == "custom-model"
    assert first["inferenceConfig"] == {"maxTokens": 300, "temperature": 0.2, "topP": 0.5}
    assert second["inferenceConfig"]["maxTokens"] == 8192
