"""Bedrock ``converse`` client used by the enhancement and generation stages."""

from __future__ import annotations

import base64
import logging
from typing import Any, Optional

from fastapi.concurrency import run_in_threadpool

from app.application.interfaces import TextModelClientInterface
from app.config.settings import settings
from app.services.aws import create_boto3_client

logger = logging.getLogger(__name__)


class LlmInvocationError(RuntimeError):
    """Raised when the Bedrock invocation fails."""


def _decode_bedrock_api_key(secret_value: Optional[str]) -> tuple[str, str] | None:
    """Decode the BEDROCK_API_KEY secret into access/secret key components."""

    if not secret_value:
        return None

    try:
        decoded_bytes = base64.b64decode(secret_value.strip())
    except ValueError:
        decoded_bytes = secret_value.encode("utf-8", "ignore")

    filtered = "".join(chr(b) for b in decoded_bytes if 31 < b < 127)
    if ":" not in filtered:
        return None
    access_key, secret_key = filtered.split(":", 1)
    return access_key, secret_key


def _reply_text(response: dict[str, Any]) -> str:
    """Join the text blocks of a ``converse`` reply, skipping non-text blocks."""

    blocks = response.get("output", {}).get("message", {}).get("content", [])
    return "\n".join(block["text"] for block in blocks if block.get("text")).strip()


class BedrockLlmClient(TextModelClientInterface):
    """Text model backed by Amazon Bedrock.

    Model and sampling defaults come from ``BEDROCK_*`` settings and can be
    overridden per instance. ``max_tokens`` passed to :meth:`invoke` wins over
    the instance default, which lets long-form generation ask for more room
    than the short enhancement and metadata prompts.
    """

    def __init__(
        self,
        *,
        model_id: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        top_p: Optional[float] = None,
    ) -> None:
        self.model_id = model_id or settings.bedrock.model_id
        self.max_tokens = max_tokens or settings.bedrock.max_tokens
        self.temperature = settings.bedrock.temperature if temperature is None else temperature
        self.top_p = settings.bedrock.top_p if top_p is None else top_p

        credentials = None
        if settings.bedrock.api_key:
            credentials = _decode_bedrock_api_key(settings.bedrock.api_key.get_secret_value())

        try:
            self._client = create_boto3_client(
                "bedrock-runtime",
                region_name=settings.bedrock.region,
                aws_access_key_id=credentials[0] if credentials else None,
                aws_secret_access_key=credentials[1] if credentials else None,
            )
        except Exception as exc:  # pragma: no cover - configuration issue
            logger.warning("Could not initialise Bedrock: %s", exc)
            self._client = None

    def inference_config(self, max_tokens: int | None = None) -> dict[str, Any]:
        return {
            "maxTokens": max_tokens or self.max_tokens,
            "temperature": self.temperature,
            "topP": self.top_p,
        }

    async def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
    ) -> str | None:
        """Run one ``converse`` turn; an empty reply comes back as ``None``."""

        if not self._client or not self.model_id:
            raise LlmInvocationError("Bedrock client is not configured.")

        try:
            response = await run_in_threadpool(
                self._client.converse,
                modelId=self.model_id,
                system=[{"text": system_prompt}],
                messages=[{"role": "user", "content": [{"text": user_prompt}]}],
                inferenceConfig=self.inference_config(max_tokens),
            )
        except Exception as exc:
            raise LlmInvocationError(str(exc)) from exc

        text = _reply_text(response)
        logger.debug("Bedrock reply model=%s length=%s", self.model_id, len(text))
        return text or None


__all__ = ["BedrockLlmClient", "LlmInvocationError"]
