"""Gemini text client with optional Google Search grounding."""

from __future__ import annotations

import logging
from typing import Any, Optional

from google import genai
from google.genai import types

from app.application.interfaces import TextModelClientInterface
from app.config.settings import settings

logger = logging.getLogger(__name__)


class GeminiClientError(RuntimeError):
    """Raised when the Gemini API cannot return a usable response."""


class GeminiTextClient(TextModelClientInterface):
    """Search-grounded long-form generation through ``google-genai``."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        search_grounding: Optional[bool] = None,
    ) -> None:
        secret = settings.gemini.api_key
        self.api_key = api_key or (secret.get_secret_value() if secret else None)
        self.model = model or settings.gemini.model
        self.search_grounding = (
            settings.gemini.search_grounding if search_grounding is None else search_grounding
        )
        self._client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if not self.api_key:
            raise GeminiClientError("GEMINI_API_KEY not configured.")

        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
    ) -> str | None:
        """Generate text, letting the model consult Google Search when enabled."""

        config_kwargs: dict[str, Any] = {"system_instruction": system_prompt}
        if max_tokens:
            config_kwargs["max_output_tokens"] = max_tokens
        if self.search_grounding:
            config_kwargs["tools"] = [types.Tool(google_search=types.GoogleSearch())]

        try:
            response = await self._get_client().aio.models.generate_content(
                model=self.model,
                contents=user_prompt,
                config=types.GenerateContentConfig(**config_kwargs),
            )
        except GeminiClientError:
            raise
        except Exception as exc:  # pragma: no cover - external dependency
            raise GeminiClientError(f"Gemini API error: {exc}") from exc

        text = (response.text or "").strip()
        logger.debug(
            "Gemini response model=%s grounded=%s length=%s",
            self.model,
            self.search_grounding,
            len(text),
        )
        return text or None


__all__ = ["GeminiClientError", "GeminiTextClient"]
