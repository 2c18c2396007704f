"""Async HTTP client that submits a blog request and polls until it is done.

The server never pushes: a caller submits, then polls ``/api/content/{id}``
at a fixed interval. Three outcomes are possible:

* the payload has both ``article`` and ``audio``: returned;
* the article appeared but audio never did: :class:`AudioTimeoutError`,
  which carries the last payload so the article is still usable;
* nothing appeared: :class:`PollTimeoutError`.

Giving up is purely local; server-side processing continues.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

import httpx

from app.views.content import GenerationRequest

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 5.0
DEFAULT_MAX_ATTEMPTS = 50

ProgressCallback = Callable[[int, int], None]
SleepFn = Callable[[float], Awaitable[None]]


class PollTimeoutError(RuntimeError):
    """Raised when no article appeared within the attempt budget."""

    def __init__(self, request_id: str, attempts: int, message: Optional[str] = None) -> None:
        self.request_id = request_id
        self.attempts = attempts
        super().__init__(
            message
            or f"Content for {request_id} was not ready after {attempts} attempts"
        )


class AudioTimeoutError(PollTimeoutError):
    """The article is ready but audio never arrived. ``payload`` holds the article."""

    def __init__(self, request_id: str, attempts: int, payload: dict[str, Any]) -> None:
        self.payload = payload
        super().__init__(
            request_id,
            attempts,
            f"Article for {request_id} is ready but audio was not available "
            f"after {attempts} attempts",
        )


class ContentPoller:
    """Submit/poll/download helper for the content generation API."""

    def __init__(
        self,
        base_url: str,
        *,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.interval = interval
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
        )

    async def __aenter__(self) -> "ContentPoller":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def submit(self, request: Union[GenerationRequest, Mapping[str, Any]]) -> str:
        """Post a brief to the intake endpoint and return the request id."""

        if isinstance(request, GenerationRequest):
            body = request.model_dump(mode="json", by_alias=True, exclude_none=True)
        else:
            body = dict(request)
        response = await self._client.post("/api/generate-content", json=body)
        response.raise_for_status()
        request_id = response.json()["id"]
        logger.info("Submitted content request request_id=%s", request_id)
        return str(request_id)

    async def poll(
        self,
        request_id: str,
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> dict[str, Any]:
        """Poll until the payload carries both ``article`` and ``audio``."""

        last_with_article: Optional[dict[str, Any]] = None
        for attempt in range(1, self.max_attempts + 1):
            if on_progress is not None:
                on_progress(attempt, self.max_attempts)

            response = await self._client.get(f"/api/content/{request_id}")
            if response.status_code != httpx.codes.NOT_FOUND:
                response.raise_for_status()
                payload = response.json()
                if payload.get("article") and payload.get("audio"):
                    logger.info(
                        "Content complete request_id=%s attempt=%s", request_id, attempt
                    )
                    return payload
                if payload.get("article"):
                    last_with_article = payload
                    logger.debug("Article ready, audio pending request_id=%s", request_id)

            if attempt < self.max_attempts:
                await self._sleep(self.interval)

        if last_with_article is not None:
            raise AudioTimeoutError(request_id, self.max_attempts, last_with_article)
        raise PollTimeoutError(request_id, self.max_attempts)

    async def fetch_audio(self, request_id: str) -> bytes:
        """Download the WAV rendition of the article narration."""

        response = await self._client.get(f"/api/audio/{request_id}")
        response.raise_for_status()
        return response.content

    async def send_email(self, request_id: str, email: str) -> dict[str, Any]:
        response = await self._client.post(
            "/api/send-blog-email",
            json={"requestId": request_id, "email": email},
        )
        response.raise_for_status()
        return response.json()


__all__ = ["AudioTimeoutError", "ContentPoller", "PollTimeoutError"]
