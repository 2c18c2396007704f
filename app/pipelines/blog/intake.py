"""Request intake (Stage 01): mint a request id and hand off to enhancement."""

from __future__ import annotations

import logging
import uuid

from app.application.interfaces import MessageQueueInterface
from app.views.content import GenerationRequest

from .flow import ENHANCE_TOPIC

logger = logging.getLogger("app.services.content_pipeline")


def stage_payload(request_id: str, request: GenerationRequest, **extra) -> dict:
    """Queue message shape shared by every stage."""

    payload = {
        "request_id": request_id,
        "request": request.model_dump(mode="json", by_alias=True),
    }
    payload.update(extra)
    return payload


async def accept_request(
    request: GenerationRequest,
    *,
    queue: MessageQueueInterface,
) -> str:
    """Enqueue the brief for enhancement and return its new request id.

    Does not wait for any stage to run.
    """

    request_id = str(uuid.uuid4())
    await queue.publish(ENHANCE_TOPIC, stage_payload(request_id, request))
    logger.info(
        "Accepted content request request_id=%s topic=%r keywords=%s",
        request_id,
        request.topic,
        list(request.keywords),
    )
    return request_id


__all__ = ["accept_request", "stage_payload"]
