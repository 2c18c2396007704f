"""Content generation endpoints: intake, polling and audio download."""

from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse, Response

from app.controllers.dependencies import PipelineDep
from app.pipelines.blog import AudioUnavailableError
from app.services.stage_queue import StageQueueError
from app.views import (
    GenerationAcceptedResponse,
    GenerationRequest,
    NotFoundResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["content"])


def _not_found(message: str) -> JSONResponse:
    body = NotFoundResponse(error="Not Found", message=message)
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=body.model_dump())


def _header_safe(value: str) -> str:
    """Percent-encode everything outside printable ASCII; spaces stay readable."""

    return quote(" ".join(value.split()), safe=" ")


@router.post(
    "/generate-content",
    response_model=GenerationAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def generate_content(
    payload: GenerationRequest,
    pipeline: PipelineDep,
) -> GenerationAcceptedResponse:
    """Queue a blog generation request and return its id immediately."""

    try:
        request_id = await pipeline.submit(payload)
    except StageQueueError as exc:
        logger.error("Could not enqueue content request: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Content pipeline is not available",
        ) from exc
    return GenerationAcceptedResponse(id=request_id)


@router.get(
    "/content/{request_id}",
    responses={404: {"model": NotFoundResponse}},
)
async def get_content(request_id: str, pipeline: PipelineDep):
    """Return the generated article, with ``audio`` once narration is ready."""

    record = await pipeline.get_content(request_id)
    if record is None:
        return _not_found(
            f"No blog content found for request ID: {request_id}. "
            "It may still be generating, or the ID is invalid."
        )
    return record


@router.get(
    "/audio/{request_id}",
    response_class=Response,
    responses={
        200: {"content": {"audio/wav": {}}},
        404: {"model": NotFoundResponse},
        500: {"model": NotFoundResponse},
    },
)
async def get_audio(request_id: str, pipeline: PipelineDep) -> Response:
    """Download the narrated article as a WAV file."""

    try:
        audio = await pipeline.get_audio(request_id)
    except AudioUnavailableError as exc:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": exc.error, "message": exc.message},
        )
    if audio is None:
        return _not_found(
            f"No TTS audio found for request ID: {request_id}. "
            "The audio may still be generating, or the ID is invalid."
        )

    return Response(
        content=audio.content,
        media_type="audio/wav",
        headers={
            "Content-Disposition": f'attachment; filename="{audio.filename}"',
            "X-Audio-Format": "wav",
            "X-Audio-Sample-Rate": str(audio.sample_rate),
            "X-Audio-Channels": str(audio.channels),
            "X-Article-Title": _header_safe(audio.article_title),
        },
    )


__all__ = ["router"]
