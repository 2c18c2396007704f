"""Send a generated article to an email address."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.controllers.dependencies import PipelineDep
from app.services import EmailServiceError, render_article_text, send_email
from app.views import NotFoundResponse, SendBlogEmailRequest, SendBlogEmailResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["email"])


def _failure(error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": error},
    )


@router.post(
    "/send-blog-email",
    response_model=SendBlogEmailResponse,
    responses={404: {"model": NotFoundResponse}},
)
async def send_blog_email(payload: SendBlogEmailRequest, pipeline: PipelineDep):
    """Email the plain-text rendering of a finished article."""

    request_id = str(payload.request_id)
    record = await pipeline.get_blog(request_id)
    if record is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=NotFoundResponse(
                error="Not Found",
                message=f"Blog not found for request ID: {request_id}",
            ).model_dump(),
        )

    article = record.get("article")
    if not isinstance(article, dict):
        logger.error("Stored blog has no article request_id=%s", request_id)
        return _failure("Blog article data is incomplete")

    title = str(article.get("title") or "Your blog article")
    try:
        message_id = await send_email(
            recipient=str(payload.email),
            subject=f"Your blog: {title}",
            body=render_article_text(article),
        )
    except EmailServiceError as exc:
        logger.error("Failed to email blog request_id=%s: %s", request_id, exc)
        return _failure(str(exc))

    logger.info("Blog emailed request_id=%s message_id=%s", request_id, message_id)
    return SendBlogEmailResponse(
        success=True,
        message=f"Blog sent to {payload.email}",
        message_id=message_id,
    )


__all__ = ["router"]
