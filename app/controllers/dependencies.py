"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from app.application.interfaces import TextModelClientInterface
from app.config.dependencies import get_content_pipeline, get_text_client
from app.pipelines.blog import ContentPipeline

PipelineDep = Annotated[ContentPipeline, Depends(get_content_pipeline)]
TextClientDep = Annotated[TextModelClientInterface, Depends(get_text_client)]


__all__ = ["PipelineDep", "TextClientDep", "get_content_pipeline", "get_text_client"]
