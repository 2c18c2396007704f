"""Schemas for blog metadata suggestions."""

from typing import List

from pydantic import Field

from app.views.common import CamelModel


class SuggestMetadataRequest(CamelModel):
    topic: str = Field(..., min_length=3)


class SuggestMetadataResponse(CamelModel):
    keywords: List[str]
    target_audience: str
    additional_context: str
