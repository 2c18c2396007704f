"""Typed containers shared across the content pipeline.

These models live in their own module so the stages (`enhancement`,
`generation`, `synthesis`, `retrieval`) can import them without creating
circular dependencies. Everything persisted goes through ``to_state()`` so
the stored shape is the camelCase JSON the API returns.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.services.response_contract import EnhancedBrief, SeoInsights
from app.views.content import GenerationOptions, GenerationRequest


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _StateModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_state(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ArticleSection(_StateModel):
    heading: str
    content: str
    order: int


class ArticleMetadata(_StateModel):
    keywords: List[str]
    target_audience: Optional[str] = None
    primary_keyword: Optional[str] = None
    seo_description: Optional[str] = None


class BlogArticle(_StateModel):
    title: str
    introduction: Optional[str] = None
    sections: List[ArticleSection] = Field(default_factory=list)
    conclusion: Optional[str] = None
    metadata: ArticleMetadata
    status: str = "completed"
    generated_at: datetime = Field(default_factory=utc_now)
    word_count: int = 0


class BlogRecord(_StateModel):
    """Value stored in the ``blog`` namespace."""

    id: str
    article: BlogArticle
    status: str = "completed"
    generated_at: datetime = Field(default_factory=utc_now)
    full_content: str


class AudioArtifact(_StateModel):
    """Successful synthesis result stored in the ``tts`` namespace."""

    request_id: str
    audio_data: str
    format: str
    sample_rate: int
    channels: int
    article_title: str
    generated_at: datetime = Field(default_factory=utc_now)


class AudioFailure(_StateModel):
    """Failure marker stored in the ``tts`` namespace instead of audio."""

    request_id: str
    error: str
    status: Literal["failed"] = "failed"
    generated_at: datetime = Field(default_factory=utc_now)


def is_audio_failure(entry: dict[str, Any]) -> bool:
    """True when a stored ``tts`` entry is a failure marker."""

    return bool(entry.get("error")) or entry.get("status") == "failed"


__all__ = [
    "ArticleMetadata",
    "ArticleSection",
    "AudioArtifact",
    "AudioFailure",
    "BlogArticle",
    "BlogRecord",
    "EnhancedBrief",
    "GenerationOptions",
    "GenerationRequest",
    "SeoInsights",
    "is_audio_failure",
    "utc_now",
]
