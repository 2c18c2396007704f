"""Schemas for content generation requests and retrieval responses."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator

from app.views.common import CamelModel


class Tone(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    FORMAL = "formal"
    FRIENDLY = "friendly"
    AUTHORITATIVE = "authoritative"
    CONVERSATIONAL = "conversational"


class Style(str, Enum):
    INFORMATIVE = "informative"
    PERSUASIVE = "persuasive"
    EDUCATIONAL = "educational"
    STORYTELLING = "storytelling"
    TECHNICAL = "technical"
    CREATIVE = "creative"


class FormattingOptions(CamelModel):
    use_markdown: bool = True
    use_headings: bool = True
    include_toc: Optional[bool] = Field(default=None, alias="includeTOC")

    model_config = ConfigDict(frozen=True)


class GenerationOptions(CamelModel):
    tone: Tone = Tone.PROFESSIONAL
    style: Style = Style.INFORMATIVE
    word_count: int = Field(default=1500, gt=0)
    section_count: int = Field(default=5, gt=0)
    include_intro: bool = True
    include_conclusion: bool = True
    formatting: FormattingOptions = Field(default_factory=FormattingOptions)

    model_config = ConfigDict(frozen=True)


class GenerationRequest(CamelModel):
    """Brief submitted by the user. Immutable once accepted."""

    topic: str = Field(..., min_length=1)
    keywords: List[str] = Field(..., min_length=1)
    target_audience: Optional[str] = None
    additional_context: Optional[str] = None
    options: GenerationOptions = Field(default_factory=GenerationOptions)

    model_config = ConfigDict(frozen=True)

    @field_validator("topic")
    @classmethod
    def _topic_not_blank(cls, value: str) -> str:
        topic = value.strip()
        if not topic:
            raise ValueError("Topic cannot be empty")
        return topic

    @field_validator("keywords")
    @classmethod
    def _keywords_not_blank(cls, value: List[str]) -> List[str]:
        keywords = [keyword.strip() for keyword in value if keyword and keyword.strip()]
        if not keywords:
            raise ValueError("At least one keyword is required")
        return keywords

    @field_validator("target_audience", "additional_context")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class GenerationAcceptedResponse(CamelModel):
    id: UUID
    status: str = "accepted"
    message: str = "Your content generation request has been queued for processing"

