"""Pydantic models for validating LLM JSON responses.

The enrichment stage and the metadata suggester both ask the model for a JSON
object embedded in free text. These schemas extract and validate it so that
downstream code receives normalized, type-safe objects.
"""

from __future__ import annotations

import json
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ResponseContractError(RuntimeError):
    """Raised when the LLM response contract cannot be validated."""


class _CamelContract(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class SeoInsights(_CamelContract):
    search_trends: str = ""
    competitive_landscape: str = ""
    opportunities: str = ""


class EnhancedBrief(_CamelContract):
    """Content brief produced by the enrichment stage."""

    enhanced_title: str = Field(min_length=1)
    title_alternatives: List[str] = Field(default_factory=list)
    enhanced_keywords: List[str] = Field(default_factory=list)
    seo_insights: SeoInsights = Field(default_factory=SeoInsights)
    key_points_to_cover: List[str] = Field(default_factory=list)
    recommended_structure: List[str] = Field(default_factory=list)
    trending_angles: List[str] = Field(default_factory=list)
    targeted_questions: List[str] = Field(default_factory=list)
    additional_context: str = ""

    @field_validator(
        "title_alternatives",
        "enhanced_keywords",
        "key_points_to_cover",
        "recommended_structure",
        "trending_angles",
        "targeted_questions",
        mode="before",
    )
    @classmethod
    def _coerce_string_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [str(item).strip() for item in value if str(item).strip()]
        return value

    @field_validator("additional_context", mode="before")
    @classmethod
    def _coerce_context(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False)
        return value

    @classmethod
    def from_json(cls, payload: str) -> "EnhancedBrief":
        return cls.model_validate(parse_json_object(payload))


class MetadataSuggestion(_CamelContract):
    """Keyword/audience/context suggestions for a blog topic."""

    keywords: List[str]
    target_audience: str
    additional_context: str

    @classmethod
    def from_json(cls, payload: str) -> "MetadataSuggestion":
        return cls.model_validate(parse_json_object(payload))


def parse_json_object(payload: str) -> dict[str, Any]:
    """Extract and decode the JSON object embedded in an LLM response."""

    cleaned = _clean_json_payload(payload)
    if not cleaned:
        raise ResponseContractError("LLM returned an empty response.")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ResponseContractError(f"LLM returned invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ResponseContractError("LLM JSON payload is not an object.")
    return data


def _clean_json_payload(payload: str | None) -> str:
    """Strip Markdown code blocks and find the first/last brace to extract JSON."""
    if not payload:
        return ""

    # Remove markdown code blocks if present
    cleaned = payload.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    cleaned = cleaned.strip()

    # Find the first '{' and last '}'
    start = cleaned.find("{")
    end = cleaned.rfind("}")

    if start != -1 and end != -1 and end > start:
        cleaned = cleaned[start : end + 1]

    return cleaned


__all__ = [
    "EnhancedBrief",
    "MetadataSuggestion",
    "ResponseContractError",
    "SeoInsights",
    "parse_json_object",
]
