"""Prompt enhancement stage for the blog pipeline (Stage 02).

The stage never fails: whatever the text model does, it returns an
:class:`EnhancedBrief` whose keyword list contains every original keyword.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from pydantic import ValidationError

from app.application.interfaces import TextModelClientInterface
from app.services.response_contract import (
    EnhancedBrief,
    ResponseContractError,
    SeoInsights,
)
from app.views.content import GenerationRequest

from .prompts import build_enhancement_prompt

logger = logging.getLogger("app.services.content_pipeline")

DEFAULT_STRUCTURE = ["Introduction", "Main Content", "Conclusion"]


@dataclass(frozen=True)
class EnhancementOutcome:
    brief: EnhancedBrief
    used_fallback: bool
    raw_response: str | None = None


def _truncate(value: str, max_length: int = 500) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def merge_keywords(enhanced: List[str], original: List[str]) -> List[str]:
    """Keep the model's order and append any original keyword it dropped."""

    merged: List[str] = []
    seen: set[str] = set()
    for keyword in [*enhanced, *original]:
        cleaned = keyword.strip()
        if not cleaned or cleaned.lower() in seen:
            continue
        seen.add(cleaned.lower())
        merged.append(cleaned)
    return merged


def text_fallback_brief(request: GenerationRequest, raw_response: str) -> EnhancedBrief:
    """Brief used when the model answered in prose instead of JSON."""

    return EnhancedBrief(
        enhanced_title=request.topic,
        title_alternatives=[request.topic],
        enhanced_keywords=list(request.keywords),
        seo_insights=SeoInsights(
            search_trends=raw_response[:200],
            competitive_landscape="See full analysis",
            opportunities="Enhanced by AI research",
        ),
        key_points_to_cover=["AI-enhanced content points"],
        recommended_structure=list(DEFAULT_STRUCTURE),
        trending_angles=["Current trends identified"],
        targeted_questions=["What questions should be answered?"],
        additional_context=raw_response,
    )


def parse_fallback_brief(request: GenerationRequest, raw_response: str) -> EnhancedBrief:
    """Brief used when the response contained a JSON object that did not validate."""

    return EnhancedBrief(
        enhanced_title=request.topic,
        title_alternatives=[request.topic],
        enhanced_keywords=list(request.keywords),
        seo_insights=SeoInsights(
            search_trends="Research completed",
            competitive_landscape="Analysis available",
            opportunities="Enhanced with AI insights",
        ),
        key_points_to_cover=[f"Cover {keyword} in detail" for keyword in request.keywords],
        recommended_structure=["Introduction", "Main Sections", "Conclusion"],
        trending_angles=["Current industry trends"],
        targeted_questions=[
            f"What is {request.topic}?",
            f"How does {request.topic} work?",
        ],
        additional_context=raw_response,
    )


def error_fallback_brief(request: GenerationRequest) -> EnhancedBrief:
    """Brief used when the model call itself failed."""

    return EnhancedBrief(
        enhanced_title=request.topic,
        title_alternatives=[request.topic],
        enhanced_keywords=list(request.keywords),
        seo_insights=SeoInsights(
            search_trends="Enhancement failed, using original request",
            competitive_landscape="N/A",
            opportunities="N/A",
        ),
        key_points_to_cover=list(request.keywords),
        recommended_structure=list(DEFAULT_STRUCTURE),
        trending_angles=[],
        targeted_questions=[],
        additional_context=request.additional_context or "",
    )


def interpret_enhancement(request: GenerationRequest, raw_response: str) -> EnhancementOutcome:
    """Turn the model's raw answer into a brief, degrading instead of raising."""

    if "{" not in raw_response or "}" not in raw_response:
        return EnhancementOutcome(
            text_fallback_brief(request, raw_response), True, raw_response
        )
    try:
        brief = EnhancedBrief.from_json(raw_response)
    except (ResponseContractError, ValidationError) as exc:
        logger.warning(
            "Enhancement response did not match the brief contract, using fallback: %s",
            exc,
        )
        return EnhancementOutcome(
            parse_fallback_brief(request, raw_response), True, raw_response
        )

    brief = brief.model_copy(
        update={
            "enhanced_keywords": merge_keywords(brief.enhanced_keywords, list(request.keywords))
        }
    )
    return EnhancementOutcome(brief, False, raw_response)


async def enhance_prompt(
    request: GenerationRequest,
    *,
    request_id: str,
    client: TextModelClientInterface,
) -> EnhancementOutcome:
    """Ask the text model for an SEO brief; fall back to the original request."""

    logger.info(
        "Starting prompt enhancement request_id=%s topic=%r keywords=%s",
        request_id,
        request.topic,
        list(request.keywords),
    )
    prompt = build_enhancement_prompt(request)
    try:
        raw_response = await client.invoke(
            system_prompt=prompt.system_prompt,
            user_prompt=prompt.user_prompt,
        )
    except Exception as exc:
        logger.error(
            "Prompt enhancement failed request_id=%s, continuing with original request: %s",
            request_id,
            exc,
        )
        return EnhancementOutcome(error_fallback_brief(request), True)

    if not raw_response:
        logger.warning("Enhancement returned no text request_id=%s", request_id)
        return EnhancementOutcome(error_fallback_brief(request), True)

    logger.info(
        "Enhancement response request_id=%s length=%s: %s",
        request_id,
        len(raw_response),
        _truncate(raw_response),
    )
    outcome = interpret_enhancement(request, raw_response)
    logger.info(
        "Prompt enhancement completed request_id=%s fallback=%s keywords=%s",
        request_id,
        outcome.used_fallback,
        len(outcome.brief.enhanced_keywords),
    )
    return outcome


__all__ = [
    "EnhancementOutcome",
    "enhance_prompt",
    "error_fallback_brief",
    "interpret_enhancement",
    "merge_keywords",
    "parse_fallback_brief",
    "text_fallback_brief",
]
