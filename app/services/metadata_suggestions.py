"""Keyword / audience / context suggestions for the blog creation form."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from app.application.interfaces import TextModelClientInterface
from app.pipelines.blog.prompts import build_metadata_prompt
from app.services.response_contract import MetadataSuggestion, ResponseContractError

logger = logging.getLogger(__name__)


def parse_fallback_suggestion(topic: str) -> MetadataSuggestion:
    """Used when the model answered but not with the expected JSON."""

    base = topic.lower()
    return MetadataSuggestion(
        keywords=[
            base,
            f"{base} guide",
            f"{base} tutorial",
            f"best practices {base}",
            f"{base} tips",
        ],
        target_audience=f"Readers interested in {topic} who want to learn more about this subject",
        additional_context=(
            f"This blog will cover the fundamentals and key aspects of {topic}, "
            "providing valuable insights and practical information."
        ),
    )


def error_fallback_suggestion(topic: str) -> MetadataSuggestion:
    """Used when the model call itself failed."""

    base = topic.lower()
    return MetadataSuggestion(
        keywords=[base, f"{base} guide", f"learn {base}"],
        target_audience=f"Readers interested in {topic}",
        additional_context=f"Explore key concepts and insights about {topic}.",
    )


async def suggest_metadata(
    topic: str,
    *,
    client: TextModelClientInterface,
) -> MetadataSuggestion:
    """Ask the text model for suggestions; never raises."""

    topic = topic.strip()
    prompt = build_metadata_prompt(topic)
    logger.info("Generating blog metadata suggestions topic=%r", topic)
    try:
        raw_response = await client.invoke(
            system_prompt=prompt.system_prompt,
            user_prompt=prompt.user_prompt,
        )
    except Exception as exc:
        logger.error("Metadata suggestion failed topic=%r: %s", topic, exc)
        return error_fallback_suggestion(topic)

    try:
        suggestion = MetadataSuggestion.from_json(raw_response or "")
    except (ResponseContractError, ValidationError) as exc:
        logger.warning("Metadata response unparseable topic=%r, using fallback: %s", topic, exc)
        return parse_fallback_suggestion(topic)

    logger.info(
        "Generated metadata suggestions topic=%r keywords=%s",
        topic,
        len(suggestion.keywords),
    )
    return suggestion


__all__ = [
    "error_fallback_suggestion",
    "parse_fallback_suggestion",
    "suggest_metadata",
]
