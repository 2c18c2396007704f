"""Content generation stage for the blog pipeline (Stage 03).

The only stage allowed to halt a request: if the text model call fails,
:class:`ContentGenerationError` propagates and no article is stored. Empty or
unstructured replies are parsed like any other text and still stored.
"""

from __future__ import annotations

import logging

from app.application.interfaces import KeyedStoreInterface, TextModelClientInterface
from app.services.keyed_store import BLOG_NAMESPACE
from app.services.response_contract import EnhancedBrief
from app.views.content import GenerationRequest

from .parser import ParsedArticle, parse_article
from .prompts import build_generation_prompt
from .types import ArticleMetadata, BlogArticle, BlogRecord, utc_now

logger = logging.getLogger("app.services.content_pipeline")

SEO_DESCRIPTION_INTRO_CHARS = 150


class ContentGenerationError(RuntimeError):
    """Raised when the article text could not be produced."""


def build_article(
    parsed: ParsedArticle,
    *,
    brief: EnhancedBrief,
    request: GenerationRequest,
) -> BlogArticle:
    """Attach metadata to a parsed article."""

    keywords = list(brief.enhanced_keywords) or list(request.keywords)
    seo_description = None
    if parsed.introduction:
        seo_description = (
            f"{parsed.title} - {parsed.introduction[:SEO_DESCRIPTION_INTRO_CHARS]}"
        )
    return BlogArticle(
        title=parsed.title,
        introduction=parsed.introduction,
        sections=list(parsed.sections),
        conclusion=parsed.conclusion,
        metadata=ArticleMetadata(
            keywords=keywords,
            target_audience=request.target_audience,
            primary_keyword=keywords[0] if keywords else None,
            seo_description=seo_description,
        ),
        status="completed",
        generated_at=utc_now(),
        word_count=parsed.word_count,
    )


async def generate_article(
    request: GenerationRequest,
    brief: EnhancedBrief,
    *,
    request_id: str,
    client: TextModelClientInterface,
    store: KeyedStoreInterface,
    max_tokens: int | None = None,
) -> BlogRecord:
    """Generate, parse and persist the article for ``request_id``."""

    logger.info(
        "Starting content generation request_id=%s title=%r keywords=%s",
        request_id,
        brief.enhanced_title,
        len(brief.enhanced_keywords),
    )
    prompt = build_generation_prompt(request, brief)
    try:
        raw_text = await client.invoke(
            system_prompt=prompt.system_prompt,
            user_prompt=prompt.user_prompt,
            max_tokens=max_tokens,
        )
    except Exception as exc:
        logger.error("Content generation failed request_id=%s: %s", request_id, exc)
        raise ContentGenerationError(f"Content generation failed: {exc}") from exc

    raw_text = raw_text or ""
    if not raw_text.strip():
        logger.warning(
            "Content generation returned no text request_id=%s, storing fallback article",
            request_id,
        )

    parsed = parse_article(raw_text, fallback_title=brief.enhanced_title or request.topic)
    if parsed.used_fallback:
        logger.warning(
            "Generated text lacked the expected Markdown structure request_id=%s "
            "title_found=%s sections=%s",
            request_id,
            parsed.title != (brief.enhanced_title or request.topic),
            len(parsed.sections),
        )

    article = build_article(parsed, brief=brief, request=request)
    record = BlogRecord(
        id=request_id,
        article=article,
        status="completed",
        generated_at=article.generated_at,
        full_content=raw_text,
    )
    await store.set(BLOG_NAMESPACE, request_id, record.to_state())
    logger.info(
        "Article stored request_id=%s title=%r sections=%s words=%s",
        request_id,
        article.title,
        len(article.sections),
        article.word_count,
    )
    return record


__all__ = ["ContentGenerationError", "build_article", "generate_article"]
