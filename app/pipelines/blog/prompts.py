"""Prompt construction for the text-model stages.

Every builder returns a :class:`PromptBundle` so the stages can hand the
system and user prompts straight to ``TextModelClientInterface.invoke``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from app.services.response_contract import EnhancedBrief
from app.views.content import GenerationRequest


@dataclass(frozen=True)
class PromptBundle:
    system_prompt: str
    user_prompt: str


ENHANCEMENT_SYSTEM_PROMPT = (
    "You are an expert SEO and content strategist. You research topics, "
    "identify search trends and turn rough blog requests into detailed content "
    "briefs. Always answer with a single JSON object and nothing else."
)

GENERATION_SYSTEM_PROMPT = (
    "You are an expert blog writer. You write accurate, well structured, "
    "SEO-optimized long-form articles in Markdown, using current data and "
    "concrete examples."
)

METADATA_SYSTEM_PROMPT = (
    "You are an expert content strategist and SEO specialist. "
    "Respond with ONLY a JSON object, no markdown and no additional text."
)

_BRIEF_SCHEMA = """{
  "enhancedTitle": "string",
  "titleAlternatives": ["string"],
  "enhancedKeywords": ["string"],
  "seoInsights": {
    "searchTrends": "string",
    "competitiveLandscape": "string",
    "opportunities": "string"
  },
  "keyPointsToCover": ["string"],
  "recommendedStructure": ["string"],
  "trendingAngles": ["string"],
  "targetedQuestions": ["string"],
  "additionalContext": "string"
}"""


def _bullets(items: Iterable[str]) -> str:
    rendered = "\n".join(f"- {item}" for item in items)
    return rendered or "- (none)"


def build_enhancement_prompt(request: GenerationRequest) -> PromptBundle:
    lines = [
        "Enhance and optimize the following blog content request.",
        "",
        "Original request:",
        f"- Topic: {request.topic}",
        f"- Keywords: {', '.join(request.keywords)}",
    ]
    if request.target_audience:
        lines.append(f"- Target audience: {request.target_audience}")
    if request.additional_context:
        lines.append(f"- Additional context: {request.additional_context}")
    lines.extend(
        [
            "",
            "Tasks:",
            "1. Research current trends, popular questions and gaps in existing coverage.",
            "2. Expand the keyword list with related, long-tail and LSI keywords. "
            "Keep every original keyword.",
            "3. Suggest angles, data points and examples that would make the article stand out.",
            "4. Propose 3-5 title options, key points and a recommended structure.",
            "",
            "Answer with a JSON object using exactly this structure:",
            _BRIEF_SCHEMA,
        ]
    )
    return PromptBundle(ENHANCEMENT_SYSTEM_PROMPT, "\n".join(lines))


def build_generation_prompt(
    request: GenerationRequest, brief: EnhancedBrief
) -> PromptBundle:
    options = request.options
    per_section = max(options.word_count // options.section_count, 1)
    structure = "\n".join(
        f"{index}. {step}" for index, step in enumerate(brief.recommended_structure, start=1)
    )

    lines = [
        "Write a comprehensive blog article from this content brief.",
        "",
        "Title options:",
        f"- Primary: {brief.enhanced_title}",
        f"- Alternatives: {' | '.join(brief.title_alternatives) or '(none)'}",
        "",
        "SEO insights:",
        f"- Search trends: {brief.seo_insights.search_trends}",
        f"- Competitive landscape: {brief.seo_insights.competitive_landscape}",
        f"- Opportunities: {brief.seo_insights.opportunities}",
        "",
        "Keywords to use:",
        _bullets(brief.enhanced_keywords),
        "",
        "Key points to cover:",
        _bullets(brief.key_points_to_cover),
        "",
        "Recommended structure:",
        structure or "(free)",
        "",
        "Trending angles:",
        _bullets(brief.trending_angles),
        "",
        "Questions to answer:",
        _bullets(brief.targeted_questions),
        "",
        "Additional context:",
        brief.additional_context or "(none)",
    ]
    if request.target_audience:
        lines.append(f"Target audience: {request.target_audience}")
    if request.additional_context:
        lines.append(f"User notes: {request.additional_context}")

    lines.extend(
        [
            "",
            "Writing guidelines:",
            f"- Tone: {options.tone.value}",
            f"- Style: {options.style.value}",
            f"- Target word count: {options.word_count}",
            f"- Main sections: {options.section_count}",
            "",
            "Output format (Markdown):",
            "- The article title as a single '# ' heading on the first line.",
        ]
    )
    if options.include_intro:
        lines.append("- An engaging introduction of 100-200 words right after the title.")
    lines.append(
        f"- {options.section_count} main sections with '## ' headings, "
        f"about {per_section}-{per_section + 100} words each."
    )
    if options.include_conclusion:
        lines.append("- A final '## Conclusion' section summarizing the key takeaways.")
    if options.formatting.include_toc:
        lines.append("- A short table of contents after the introduction.")
    lines.extend(
        [
            "",
            "Incorporate the keywords naturally and include current statistics and examples.",
            "Generate the article now:",
        ]
    )
    return PromptBundle(GENERATION_SYSTEM_PROMPT, "\n".join(lines))


def build_metadata_prompt(topic: str) -> PromptBundle:
    user_prompt = "\n".join(
        [
            f'Generate blog metadata for the topic: "{topic}"',
            "",
            "Provide:",
            "1. keywords: 5-8 relevant SEO keywords.",
            "2. targetAudience: who benefits from reading this blog, in 1-2 sentences.",
            "3. additionalContext: key points the blog should cover, in 2-3 sentences.",
            "",
            "Output format:",
            '{"keywords": ["keyword"], "targetAudience": "string", "additionalContext": "string"}',
        ]
    )
    return PromptBundle(METADATA_SYSTEM_PROMPT, user_prompt)


__all__ = [
    "PromptBundle",
    "build_enhancement_prompt",
    "build_generation_prompt",
    "build_metadata_prompt",
]
