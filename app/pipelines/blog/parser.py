"""Best-effort Markdown structure parser for generated articles.

The generation model is asked for Markdown but nothing guarantees it, so the
parser never raises: lines it cannot classify are appended to whichever part
of the article is open (introduction, current section, conclusion) or dropped
when nothing is open.

Rules:

* the first ``# `` line seen before any section heading is the title;
* ``##``/``###`` lines start a new section, numbered from 0 in order;
* non-heading lines between the title and the first section form the
  introduction;
* a section heading containing "conclusion" ends section parsing: every
  remaining non-heading line becomes the conclusion;
* the word count covers the whole raw text, not only the parsed parts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from .types import ArticleSection

_TITLE_RE = re.compile(r"^#\s+")
_SECTION_RE = re.compile(r"^#{2,3}\s+")
_ANY_HEADING_RE = re.compile(r"^#{1,3}\s+")
_PARAGRAPH_JOIN = "\n\n"


@dataclass(frozen=True)
class ParsedArticle:
    """Structured view of a raw article plus how it was obtained."""

    title: str
    introduction: Optional[str]
    sections: tuple[ArticleSection, ...]
    conclusion: Optional[str]
    word_count: int
    used_fallback: bool


def count_words(text: str) -> int:
    """Number of whitespace-delimited tokens in ``text``."""

    return len(text.split())


def parse_article(raw_text: str, *, fallback_title: str) -> ParsedArticle:
    """Split ``raw_text`` into title/introduction/sections/conclusion.

    ``used_fallback`` is set when no title heading was found (``fallback_title``
    is used instead) or when the text contains no section headings at all.
    """

    lines = [line.strip() for line in (raw_text or "").split("\n") if line.strip()]

    title = ""
    introduction: List[str] = []
    sections: List[ArticleSection] = []
    conclusion: Optional[str] = None
    heading: Optional[str] = None
    body: List[str] = []
    in_intro = False
    seen_section = False

    def _close_section() -> None:
        if heading is not None:
            sections.append(
                ArticleSection(
                    heading=heading,
                    content=_PARAGRAPH_JOIN.join(body),
                    order=len(sections),
                )
            )

    for index, line in enumerate(lines):
        if not title and not seen_section and _TITLE_RE.match(line):
            title = _TITLE_RE.sub("", line).strip()
            in_intro = True
            continue

        if _SECTION_RE.match(line):
            _close_section()
            seen_section = True
            candidate = _SECTION_RE.sub("", line).strip()
            if "conclusion" in candidate.lower():
                heading = None
                remaining = [
                    rest for rest in lines[index + 1 :] if not _ANY_HEADING_RE.match(rest)
                ]
                conclusion = _PARAGRAPH_JOIN.join(remaining).strip() or None
                break
            heading = candidate
            body = []
            in_intro = False
            continue

        if heading is not None:
            body.append(line)
        elif in_intro:
            introduction.append(line)

    else:
        _close_section()

    used_fallback = not title or not seen_section
    return ParsedArticle(
        title=title or fallback_title,
        introduction=_PARAGRAPH_JOIN.join(introduction) or None,
        sections=tuple(sections),
        conclusion=conclusion,
        word_count=count_words(raw_text or ""),
        used_fallback=used_fallback,
    )


__all__ = ["ParsedArticle", "count_words", "parse_article"]
