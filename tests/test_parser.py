"""Tests for the Markdown article parser."""

from __future__ import annotations

from app.pipelines.blog.parser import count_words, parse_article


def test_parses_title_sections_and_conclusion(sample_article):
    parsed = parse_article(sample_article, fallback_title="Fallback")

    assert parsed.title == "Title"
    assert parsed.introduction == "Opening paragraph one.\n\nOpening paragraph two."
    assert [section.heading for section in parsed.sections] == ["First Heading", "Second Heading"]
    assert [section.order for section in parsed.sections] == [0, 1]
    assert parsed.sections[1].content == (
        "Body of the second section.\n\nMore of the second section."
    )
    assert parsed.conclusion == "Wrapping up everything."
    assert parsed.word_count == len(sample_article.split())
    assert parsed.used_fallback is False


def test_word_count_covers_the_whole_raw_text():
    raw = "# T\n\nintro words here\n\n## Conclusion\n\nend\n\n#### stray heading words"
    parsed = parse_article(raw, fallback_title="F")

    assert parsed.word_count == count_words(raw) == 12
    structured = " ".join(
        part for part in (parsed.title, parsed.introduction, parsed.conclusion) if part
    )
    assert len(structured.split()) != parsed.word_count


def test_missing_title_uses_fallback_and_flags_it():
    parsed = parse_article("## Only Section\n\nbody", fallback_title="Enhanced Title")

    assert parsed.title == "Enhanced Title"
    assert len(parsed.sections) == 1
    assert parsed.used_fallback is True


def test_title_after_first_section_is_not_the_title():
    raw = "## Section\n\nbody\n\n# Late Title\n\nmore"
    parsed = parse_article(raw, fallback_title="Fallback")

    assert parsed.title == "Fallback"
    assert parsed.sections[0].content == "body\n\n# Late Title\n\nmore"


def test_plain_text_without_headings_never_raises():
    parsed = parse_article("Just a paragraph.\nAnother line.", fallback_title="Topic")

    assert parsed.title == "Topic"
    assert parsed.sections == ()
    assert parsed.introduction is None
    assert parsed.conclusion is None
    assert parsed.word_count == 5
    assert parsed.used_fallback is True


def test_empty_text():
    parsed = parse_article("", fallback_title="Topic")

    assert parsed.title == "Topic"
    assert parsed.word_count == 0
    assert parsed.used_fallback is True


def test_conclusion_stops_parsing_and_skips_later_headings():
    raw = "# T\n\n## Intro Part\n\na\n\n## In Conclusion\n\nfirst\n\n## Appendix\n\nsecond"
    parsed = parse_article(raw, fallback_title="F")

    assert [section.heading for section in parsed.sections] == ["Intro Part"]
    assert parsed.conclusion == "first\n\nsecond"


def test_conclusion_match_is_case_insensitive():
    parsed = parse_article("# T\n\n### CONCLUSION: wrap up\n\nbye", fallback_title="F")

    assert parsed.sections == ()
    assert parsed.conclusion == "bye"


def test_empty_conclusion_is_none():
    parsed = parse_article("# T\n\n## Conclusion", fallback_title="F")

    assert parsed.conclusion is None


def test_section_orders_are_contiguous():
    raw = "# T\n" + "\n".join(f"## H{i}\ntext {i}" for i in range(7))
    parsed = parse_article(raw, fallback_title="F")

    assert [section.order for section in parsed.sections] == list(range(7))
    assert [section.heading for section in parsed.sections] == [f"H{i}" for i in range(7)]


def test_deeper_headings_are_treated_as_content():
    parsed = parse_article("# T\n\n## Section\n\n#### Detail\n\ntext", fallback_title="F")

    assert len(parsed.sections) == 1
    assert parsed.sections[0].content == "#### Detail\n\ntext"


def test_lines_between_title_and_first_section_without_title_are_dropped():
    parsed = parse_article("orphan line\n\n# Title\n\nintro", fallback_title="F")

    assert parsed.title == "Title"
    assert parsed.introduction == "intro"
