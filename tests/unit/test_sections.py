"""Tests for heuristic section parsing."""

import pytest

from letterdesk.app.llm.sections import DEFAULT_HEADING, is_heading, parse_sections


@pytest.mark.parametrize(
    "line,expected",
    [
        ("To Whom It May Concern:", True),
        ("BACKGROUND", True),
        ("I AM SORRY.", True),
        ("Background", False),
        ("THIS HEADING IS FAR TOO LONG TO COUNT", False),
        ("---", False),
        ("2024", False),
        ("", False),
    ],
)
def test_is_heading(line: str, expected: bool) -> None:
    assert is_heading(line) is expected


def test_parse_sections_splits_on_headings() -> None:
    """Headings start new sections and lose their first colon."""
    text = "Intro line\nBACKGROUND\nDetail one\nDetail two\nClosing:\nSincerely,"

    sections = parse_sections(text)

    assert [s.heading for s in sections] == [DEFAULT_HEADING, "BACKGROUND", "Closing"]
    assert sections[0].content == "Intro line\n"
    assert sections[1].content == "Detail one\nDetail two\n"
    assert sections[2].content == "Sincerely,\n"


def test_parse_sections_drops_empty_sections() -> None:
    """Consecutive headings do not produce blank sections."""
    sections = parse_sections("FIRST\n\nSECOND\nbody text")

    assert len(sections) == 1
    assert sections[0].heading == "SECOND"


def test_parse_sections_without_headings_is_single_letter_section() -> None:
    text = "just one paragraph of text"

    sections = parse_sections(text)

    assert len(sections) == 1
    assert sections[0].heading == DEFAULT_HEADING
    assert sections[0].content.strip() == text


@pytest.mark.parametrize("text", ["", "\n\n", "ONLY A HEADING", "Heading:"])
def test_parse_sections_never_empty(text: str) -> None:
    """Degenerate inputs fall back to one section holding the raw text."""
    sections = parse_sections(text)

    assert len(sections) == 1
    assert sections[0].heading == DEFAULT_HEADING
    assert sections[0].content == text
