"""Heuristic splitting of generated letter text into display sections.

This is best-effort structuring for display, not a grammar. The raw text stays
authoritative. Known misparses:
- a short all-caps sentence ("I AM SORRY.") becomes a heading
- a long heading without a trailing colon stays in the body
"""

from letterdesk.app.models.document import DocumentSection

DEFAULT_HEADING = "Letter"
HEADING_MAX_CHARS = 30


def is_heading(line: str) -> bool:
    """Check whether a trimmed line looks like a section heading."""
    if not line:
        return False
    if line.endswith(":"):
        return True
    # Require a cased letter so separators like "---" or "2024" stay in the body
    has_cased = line.upper() != line.lower()
    return has_cased and line == line.upper() and len(line) < HEADING_MAX_CHARS


def parse_sections(raw_text: str) -> list[DocumentSection]:
    """Split raw letter text into (heading, content) sections.

    Never raises, and always returns at least one section: when no heading
    with content is found, the whole text becomes a single "Letter" section.

    Args:
        raw_text: Generated letter text

    Returns:
        Ordered list of sections
    """
    sections: list[DocumentSection] = []
    heading = DEFAULT_HEADING
    content: list[str] = []

    for line in raw_text.split("\n"):
        trimmed = line.strip()
        if is_heading(trimmed):
            if "\n".join(content).strip():
                sections.append(DocumentSection(heading=heading, content="\n".join(content) + "\n"))
            heading = trimmed.replace(":", "", 1)
            content = []
        else:
            content.append(line)

    if "\n".join(content).strip():
        sections.append(DocumentSection(heading=heading, content="\n".join(content) + "\n"))

    if not sections:
        return [DocumentSection(heading=DEFAULT_HEADING, content=raw_text)]
    return sections
