"""
Section splitter for skill documents.

Splits one logical document on ``#`` and ``##`` headings (outside code
fences) into an ordered list of ``Section`` records, each classified into a
``SectionKind``.

Example:
    >>> sections = SectionMap.from_text("# Title\\n\\n## Identity\\nHi\\n")
    >>> sections.first(SectionKind.IDENTITY).body
    'Hi'
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from skillspine.corpus.markdown import scan_fences, strip_blank_edges
from skillspine.corpus.models import Section, SectionKind

HEADING_RE = re.compile(r"^(#{1,2})\s+(.*?)(?:\s+#+)?\s*$")

# Checked in order, first prefix match wins ("anti-patterns" before "patterns").
_KIND_PREFIXES: tuple[tuple[str, SectionKind], ...] = (
    ("identity", SectionKind.IDENTITY),
    ("expertise", SectionKind.EXPERTISE),
    ("anti-patterns", SectionKind.ANTI_PATTERNS),
    ("anti patterns", SectionKind.ANTI_PATTERNS),
    ("antipatterns", SectionKind.ANTI_PATTERNS),
    ("patterns", SectionKind.PATTERNS),
    ("sharp edges", SectionKind.SHARP_EDGES),
    ("gotchas", SectionKind.SHARP_EDGES),
    ("decision", SectionKind.DECISIONS),
    ("collaboration", SectionKind.COLLABORATION),
)


def classify_heading(heading: str, level: int = 2) -> SectionKind:
    """Map heading text to a ``SectionKind``.

    >>> classify_heading("Sharp Edges (Gotchas)")
    <SectionKind.SHARP_EDGES: 'sharp_edges'>
    >>> classify_heading("Get the Full Version")
    <SectionKind.UNKNOWN: 'unknown'>
    """
    if level == 1:
        return SectionKind.TITLE
    normalized = heading.strip().lower()
    for prefix, kind in _KIND_PREFIXES:
        if normalized.startswith(prefix):
            return kind
    return SectionKind.UNKNOWN


def split_sections(text: str) -> list[Section]:
    """Split Markdown into sections at level-1 and level-2 headings.

    Identical headings are kept as separate entries in document order.
    Non-blank text before the first heading becomes an ``UNKNOWN`` section
    with an empty heading and level 0.
    """
    lines = text.splitlines()
    sections: list[Section] = []

    heading: str | None = None
    level = 0
    start_line = 0
    body: list[str] = []

    def flush() -> None:
        if heading is None:
            if any(line.strip() for line in body):
                sections.append(Section(SectionKind.UNKNOWN, "", 0, strip_blank_edges(body), 1))
            return
        sections.append(
            Section(
                kind=classify_heading(heading, level),
                heading=heading,
                level=level,
                body=strip_blank_edges(body),
                line=start_line,
            )
        )

    for i, line, in_fence in scan_fences(lines):
        match = None if in_fence else HEADING_RE.match(line)
        if match:
            flush()
            level = len(match.group(1))
            heading = match.group(2).strip()
            start_line = i + 1
            body = []
        else:
            body.append(line)
    flush()

    return sections


class SectionMap:
    """Ordered, duplicate-preserving view over a document's sections."""

    def __init__(self, sections: list[Section]):
        self._sections = tuple(sections)

    @classmethod
    def from_text(cls, text: str) -> SectionMap:
        return cls(split_sections(text))

    def __iter__(self) -> Iterator[Section]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    def all(self, kind: SectionKind) -> list[Section]:
        return [s for s in self._sections if s.kind == kind]

    def first(self, kind: SectionKind) -> Section | None:
        for section in self._sections:
            if section.kind == kind:
                return section
        return None

    def kinds(self) -> list[SectionKind]:
        return [s.kind for s in self._sections]

    def as_mapping(self) -> dict[str, list[str]]:
        """Heading text -> list of bodies, in first-seen order."""
        mapping: dict[str, list[str]] = {}
        for section in self._sections:
            mapping.setdefault(section.heading, []).append(section.body)
        return mapping
