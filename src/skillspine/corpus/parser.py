"""
Skill document parser.

Turns one ``SourceDocument`` into a ``Skill`` record plus the diagnostics
collected on the way.

Architecture:
    ::

        SourceDocument.text
              │
              ▼
        split_sections() ──► SectionMap [TITLE, IDENTITY, ..., COLLABORATION]
              │
              ├──► parse_header(TITLE)            name, summary, category, version, tags
              ├──► extract_identity / expertise
              ├──► extract_patterns / anti_patterns
              ├──► extract_sharp_edges(SHARP_EDGES)  + SEVERITY_MISMATCH diagnostics
              ├──► extract_handoffs(COLLABORATION)   HandoffRule rows (empties kept)
              └──► extract_decisions(DECISIONS)
              │
              ▼
        ParseOutcome(skill, diagnostics)

Guardrails:
    - Do NOT raise on a malformed section
      ✅ Record a PARSE_WARNING and leave the field empty
    - Do NOT merge repeated sections
      ✅ Take the first, warn about the rest (the loader splits concatenated docs)
    - A document without a ``#`` title has no identity at all
      ✅ Raise DocumentParseError; the builder skips it

Tags:
    parser, markdown, skill-document, skill-spine

Doc-Types:
    - API Reference
    - Architecture
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from skillspine.core.errors import DocumentParseError
from skillspine.core.logging import LogContext, get_logger
from skillspine.corpus.extractors import (
    extract_anti_patterns,
    extract_decisions,
    extract_expertise,
    extract_identity,
    extract_patterns,
)
from skillspine.corpus.gotchas import extract_sharp_edges
from skillspine.corpus.handoffs import extract_handoffs, extract_pairs_with, extract_receives_from
from skillspine.corpus.header import parse_header
from skillspine.corpus.models import (
    Diagnostic,
    DiagnosticKind,
    SectionKind,
    Skill,
    SourceDocument,
    slugify,
)
from skillspine.corpus.sections import SectionMap

logger = get_logger(__name__)

# Sections every generated skill document carries.
EXPECTED_SECTIONS = (
    SectionKind.IDENTITY,
    SectionKind.PATTERNS,
    SectionKind.SHARP_EDGES,
)


@dataclass(frozen=True)
class ParseOutcome:
    """A parsed skill and the non-fatal diagnostics raised while parsing it."""

    skill: Skill
    diagnostics: tuple[Diagnostic, ...] = field(default=())


class SkillParser:
    """Parse skill documents into ``Skill`` records.

    Stateless; a single instance may be shared by worker threads.

    Examples:
        >>> parser = SkillParser()
        >>> outcome = parser.parse_text("# Copywriting\\n\\n**Category:** marketing | **Version:** 1.0.0\\n")
        >>> outcome.skill.category
        'marketing'
    """

    def __init__(self, expected_sections: tuple[SectionKind, ...] = EXPECTED_SECTIONS):
        self.expected_sections = expected_sections

    def parse_text(self, text: str, path: Path | str = "<memory>", ordinal: int = 0) -> ParseOutcome:
        return self.parse(SourceDocument(path=Path(path), ordinal=ordinal, text=text))

    def parse(self, document: SourceDocument) -> ParseOutcome:
        """Parse one document.

        Raises:
            DocumentParseError: The document has no ``#`` title
        """
        source = document.source_id
        with LogContext(source=source):
            return self._parse(document, source)

    def _parse(self, document: SourceDocument, source: str) -> ParseOutcome:
        sections = SectionMap.from_text(document.text)
        diagnostics: list[Diagnostic] = []

        def warn(message: str, **detail) -> None:
            logger.warning("parse_warning", detail=message, **detail)
            diagnostics.append(
                Diagnostic(kind=DiagnosticKind.PARSE_WARNING, message=message, source=source, detail=detail)
            )

        title = sections.first(SectionKind.TITLE)
        if title is None:
            raise DocumentParseError("Document has no '# <Title>' heading", path=str(document.path)).with_context(
                source_id=source
            )

        header = parse_header(title.heading, title.body)
        if header.name is None:
            raise DocumentParseError("Document title is empty", path=str(document.path)).with_context(
                source_id=source
            )
        for key in header.missing:
            warn(f"Missing header field: {key}", field=key)

        for kind in self.expected_sections:
            if sections.first(kind) is None:
                warn(f"Missing section: {kind.value}", section=kind.value)

        def body(kind: SectionKind) -> str | None:
            found = sections.all(kind)
            if len(found) > 1:
                warn(
                    f"Repeated section '{found[0].heading}' ({len(found)} occurrences), using the first",
                    section=kind.value,
                    lines=[s.line for s in found],
                )
            return found[0].body if found else None

        for extra in sections.all(SectionKind.TITLE)[1:]:
            warn(f"Additional title heading '{extra.heading}' ignored", line=extra.line)

        edges, edge_diagnostics = extract_sharp_edges(body(SectionKind.SHARP_EDGES), source=source)
        diagnostics.extend(edge_diagnostics)

        collaboration = body(SectionKind.COLLABORATION)
        skill_id = document.skill_id or slugify(header.name)

        # "Works Well With" follows whichever section the generator emitted last.
        pairs_with: list[str] = []
        for section in sections:
            pairs_with.extend(extract_pairs_with(section.body))

        skill = Skill(
            id=skill_id,
            name=header.name,
            summary=header.summary,
            category=header.category,
            version=header.version,
            tags=header.tags,
            identity=extract_identity(body(SectionKind.IDENTITY)),
            expertise=tuple(extract_expertise(body(SectionKind.EXPERTISE))),
            patterns=tuple(extract_patterns(body(SectionKind.PATTERNS))),
            anti_patterns=tuple(extract_anti_patterns(body(SectionKind.ANTI_PATTERNS))),
            sharp_edges=tuple(edges),
            handoffs=tuple(extract_handoffs(collaboration, source_skill=skill_id)),
            receives_from=tuple(extract_receives_from(collaboration)),
            pairs_with=tuple(pairs_with),
            decisions=extract_decisions(body(SectionKind.DECISIONS)),
            source_path=document.path.as_posix(),
            source_ordinal=document.ordinal,
        )

        logger.debug(
            "skill_parsed",
            skill=skill.id,
            sharp_edges=len(skill.sharp_edges),
            handoffs=len(skill.handoffs),
            warnings=len(diagnostics),
        )
        return ParseOutcome(skill=skill, diagnostics=tuple(diagnostics))


def parse_skill(text: str, path: Path | str = "<memory>") -> Skill:
    """Parse Markdown text and return only the ``Skill``."""
    return SkillParser().parse_text(text, path).skill
