"""
Record types for parsed skill documents.

All records are frozen dataclasses built once at parse time. Collections are
tuples/frozensets so a parsed ``Skill`` (and the index built from it) can be
shared between threads without copying.

Manifesto:
    A skill corpus is read-only reference data. Modelling it as immutable
    values makes parsing deterministic (parse twice, get equal records) and
    makes the finished index safe for any number of concurrent readers.

Architecture:
    ::

        Skill ─┬─ Pattern*        (name, when, description)
               ├─ AntiPattern*    (name, problem, why_bad, instead)
               ├─ SharpEdge*      (severity, situation, why, solution, symptoms)
               ├─ HandoffRule*    (trigger, delegate_to, context)  ──► Skill
               └─ ReceivesFrom*   (skill, context)

Tags:
    data-model, dataclass, immutable, skill-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from pathlib import Path
from typing import Any


class Severity(str, Enum):
    """Sharp edge severity. ``UNKNOWN`` marks an unrecognized token."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def recognized(cls) -> tuple[Severity, ...]:
        return (cls.LOW, cls.MEDIUM, cls.HIGH, cls.CRITICAL)

    @classmethod
    def from_token(cls, token: str | None) -> Severity:
        """Exact (case-insensitive) match against the recognized values.

        >>> Severity.from_token("high")
        <Severity.HIGH: 'HIGH'>
        >>> Severity.from_token("SEVERE")
        <Severity.UNKNOWN: 'UNKNOWN'>
        """
        if token:
            normalized = token.strip().upper()
            for severity in cls.recognized():
                if severity.value == normalized:
                    return severity
        return cls.UNKNOWN


class SectionKind(str, Enum):
    """Discriminator for a split Markdown section.

    Headings that match no known prefix classify as ``UNKNOWN``.
    """

    TITLE = "title"
    IDENTITY = "identity"
    EXPERTISE = "expertise"
    PATTERNS = "patterns"
    ANTI_PATTERNS = "anti_patterns"
    SHARP_EDGES = "sharp_edges"
    DECISIONS = "decisions"
    COLLABORATION = "collaboration"
    UNKNOWN = "unknown"


class DiagnosticKind(str, Enum):
    """Non-fatal problems recorded while loading, parsing and indexing."""

    IO_ERROR = "IO_ERROR"
    PARSE_WARNING = "PARSE_WARNING"
    SEVERITY_MISMATCH = "SEVERITY_MISMATCH"
    DANGLING_HANDOFF = "DANGLING_HANDOFF"


@dataclass(frozen=True)
class Diagnostic:
    """A recorded warning. Never raised."""

    kind: DiagnosticKind
    message: str
    source: str = ""
    detail: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "source": self.source,
            "detail": dict(self.detail),
        }


@dataclass(frozen=True)
class Section:
    """One ``#``/``##`` heading and the text beneath it."""

    kind: SectionKind
    heading: str
    level: int
    body: str
    line: int = 0


@dataclass(frozen=True)
class SourceDocument:
    """One logical skill document.

    A file holding several documents joined by the related-doc separator
    yields one ``SourceDocument`` per block, numbered by ``ordinal``.

    ``skill_id`` is the file stem when the file holds a single document;
    generated corpora name each file after the skill id handoffs refer to.
    """

    path: Path
    ordinal: int
    text: str
    skill_id: str | None = None

    @property
    def source_id(self) -> str:
        return f"{self.path.as_posix()}#{self.ordinal}"


@dataclass(frozen=True)
class Pattern:
    name: str
    when: str | None
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "when": self.when, "description": self.description}


@dataclass(frozen=True)
class AntiPattern:
    name: str
    problem: str
    why_bad: str | None = None
    instead: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "problem": self.problem,
            "why_bad": self.why_bad,
            "instead": self.instead,
        }


@dataclass(frozen=True)
class SharpEdge:
    """A documented failure mode (gotcha).

    Attributes:
        title: Heading text after the severity tag
        severity: Parsed severity, ``UNKNOWN`` when the tag is unrecognized
        raw_severity: Severity token exactly as written (``None`` if absent)
        situation: When the problem shows up
        why: Causal explanation
        solution: Remedy, verbatim (code fences preserved)
        symptoms: Observable signs
    """

    title: str
    severity: Severity
    raw_severity: str | None = None
    situation: str | None = None
    why: str | None = None
    solution: str | None = None
    symptoms: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "severity": self.severity.value,
            "raw_severity": self.raw_severity,
            "situation": self.situation,
            "why": self.why,
            "solution": self.solution,
            "symptoms": list(self.symptoms),
        }


@dataclass(frozen=True)
class HandoffRule:
    """A row of a "When to Hand Off" table: a directed edge skill -> skill.

    Empty cells are kept as ``None`` so incomplete tables stay visible.
    """

    source_skill: str
    trigger: str | None
    delegate_to: str | None
    context: str | None = None
    row: int = 0

    @cached_property
    def _compiled(self) -> re.Pattern[str] | None:
        if not self.trigger:
            return None
        try:
            return re.compile(self.trigger, re.IGNORECASE)
        except re.error:
            return None

    def pattern(self) -> re.Pattern[str] | None:
        """The trigger as a case-insensitive regex, ``None`` if empty or invalid."""
        return self._compiled

    def matches(self, text: str) -> bool:
        """Regex search of the trigger alternation, substring test as fallback."""
        if not self.trigger:
            return False
        compiled = self._compiled
        if compiled is not None:
            return compiled.search(text) is not None
        return self.trigger.lower() in text.lower()

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_skill": self.source_skill,
            "trigger": self.trigger,
            "delegate_to": self.delegate_to,
            "context": self.context,
            "row": self.row,
        }


@dataclass(frozen=True)
class ReceivesFrom:
    skill: str
    context: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"skill": self.skill, "context": self.context}


@dataclass(frozen=True)
class Skill:
    """One parsed skill document.

    Attributes:
        id: File stem of a single-document file, else slug of the name
            (``stakeholder-management``)
        name: Title text of the ``#`` heading
        summary: First blockquote under the title
        category: From the ``**Category:**`` line
        version: From the ``**Version:**`` part of the same line
        tags: From the ``**Tags:**`` line
        identity: Identity section text
        expertise: Expertise Areas bullets, in order
        source_path: File the document came from
        source_ordinal: Position of the document within that file
    """

    id: str
    name: str
    summary: str | None = None
    category: str | None = None
    version: str | None = None
    tags: frozenset[str] = frozenset()
    identity: str | None = None
    expertise: tuple[str, ...] = ()
    patterns: tuple[Pattern, ...] = ()
    anti_patterns: tuple[AntiPattern, ...] = ()
    sharp_edges: tuple[SharpEdge, ...] = ()
    handoffs: tuple[HandoffRule, ...] = ()
    receives_from: tuple[ReceivesFrom, ...] = ()
    pairs_with: tuple[str, ...] = ()
    decisions: str | None = None
    source_path: str = ""
    source_ordinal: int = 0

    @property
    def source_id(self) -> str:
        return f"{self.source_path}#{self.source_ordinal}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "summary": self.summary,
            "category": self.category,
            "version": self.version,
            "tags": sorted(self.tags),
            "identity": self.identity,
            "expertise": list(self.expertise),
            "patterns": [p.to_dict() for p in self.patterns],
            "anti_patterns": [a.to_dict() for a in self.anti_patterns],
            "sharp_edges": [e.to_dict() for e in self.sharp_edges],
            "handoffs": [h.to_dict() for h in self.handoffs],
            "receives_from": [r.to_dict() for r in self.receives_from],
            "pairs_with": list(self.pairs_with),
            "decisions": self.decisions,
            "source_path": self.source_path,
            "source_ordinal": self.source_ordinal,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Skill:
        """Rebuild a Skill from ``to_dict()`` output."""
        return cls(
            id=data["id"],
            name=data["name"],
            summary=data.get("summary"),
            category=data.get("category"),
            version=data.get("version"),
            tags=frozenset(data.get("tags", [])),
            identity=data.get("identity"),
            expertise=tuple(data.get("expertise", [])),
            patterns=tuple(Pattern(**p) for p in data.get("patterns", [])),
            anti_patterns=tuple(AntiPattern(**a) for a in data.get("anti_patterns", [])),
            sharp_edges=tuple(
                SharpEdge(
                    title=e["title"],
                    severity=Severity(e["severity"]),
                    raw_severity=e.get("raw_severity"),
                    situation=e.get("situation"),
                    why=e.get("why"),
                    solution=e.get("solution"),
                    symptoms=tuple(e.get("symptoms", [])),
                )
                for e in data.get("sharp_edges", [])
            ),
            handoffs=tuple(HandoffRule(**h) for h in data.get("handoffs", [])),
            receives_from=tuple(ReceivesFrom(**r) for r in data.get("receives_from", [])),
            pairs_with=tuple(data.get("pairs_with", [])),
            decisions=data.get("decisions"),
            source_path=data.get("source_path", ""),
            source_ordinal=data.get("source_ordinal", 0),
        )


def slugify(text: str) -> str:
    """Lower-case, hyphen-separated identifier.

    >>> slugify("Stakeholder Management")
    'stakeholder-management'
    """
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower())
    return slug.strip("-")
