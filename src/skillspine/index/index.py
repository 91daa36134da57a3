"""
Read-only index over parsed skills.

``SkillIndex`` is built once from the complete list of skills and never
mutated afterwards, so it can be handed to any number of concurrent readers.
It is passed explicitly through the call chain; there is no global
"loaded corpus".

Manifesto:
    The handoff tables turn a pile of documents into a graph: each row is an
    edge from the skill that owns the table to the skill it delegates to.
    Validating those edges needs every skill at once, which is why the
    index is only built after all documents are parsed.

Architecture:
    ::

        SkillIndex.build(skills)
              │
              ├──► _by_id        id -> Skill            (first wins)
              ├──► _by_tag       tag -> (Skill, ...)
              ├──► _by_category  category -> (Skill, ...)
              ├──► _aliases      id / name / slug -> id (handoff target resolution)
              └──► _rules        HandoffRule sorted by (skill name, load order, row)

Features:
    - Lookup by id or name, by tag, by category
    - ``find_by_trigger(text)``: route a request to delegate skills
    - ``search(query)``: every term must appear in name/id/summary/tags
    - Handoff graph: edges, delegates, receivers, dangling targets
    - JSON round trip via ``to_dict()`` / ``from_dict()``

Tags:
    index, graph, query, handoff, skill-spine

Doc-Types:
    - API Reference
    - Architecture
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from skillspine.corpus.models import (
    Diagnostic,
    DiagnosticKind,
    HandoffRule,
    Severity,
    SharpEdge,
    Skill,
    slugify,
)

SUMMARY_LIMIT = 200


@dataclass(frozen=True)
class HandoffEdge:
    """A handoff rule with its endpoints resolved against the index."""

    source: str
    target: str | None
    rule: HandoffRule

    @property
    def dangling(self) -> bool:
        return self.rule.delegate_to is not None and self.target is None


def _truncate(text: str | None, limit: int = SUMMARY_LIMIT) -> str:
    if not text:
        return ""
    return text[:limit] + ("..." if len(text) > limit else "")


class SkillIndex:
    """Immutable collection of skills with secondary indices.

    Examples:
        >>> index = SkillIndex.build(skills)
        >>> [s.id for s in index.by_category("communications")]
        ['stakeholder-management']
        >>> [r.delegate_to for r in index.find_by_trigger("new REST endpoint")]
        ['backend']
    """

    def __init__(self, skills: Iterable[Skill]):
        self._skills: tuple[Skill, ...] = tuple(skills)
        self._order = MappingProxyType({id(skill): position for position, skill in enumerate(self._skills)})

        by_id: dict[str, Skill] = {}
        by_tag: dict[str, list[Skill]] = {}
        by_category: dict[str, list[Skill]] = {}
        aliases: dict[str, str] = {}
        duplicates: list[Diagnostic] = []

        for skill in self._skills:
            if skill.id in by_id:
                duplicates.append(
                    Diagnostic(
                        kind=DiagnosticKind.PARSE_WARNING,
                        message=f"Duplicate skill id {skill.id!r}; lookups return the first",
                        source=skill.source_id,
                        detail={"first": by_id[skill.id].source_id},
                    )
                )
                continue
            by_id[skill.id] = skill
            aliases.setdefault(skill.id, skill.id)

        # Ids first, so a title never shadows another skill's id.
        for skill in by_id.values():
            for alias in (skill.name.lower(), slugify(skill.name)):
                aliases.setdefault(alias, skill.id)

        for skill in self._skills:
            for tag in sorted(skill.tags):
                by_tag.setdefault(tag.lower(), []).append(skill)
            if skill.category:
                by_category.setdefault(skill.category.lower(), []).append(skill)

        self._by_id = MappingProxyType(by_id)
        self._by_tag = MappingProxyType({k: tuple(v) for k, v in by_tag.items()})
        self._by_category = MappingProxyType({k: tuple(v) for k, v in by_category.items()})
        self._aliases = MappingProxyType(aliases)
        self._duplicates = tuple(duplicates)

        ordered = sorted(self._skills, key=lambda s: (s.name.lower(), self._order[id(s)]))
        self._rules: tuple[HandoffRule, ...] = tuple(rule for skill in ordered for rule in skill.handoffs)

    @classmethod
    def build(cls, skills: Iterable[Skill]) -> SkillIndex:
        return cls(skills)

    # ── Collection ──────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._skills)

    def __iter__(self) -> Iterator[Skill]:
        return iter(self._skills)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.resolve(key) is not None

    @property
    def skills(self) -> tuple[Skill, ...]:
        return self._skills

    # ── Lookups ─────────────────────────────────────────────────────────

    def resolve(self, name: str) -> str | None:
        """Map an id, a name or a name-like reference to a skill id."""
        key = name.strip()
        for candidate in (key, key.lower(), slugify(key)):
            if candidate in self._aliases:
                return self._aliases[candidate]
        return None

    def get(self, name: str) -> Skill | None:
        skill_id = self.resolve(name)
        return self._by_id.get(skill_id) if skill_id else None

    def by_tag(self, tag: str) -> list[Skill]:
        return list(self._by_tag.get(tag.lower(), ()))

    def by_category(self, category: str) -> list[Skill]:
        return list(self._by_category.get(category.lower(), ()))

    def categories(self) -> list[str]:
        return sorted(self._by_category)

    def tags(self) -> list[str]:
        return sorted(self._by_tag)

    def list_skills(self, category: str | None = None) -> list[dict[str, Any]]:
        """Lightweight summaries, optionally filtered by category."""
        skills = self.by_category(category) if category else list(self._skills)
        return [
            {
                "id": s.id,
                "name": s.name,
                "category": s.category,
                "summary": _truncate(s.summary),
            }
            for s in skills
        ]

    def search(self, query: str, category: str | None = None) -> list[Skill]:
        """Skills where every query term occurs in name, id, summary or tags."""
        terms = [term for term in query.lower().split() if term]
        results = []
        for skill in self._skills:
            if category and (skill.category or "").lower() != category.lower():
                continue
            haystack = " ".join(
                [skill.name, skill.id, skill.summary or "", " ".join(sorted(skill.tags))]
            ).lower()
            if all(term in haystack for term in terms):
                results.append(skill)
        return results

    # ── Handoffs ────────────────────────────────────────────────────────

    def handoff_rules(self) -> list[HandoffRule]:
        """All rules, ordered by skill name, then load order, then row."""
        return list(self._rules)

    def find_by_trigger(self, text: str) -> list[HandoffRule]:
        """Rules whose trigger alternation matches ``text``.

        Triggers are tried as case-insensitive regexes; an invalid regex
        falls back to a substring test. Rules with an empty trigger never
        match.
        """
        return [rule for rule in self._rules if rule.matches(text)]

    def edges(self) -> list[HandoffEdge]:
        """Every handoff row with its target resolved (``None`` if unknown)."""
        return [
            HandoffEdge(
                source=rule.source_skill,
                target=self.resolve(rule.delegate_to) if rule.delegate_to else None,
                rule=rule,
            )
            for rule in self._rules
        ]

    def delegates_of(self, name: str) -> list[str]:
        """Resolved skill ids ``name`` hands work off to, without duplicates."""
        source = self.resolve(name)
        seen: dict[str, None] = {}
        for edge in self.edges():
            if edge.source == source and edge.target:
                seen.setdefault(edge.target, None)
        return list(seen)

    def receivers_of(self, name: str) -> list[str]:
        """Skill ids that hand work off *to* ``name``."""
        target = self.resolve(name)
        seen: dict[str, None] = {}
        for edge in self.edges():
            if target and edge.target == target:
                seen.setdefault(edge.source, None)
        return list(seen)

    def incomplete_handoffs(self) -> list[HandoffRule]:
        """Rows missing a trigger or a delegate."""
        return [rule for rule in self._rules if rule.trigger is None or rule.delegate_to is None]

    def dangling_handoffs(self) -> list[Diagnostic]:
        """One ``DANGLING_HANDOFF`` diagnostic per unresolved delegate."""
        diagnostics = []
        for edge in self.edges():
            if not edge.dangling:
                continue
            source_skill = self._by_id.get(edge.source)
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.DANGLING_HANDOFF,
                    message=f"Handoff from {edge.source!r} to unknown skill {edge.rule.delegate_to!r}",
                    source=source_skill.source_id if source_skill else edge.source,
                    detail={
                        "skill": edge.source,
                        "delegate_to": edge.rule.delegate_to,
                        "trigger": edge.rule.trigger,
                        "row": edge.rule.row,
                    },
                )
            )
        return diagnostics

    def diagnostics(self) -> list[Diagnostic]:
        """Index-level diagnostics: duplicate ids and dangling handoffs."""
        return list(self._duplicates) + self.dangling_handoffs()

    # ── Sharp edges ─────────────────────────────────────────────────────

    def sharp_edges(
        self,
        severity: Severity | str | None = None,
        skill: str | None = None,
    ) -> list[tuple[Skill, SharpEdge]]:
        """``(skill, edge)`` pairs across the corpus, in load order.

        Raises:
            ValueError: ``severity`` is a string naming no ``Severity`` member
        """
        if isinstance(severity, str) and not isinstance(severity, Severity):
            try:
                severity = Severity(severity.strip().upper())
            except ValueError:
                choices = ", ".join(s.value for s in Severity)
                raise ValueError(f"Unknown severity {severity!r}; expected one of {choices}") from None
        if skill is not None:
            found = self.get(skill)
            skills = [found] if found else []
        else:
            skills = list(self._skills)
        return [
            (s, edge)
            for s in skills
            for edge in s.sharp_edges
            if severity is None or edge.severity is severity
        ]

    # ── Serialization ───────────────────────────────────────────────────

    def stats(self) -> dict[str, Any]:
        return {
            "skills": len(self._skills),
            "categories": len(self._by_category),
            "tags": len(self._by_tag),
            "sharp_edges": sum(len(s.sharp_edges) for s in self._skills),
            "handoffs": len(self._rules),
            "incomplete_handoffs": len(self.incomplete_handoffs()),
            "dangling_handoffs": sum(1 for edge in self.edges() if edge.dangling),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "skills": [s.to_dict() for s in self._skills],
            "stats": self.stats(),
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SkillIndex:
        return cls(Skill.from_dict(item) for item in data.get("skills", []))

    @classmethod
    def from_json(cls, text: str) -> SkillIndex:
        return cls.from_dict(json.loads(text))
