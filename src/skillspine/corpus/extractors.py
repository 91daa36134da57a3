"""
Extractors for the prose sections of a skill: Identity, Expertise Areas,
Patterns, Anti-Patterns and Decision Framework.

Sharp Edges and Collaboration have their own modules (``gotchas``,
``handoffs``) since they carry more structure.
"""

from __future__ import annotations

import re

from skillspine.corpus.markdown import (
    bullets,
    inline_fields,
    labeled_fields,
    none_if_blank,
    strip_blank_edges,
    strip_emphasis,
    subsections,
)
from skillspine.corpus.models import AntiPattern, Pattern

# Emitted by the generator when a skill ships no pattern content.
_PLACEHOLDER_RE = re.compile(r"^\*[^*]*documented in full version\.?\*$", re.IGNORECASE)

_PATTERN_LABELS = {"when": "when"}
_ANTI_PATTERN_LABELS = {
    "why it's bad": "why_bad",
    "why it’s bad": "why_bad",
    "why bad": "why_bad",
    "instead": "instead",
}


def is_placeholder(body: str) -> bool:
    return bool(_PLACEHOLDER_RE.match(body.strip()))


def extract_identity(body: str | None) -> str | None:
    if body is None:
        return None
    return none_if_blank(body)


def extract_expertise(body: str | None) -> list[str]:
    if not body:
        return []
    return bullets(body)


def extract_patterns(body: str | None) -> list[Pattern]:
    """Patterns from ``###`` blocks, or one per bullet for bullet-only bodies."""
    if not body or is_placeholder(body):
        return []

    blocks = subsections(body)
    if not blocks:
        return [Pattern(name=strip_emphasis(item), when=None, description="") for item in bullets(body)]

    patterns = []
    for heading, lines in blocks:
        lead, fields = inline_fields(lines, _PATTERN_LABELS)
        patterns.append(
            Pattern(
                name=strip_emphasis(heading),
                when=none_if_blank(fields.get("when")),
                description=strip_blank_edges(lead),
            )
        )
    return patterns


def extract_anti_patterns(body: str | None) -> list[AntiPattern]:
    """Anti-patterns from ``###`` blocks, or one per bullet for bullet-only bodies."""
    if not body or is_placeholder(body):
        return []

    blocks = subsections(body)
    if not blocks:
        return [AntiPattern(name=strip_emphasis(item), problem="") for item in bullets(body)]

    anti_patterns = []
    for heading, lines in blocks:
        lead, fields = labeled_fields(lines, _ANTI_PATTERN_LABELS)
        anti_patterns.append(
            AntiPattern(
                name=strip_emphasis(heading),
                problem=strip_blank_edges(lead),
                why_bad=none_if_blank(fields.get("why_bad")),
                instead=none_if_blank(fields.get("instead")),
            )
        )
    return anti_patterns


def extract_decisions(body: str | None) -> str | None:
    if body is None:
        return None
    return none_if_blank(body)
