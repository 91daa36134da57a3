"""
Header extraction: title, summary blockquote, category/version and tags.

The header is everything under the ``# <Title>`` heading up to the first
``##`` section::

    # Stakeholder Management

    > Keeping investors, board and team aligned ...

    **Category:** communications | **Version:** 1.0.0

    **Tags:** investors, board, updates
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from skillspine.corpus.markdown import scan_fences

META_RE = re.compile(r"\*\*([^*:]+):\*\*\s*([^|\n]*)")


@dataclass(frozen=True)
class SkillHeader:
    name: str | None = None
    summary: str | None = None
    category: str | None = None
    version: str | None = None
    tags: frozenset[str] = frozenset()
    missing: tuple[str, ...] = ()


def parse_title(heading: str) -> str:
    """Title text with any leading ``#`` markers stripped.

    >>> parse_title("#  Stakeholder Management ")
    'Stakeholder Management'
    """
    return heading.lstrip("#").strip()


def parse_metadata(body: str) -> dict[str, str]:
    """Collect every ``**Key:** value`` pair outside fences, keys lower-cased."""
    meta: dict[str, str] = {}
    for _, line, in_fence in scan_fences(body.splitlines()):
        if in_fence:
            continue
        for match in META_RE.finditer(line):
            key = match.group(1).strip().lower()
            meta.setdefault(key, match.group(2).strip())
    return meta


def parse_summary(body: str) -> str | None:
    """First contiguous ``>`` blockquote, lines joined with spaces."""
    collected: list[str] = []
    for line in body.splitlines():
        stripped = line.strip()
        if stripped.startswith(">"):
            collected.append(stripped[1:].strip())
        elif collected:
            break
    summary = " ".join(part for part in collected if part)
    return summary or None


def parse_tags(value: str | None) -> frozenset[str]:
    """``"a, b , ,c"`` -> ``frozenset({"a", "b", "c"})``."""
    if not value:
        return frozenset()
    return frozenset(tag.strip().strip("`") for tag in value.split(",") if tag.strip().strip("`"))


def parse_header(heading: str | None, body: str) -> SkillHeader:
    """Build a ``SkillHeader``; absent required fields are listed in ``missing``."""
    meta = parse_metadata(body)
    required = {
        "name": (parse_title(heading) if heading else None) or None,
        "category": meta.get("category") or None,
        "version": meta.get("version") or None,
    }
    return SkillHeader(
        summary=parse_summary(body),
        tags=parse_tags(meta.get("tags")),
        missing=tuple(key for key, value in required.items() if value is None),
        **required,
    )
