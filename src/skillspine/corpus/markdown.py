"""
Small Markdown helpers shared by the extractors.

Skill documents embed templates inside fenced code blocks, and those
templates are themselves Markdown (``## Subject line``, ``---``, bullet
lists). Every scanner here is fence-aware: a line inside a fence is content,
never structure.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
BULLET_RE = re.compile(r"^\s*[-*+]\s+(.*\S)\s*$")
RULE_RE = re.compile(r"^\s{0,3}(?:-{3,}|\*{3,}|_{3,})\s*$")
SUBHEADING_RE = re.compile(r"^\s{0,3}###\s+(.*?)(?:\s+#+)?\s*$")
LABEL_RE = re.compile(r"^\s*\*\*([^*]+?):?\*\*:?\s*(.*)$")


def scan_fences(lines: list[str]) -> Iterator[tuple[int, str, bool]]:
    """Yield ``(index, line, in_fence)``.

    Fence delimiter lines themselves report ``in_fence=True``. A closing
    fence must use the same character and at least the opening length.
    """
    fence: str | None = None
    for i, line in enumerate(lines):
        match = FENCE_RE.match(line)
        if fence is None:
            if match:
                fence = match.group(1)
                yield i, line, True
                continue
            yield i, line, False
        else:
            if match and match.group(1)[0] == fence[0] and len(match.group(1)) >= len(fence) \
                    and not line.strip()[len(match.group(1)):].strip():
                fence = None
            yield i, line, True


def strip_blank_edges(lines: list[str]) -> str:
    """Join lines, dropping leading and trailing blank lines."""
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return "\n".join(lines[start:end])


def bullets(text: str) -> list[str]:
    """Bullet items (any depth) outside code fences, in order."""
    items = []
    for _, line, in_fence in scan_fences(text.splitlines()):
        if in_fence:
            continue
        match = BULLET_RE.match(line)
        if match and not RULE_RE.match(line):
            items.append(match.group(1).strip())
    return items


def strip_emphasis(text: str) -> str:
    """Remove wrapping ``*``/``_`` emphasis and surrounding whitespace."""
    text = text.strip()
    while len(text) >= 2 and text[0] == text[-1] and text[0] in "*_":
        text = text[1:-1].strip()
    return text


def unwrap_code_span(text: str) -> str:
    """``\\`api|rest\\``` -> ``api|rest``; an empty span becomes ``""``."""
    text = text.strip()
    match = re.fullmatch(r"(`+)(.*?)\1", text, re.DOTALL)
    if match:
        return match.group(2).strip()
    return text


def none_if_blank(text: str | None) -> str | None:
    if text is None:
        return None
    text = text.strip()
    return text or None


def subsections(text: str, *, stop_at_rule: bool = False) -> list[tuple[str, list[str]]]:
    """Split a section body into ``###`` blocks: ``[(heading, lines), ...]``.

    Text before the first ``###`` is discarded. With ``stop_at_rule`` a
    ``---`` rule outside a fence closes the current block; lines after it are
    dropped until the next ``###``.
    """
    blocks: list[tuple[str, list[str]]] = []
    current: list[str] | None = None
    for _, line, in_fence in scan_fences(text.splitlines()):
        if not in_fence:
            match = SUBHEADING_RE.match(line)
            if match:
                current = []
                blocks.append((match.group(1).strip(), current))
                continue
            if stop_at_rule and RULE_RE.match(line):
                current = None
                continue
        if current is not None:
            current.append(line)
    return blocks


def labeled_fields(lines: list[str], labels: dict[str, str]) -> tuple[list[str], dict[str, str]]:
    """Pull ``**Label:** value`` fields out of a block.

    ``labels`` maps a lower-cased label (without the colon) to the output
    key. A field runs from its label to the next known label outside a fence;
    the value may start on the label line or on the lines below. Returns the
    unlabeled leading lines and the field values (verbatim, blank edges
    trimmed).
    """
    lead: list[str] = []
    fields: dict[str, list[str]] = {}
    current: list[str] = lead
    for _, line, in_fence in scan_fences(lines):
        if not in_fence:
            match = LABEL_RE.match(line)
            if match and match.group(1).strip().lower() in labels:
                key = labels[match.group(1).strip().lower()]
                current = fields.setdefault(key, [])
                rest = match.group(2)
                if rest.strip():
                    current.append(rest.strip())
                continue
        current.append(line)
    return lead, {key: strip_blank_edges(value) for key, value in fields.items()}


def inline_fields(lines: list[str], labels: dict[str, str]) -> tuple[list[str], dict[str, str]]:
    """Pull one-paragraph ``**Label:** value`` fields out of a block.

    Unlike ``labeled_fields`` a value ends at the first blank line or fence;
    everything after it stays in the remaining lines, in order.
    """
    rest: list[str] = []
    fields: dict[str, list[str]] = {}
    current: list[str] | None = None
    for _, line, in_fence in scan_fences(lines):
        match = None if in_fence else LABEL_RE.match(line)
        if match and match.group(1).strip().lower() in labels:
            current = fields.setdefault(labels[match.group(1).strip().lower()], [])
            if match.group(2).strip():
                current.append(match.group(2).strip())
            continue
        if current is not None:
            if line.strip() and not in_fence:
                current.append(line.strip())
                continue
            current = None
            if not line.strip():
                continue
        rest.append(line)
    return rest, {key: " ".join(value) for key, value in fields.items()}
