"""
Collaboration section parser: handoff table, upstream skills and pairings.

The "When to Hand Off" table is the routing data the orchestrator uses::

    | Trigger | Delegate To | Context |
    |---------|-------------|--------|
    | `api|endpoint|rest|graphql` | backend | Needs an API |
    | `` |  |  |

Two details matter:

- Triggers are regex alternations inside a code span, so ``|`` inside
  backticks is part of the cell, not a column separator.
- Rows with empty cells are kept (``trigger=None``/``delegate_to=None``) so
  incomplete tables remain detectable downstream.
"""

from __future__ import annotations

import re

from skillspine.corpus.markdown import bullets, none_if_blank, strip_emphasis, subsections, unwrap_code_span
from skillspine.corpus.models import HandoffRule, ReceivesFrom

_DELIMITER_CELL_RE = re.compile(r"^:?-{1,}:?$")
_RECEIVES_RE = re.compile(r"^\*\*(.+?)\*\*\s*:?\s*(.*)$")


def split_row(line: str) -> list[str]:
    """Split a pipe-table row into cells.

    Pipes inside backtick code spans and escaped pipes (``\\|``) stay in the
    cell. Leading/trailing outer pipes are optional.

    >>> split_row("| `a|b` | x | y |")
    ['`a|b`', 'x', 'y']
    """
    cells: list[str] = []
    buf: list[str] = []
    tick_run = 0  # length of the backtick run that opened the current span
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch == "\\" and i + 1 < n and line[i + 1] == "|":
            buf.append("|")
            i += 2
            continue
        if ch == "`":
            j = i
            while j < n and line[j] == "`":
                j += 1
            run = j - i
            if tick_run == 0:
                # Only open a span if a matching closing run exists.
                if line.find("`" * run, j) != -1:
                    tick_run = run
            elif run == tick_run:
                tick_run = 0
            buf.append(line[i:j])
            i = j
            continue
        if ch == "|" and tick_run == 0:
            cells.append("".join(buf))
            buf = []
            i += 1
            continue
        buf.append(ch)
        i += 1
    cells.append("".join(buf))

    stripped = line.strip()
    if stripped.startswith("|"):
        cells = cells[1:]
    if stripped.endswith("|") and not stripped.endswith("\\|") and cells:
        cells = cells[:-1]
    return [cell.strip() for cell in cells]


def is_delimiter_row(cells: list[str]) -> bool:
    """``|---|:--:|`` style row. An all-empty row is data, not a delimiter."""
    filled = [cell.replace(" ", "") for cell in cells if cell]
    if not filled:
        return False
    return all(_DELIMITER_CELL_RE.match(cell) for cell in filled)


def parse_table(lines: list[str]) -> tuple[list[str], list[list[str]]]:
    """Parse the first pipe table in ``lines`` into (header, body rows).

    The header row and the ``|---|`` delimiter row directly below it are not
    body rows. Later rows are kept even when they look like ``| - | - |``.
    """
    table_lines: list[str] = []
    for line in lines:
        if line.strip().startswith("|"):
            table_lines.append(line)
        elif table_lines:
            break

    if not table_lines:
        return [], []

    header = split_row(table_lines[0])
    rows = [split_row(line) for line in table_lines[1:]]
    if rows and is_delimiter_row(rows[0]):
        rows = rows[1:]
    return header, rows


def _cell(row: list[str], index: int) -> str | None:
    """Cell text, ``None`` for a missing, blank or lone ``-`` placeholder cell."""
    if index >= len(row):
        return None
    value = none_if_blank(row[index])
    return None if value == "-" else value


def extract_handoffs(body: str | None, source_skill: str) -> list[HandoffRule]:
    """One ``HandoffRule`` per body row of the "When to Hand Off" table."""
    if not body:
        return []

    rules: list[HandoffRule] = []
    for heading, lines in subsections(body):
        if not heading.lower().startswith("when to hand off"):
            continue
        _, rows = parse_table(lines)
        for row_number, row in enumerate(rows):
            trigger = _cell(row, 0)
            rules.append(
                HandoffRule(
                    source_skill=source_skill,
                    trigger=none_if_blank(unwrap_code_span(trigger)) if trigger else None,
                    delegate_to=none_if_blank(unwrap_code_span(strip_emphasis(_cell(row, 1) or ""))),
                    context=_cell(row, 2),
                    row=row_number,
                )
            )
    return rules


def extract_receives_from(body: str | None) -> list[ReceivesFrom]:
    """``- **skill**: context`` items under "Receives Work From"."""
    if not body:
        return []
    received = []
    for heading, lines in subsections(body):
        if not heading.lower().startswith("receives work from"):
            continue
        for item in bullets("\n".join(lines)):
            match = _RECEIVES_RE.match(item)
            if match:
                received.append(ReceivesFrom(skill=match.group(1).strip(), context=none_if_blank(match.group(2))))
            else:
                received.append(ReceivesFrom(skill=strip_emphasis(item)))
    return received


def extract_pairs_with(body: str | None) -> list[str]:
    """Bullets under "Works Well With"."""
    if not body:
        return []
    pairs = []
    for heading, lines in subsections(body):
        if heading.lower().startswith("works well with"):
            pairs.extend(strip_emphasis(item) for item in bullets("\n".join(lines)))
    return pairs
