"""
Sharp Edge (gotcha) extractor.

Parses the blocks of a "Sharp Edges" section::

    ### [HIGH] Updates that only share good news

    **Situation:** Founder sends monthly updates for 6 months ...

    **Why it happens:**
    Fear that bad news erodes confidence.

    **Solution:**
    ```
    ## Lowlights
    - What went wrong and what we're doing about it
    ```

    **Symptoms:**
    - Investors surprised by a down round

    ---

Manifesto:
    Gotchas are authored by hand, so the severity tag is not guaranteed to
    be one of the four known levels. An unknown tag never fails the parse:
    the edge is kept with ``Severity.UNKNOWN`` and a ``SEVERITY_MISMATCH``
    diagnostic is recorded.

    Solutions are often templates (email skeletons, checklists) inside code
    fences. They are returned verbatim, fences included, so a consumer can
    render them exactly as authored.

Tags:
    parser, sharp-edges, gotchas, severity, skill-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import re

from skillspine.core.logging import get_logger
from skillspine.corpus.markdown import bullets, labeled_fields, none_if_blank, strip_emphasis, subsections
from skillspine.corpus.models import Diagnostic, DiagnosticKind, Severity, SharpEdge

logger = get_logger(__name__)

SEVERITY_TAG_RE = re.compile(r"^\[([^\]]*)\]\s*(.*)$")

_EDGE_LABELS = {
    "situation": "situation",
    "why it happens": "why",
    "why": "why",
    "solution": "solution",
    "symptoms": "symptoms",
}


def parse_edge_heading(heading: str) -> tuple[str | None, str]:
    """Split ``[HIGH] Title`` into ``("HIGH", "Title")``.

    >>> parse_edge_heading("[CRITICAL] Leaking the cap table")
    ('CRITICAL', 'Leaking the cap table')
    >>> parse_edge_heading("No tag here")
    (None, 'No tag here')
    """
    match = SEVERITY_TAG_RE.match(heading.strip())
    if not match:
        return None, strip_emphasis(heading)
    return match.group(1).strip(), strip_emphasis(match.group(2))


def extract_sharp_edges(body: str | None, source: str = "") -> tuple[list[SharpEdge], list[Diagnostic]]:
    """Extract every ``### [SEVERITY] title`` block of a Sharp Edges body.

    Args:
        body: Section body text
        source: Document id used in diagnostics and logs

    Returns:
        (edges in document order, severity mismatch diagnostics)
    """
    if not body:
        return [], []

    edges: list[SharpEdge] = []
    diagnostics: list[Diagnostic] = []

    for heading, lines in subsections(body, stop_at_rule=True):
        raw_severity, title = parse_edge_heading(heading)
        severity = Severity.from_token(raw_severity)

        if severity is Severity.UNKNOWN:
            logger.warning("severity_mismatch", source=source, token=raw_severity, title=title)
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.SEVERITY_MISMATCH,
                    message=f"Unrecognized severity {raw_severity!r} for sharp edge {title!r}",
                    source=source,
                    detail={"token": raw_severity, "title": title},
                )
            )

        _, fields = labeled_fields(lines, _EDGE_LABELS)
        symptoms = fields.get("symptoms")

        edges.append(
            SharpEdge(
                title=title,
                severity=severity,
                raw_severity=raw_severity,
                situation=none_if_blank(fields.get("situation")),
                why=none_if_blank(fields.get("why")),
                solution=none_if_blank(fields.get("solution")),
                symptoms=tuple(bullets(symptoms)) if symptoms else (),
            )
        )

    return edges, diagnostics
