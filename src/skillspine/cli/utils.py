"""
CLI utility helpers: index loading and output formatting.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from skillspine.core.errors import SkillSpineError
from skillspine.core.settings import SkillSpineSettings
from skillspine.index.builder import BuildReport, IndexBuilder

console = Console()
err_console = Console(stderr=True)


# ── Index helper ─────────────────────────────────────────────────────────


def load_report(
    root: Path,
    *,
    workers: int | None = None,
    config: Path | None = None,
) -> BuildReport:
    """Build the index for ``root``; exits with code 1 on a fatal error."""
    try:
        settings = SkillSpineSettings.from_yaml(config) if config else SkillSpineSettings()
        if workers is not None:
            settings = settings.model_copy(update={"max_workers": max(1, workers)})
        return IndexBuilder(settings).build(root)
    except SkillSpineError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {escape(e.message)}")
        raise typer.Exit(code=1) from e


# ── Output helpers ───────────────────────────────────────────────────────


def print_json(payload: Any) -> None:
    console.print_json(json.dumps(payload, default=str, ensure_ascii=False))


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*("" if v is None else escape(str(v)) for v in row.values()))
    console.print(table)


def print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {escape(str(v))}")


SEVERITY_STYLES = {
    "CRITICAL": "bold red",
    "HIGH": "red",
    "MEDIUM": "yellow",
    "LOW": "green",
    "UNKNOWN": "magenta",
}


def severity_label(severity: str) -> str:
    style = SEVERITY_STYLES.get(severity, "white")
    return f"[{style}]{severity}[/{style}]"
