"""
CLI commands ``index`` and ``check``: build and validate a corpus.
"""

from __future__ import annotations

from pathlib import Path

import typer

from skillspine.cli.utils import console, err_console, load_report, print_dict, print_json, print_table
from skillspine.corpus.models import DiagnosticKind


def index_cmd(
    root: Path = typer.Argument(..., help="Skill corpus directory."),
    json_out: bool = typer.Option(False, "--json", help="Print the full index as JSON."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the JSON index to a file."),
    workers: int | None = typer.Option(None, "--workers", "-w", help="Parser threads (1 = sequential)."),
    config: Path | None = typer.Option(None, "--config", "-c", help="YAML settings file."),
) -> None:
    """Build the skill index and print its statistics."""
    report = load_report(root, workers=workers, config=config)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(report.index.to_json(), encoding="utf-8")
        err_console.print(f"[green]Wrote[/green] {len(report.index)} skills to {output}")

    if json_out:
        print_json(report.index.to_dict())
        return

    print_dict(report.stats, title="Index")
    if report.diagnostics:
        console.print(f"\n[yellow]{len(report.diagnostics)} diagnostics[/yellow] (run `skill-spine check`)")


def check_cmd(
    root: Path = typer.Argument(..., help="Skill corpus directory."),
    json_out: bool = typer.Option(False, "--json"),
    kind: list[DiagnosticKind] | None = typer.Option(None, "--kind", "-k", help="Only show these kinds."),
    workers: int | None = typer.Option(None, "--workers", "-w"),
    config: Path | None = typer.Option(None, "--config", "-c", help="YAML settings file."),
) -> None:
    """Report diagnostics; exit 1 on unreadable files or dangling handoffs."""
    report = load_report(root, workers=workers, config=config)
    diagnostics = [d for d in report.diagnostics if not kind or d.kind in kind]

    if json_out:
        payload = report.to_dict()
        payload["diagnostics"] = [d.to_dict() for d in diagnostics]
        print_json(payload)
    else:
        print_table(
            [{"kind": d.kind.value, "source": d.source, "message": d.message} for d in diagnostics],
            title="Diagnostics",
        )
        status = "[green]OK[/green]" if report.ok else "[bold red]FAILED[/bold red]"
        console.print(f"\n{status}: {report.stats['skills']} skills, {len(report.diagnostics)} diagnostics")

    if not report.ok:
        raise typer.Exit(code=1)


__all__ = ["index_cmd", "check_cmd"]
