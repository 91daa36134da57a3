"""
CLI: read-only queries over a skill corpus.

``list``, ``search``, ``show``, ``handoff`` and ``edges`` each build the index
for ROOT and print one view of it.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from skillspine.cli.utils import (
    console,
    err_console,
    load_report,
    print_json,
    print_table,
    severity_label,
)
from skillspine.corpus.models import Severity, Skill
from skillspine.index.index import SkillIndex


def _index(root: Path, workers: int | None, config: Path | None) -> SkillIndex:
    return load_report(root, workers=workers, config=config).index


def _summary_rows(skills: list[Skill]) -> list[dict[str, str | None]]:
    return [{"id": s.id, "category": s.category, "version": s.version} for s in skills]


def list_cmd(
    root: Path = typer.Argument(..., help="Skill corpus directory."),
    category: str | None = typer.Option(None, "--category", help="Filter by category."),
    json_out: bool = typer.Option(False, "--json"),
    workers: int | None = typer.Option(None, "--workers", "-w"),
    config: Path | None = typer.Option(None, "--config", "-c"),
) -> None:
    """List skills, optionally filtered by category."""
    index = _index(root, workers, config)
    if json_out:
        print_json(index.list_skills(category))
        return
    skills = index.by_category(category) if category else list(index)
    print_table(_summary_rows(skills), title="Skills")


def search_cmd(
    root: Path = typer.Argument(..., help="Skill corpus directory."),
    query: str = typer.Argument(..., help="Space-separated terms; all must match."),
    category: str | None = typer.Option(None, "--category"),
    json_out: bool = typer.Option(False, "--json"),
    workers: int | None = typer.Option(None, "--workers", "-w"),
    config: Path | None = typer.Option(None, "--config", "-c"),
) -> None:
    """Search skills by name, id, summary and tags."""
    results = _index(root, workers, config).search(query, category)
    if json_out:
        print_json([{"id": s.id, "name": s.name, "category": s.category} for s in results])
        return
    print_table(_summary_rows(results), title=f"Search: {query}")


def show_cmd(
    root: Path = typer.Argument(..., help="Skill corpus directory."),
    skill: str = typer.Argument(..., help="Skill id or name."),
    json_out: bool = typer.Option(False, "--json"),
    workers: int | None = typer.Option(None, "--workers", "-w"),
    config: Path | None = typer.Option(None, "--config", "-c"),
) -> None:
    """Show one skill with its sharp edges and handoffs."""
    index = _index(root, workers, config)
    found = index.get(skill)
    if found is None:
        err_console.print(f"[bold red]Error[/bold red]: unknown skill {skill!r}")
        raise typer.Exit(code=1)

    if json_out:
        print_json(found.to_dict())
        return

    console.print(f"[bold]{escape(found.name)}[/bold] [dim]({found.id})[/dim]")
    console.print(f"  [cyan]category[/cyan]: {found.category or '-'}  [cyan]version[/cyan]: {found.version or '-'}")
    if found.tags:
        console.print(f"  [cyan]tags[/cyan]: {escape(', '.join(sorted(found.tags)))}")
    if found.summary:
        console.print(f"\n{escape(found.summary)}")

    if found.sharp_edges:
        console.print(f"\n[bold]Sharp edges[/bold] ({len(found.sharp_edges)})")
        for edge in found.sharp_edges:
            console.print(f"  {severity_label(edge.severity.value)} {escape(edge.title)}")

    if found.handoffs:
        print_table(
            [
                {"trigger": rule.trigger, "delegate_to": rule.delegate_to, "context": rule.context}
                for rule in found.handoffs
            ],
            title="Handoffs",
        )
    receivers = index.receivers_of(found.id)
    if receivers:
        console.print(f"\n[cyan]receives handoffs from[/cyan]: {', '.join(receivers)}")


def handoff_cmd(
    root: Path = typer.Argument(..., help="Skill corpus directory."),
    text: str = typer.Argument(..., help="Request text to route."),
    json_out: bool = typer.Option(False, "--json"),
    workers: int | None = typer.Option(None, "--workers", "-w"),
    config: Path | None = typer.Option(None, "--config", "-c"),
) -> None:
    """Show handoff rules whose trigger matches TEXT."""
    rules = _index(root, workers, config).find_by_trigger(text)
    if json_out:
        print_json([rule.to_dict() for rule in rules])
        return
    print_table(
        [
            {"from": rule.source_skill, "delegate_to": rule.delegate_to, "trigger": rule.trigger}
            for rule in rules
        ],
        title="Handoffs",
    )


def edges_cmd(
    root: Path = typer.Argument(..., help="Skill corpus directory."),
    severity: Severity | None = typer.Option(None, "--severity", "-s", case_sensitive=False),
    skill: str | None = typer.Option(None, "--skill"),
    json_out: bool = typer.Option(False, "--json"),
    workers: int | None = typer.Option(None, "--workers", "-w"),
    config: Path | None = typer.Option(None, "--config", "-c"),
) -> None:
    """List sharp edges across the corpus."""
    pairs = _index(root, workers, config).sharp_edges(severity=severity, skill=skill)
    if json_out:
        print_json([{"skill": s.id, **edge.to_dict()} for s, edge in pairs])
        return
    print_table(
        [{"skill": s.id, "severity": edge.severity.value, "title": edge.title} for s, edge in pairs],
        title="Sharp edges",
    )
