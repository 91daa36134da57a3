"""
Root Typer application for the skill-spine CLI.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError
from rich.markup import escape
from typer import Typer

from skillspine.cli.utils import err_console
from skillspine.core.logging import configure_logging
from skillspine.core.settings import SkillSpineSettings

app = Typer(
    name="skill-spine",
    help="skill-spine: parse and query a Markdown skill corpus.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from skillspine import __version__

        typer.echo(f"skill-spine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level (default: from settings)."),
    json_logs: bool | None = typer.Option(None, "--json-logs/--console-logs", help="Log format (default: auto)."),
) -> None:
    """skill-spine CLI: index, search and validate skill documents."""
    overrides = {"log_level": log_level, "json_logs": json_logs}
    try:
        settings = SkillSpineSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        err_console.print(f"[bold red]Error[/bold red]: invalid settings\n{escape(str(e))}")
        raise typer.Exit(code=1) from e
    configure_logging(level=settings.log_level, json_format=settings.json_logs)


# ── Command registration ─────────────────────────────────────────────────

from skillspine.cli.corpus import check_cmd, index_cmd  # noqa: E402
from skillspine.cli.query import edges_cmd, handoff_cmd, list_cmd, search_cmd, show_cmd  # noqa: E402

app.command("index")(index_cmd)
app.command("check")(check_cmd)
app.command("list")(list_cmd)
app.command("search")(search_cmd)
app.command("show")(show_cmd)
app.command("handoff")(handoff_cmd)
app.command("edges")(edges_cmd)
