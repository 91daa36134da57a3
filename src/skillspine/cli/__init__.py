"""skill-spine command-line interface (typer + rich)."""
