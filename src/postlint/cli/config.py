"""
CLI: ``postlint config show``.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from postlint.cli.utils import EXIT_USAGE_ERROR, console, err_console, handle_errors, load_settings, print_json
from postlint.core.settings import ENV_PREFIX

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config(
    config_file: Path | None = typer.Option(None, "--config", "-c", help="YAML config file."),
    output_format: str = typer.Option("table", "--format", "-f", help="Output format: table, json, env"),
) -> None:
    """Show the effective configuration."""
    with handle_errors():
        settings = load_settings(config_file)

    if output_format == "json":
        print_json(settings.model_dump(mode="json"))
        return

    if output_format == "env":
        for key, value in sorted(settings.model_dump(mode="json").items()):
            typer.echo(f"{ENV_PREFIX}{key.upper()}={value}")
        return

    if output_format != "table":
        err_console.print(f"[red]Unknown format:[/red] {escape(output_format)}. Use: table, json, env")
        raise typer.Exit(code=EXIT_USAGE_ERROR)

    project_root = getattr(settings, "_project_root", None)
    if project_root:
        console.print(f"[bold]Project Root:[/bold] {escape(str(project_root))}")
    loaded_file = getattr(settings, "_config_file", None)
    console.print(f"[bold]Config File:[/bold] {escape(str(loaded_file)) if loaded_file else '[dim]none[/dim]'}")
    console.print(f"[bold]Corpus:[/bold] {escape(str(settings.posts_path()))}\n")

    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", overflow="fold")
    for key, value in settings.model_dump(mode="json").items():
        if isinstance(value, list):
            value = ", ".join(value) or "-"
        elif isinstance(value, dict):
            value = ", ".join(f"{k}={v}" for k, v in value.items()) or "-"
        table.add_row(key, escape(str(value)))
    console.print(table)
