"""
CLI helpers: settings resolution, error handling, output formatting.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from postlint.core.errors import PostLintError
from postlint.core.logging import configure_logging, get_logger
from postlint.core.settings import PostLintSettings, get_settings

console = Console()
err_console = Console(stderr=True)

logger = get_logger(__name__)

EXIT_LINT_FAILED = 1
EXIT_USAGE_ERROR = 2

_SEVERITY_STYLES = {"error": "bold red", "warning": "yellow", "info": "cyan"}

# Logging options given on the command line; None defers to settings
_log_options: dict[str, str | None] = {"level": None, "format": None}


# ── Logging helpers ──────────────────────────────────────────────────────


def set_log_options(level: str | None = None, log_format: str | None = None) -> None:
    """Record the root command's logging flags and configure logging with them."""
    _log_options["level"] = level
    _log_options["format"] = log_format
    _configure(level or "WARNING", log_format or "console")


def apply_log_settings(settings: PostLintSettings) -> None:
    """Reconfigure logging from settings wherever no flag was given."""
    _configure(
        _log_options["level"] or settings.log_level,
        _log_options["format"] or settings.log_format,
    )


def _configure(level: str, log_format: str) -> None:
    configure_logging(level=level.upper(), json_format=log_format.lower() == "json")


# ── Settings helpers ─────────────────────────────────────────────────────


def load_settings(config_file: Path | None = None) -> PostLintSettings:
    """Resolve settings for a command, honouring an explicit ``--config``.

    Logging follows ``log_level``/``log_format`` from the resolved
    settings unless the root command was given ``--log-level`` or
    ``--log-format``.
    """
    settings = get_settings(config_file=config_file)
    apply_log_settings(settings)
    return settings


def resolve_root(root: Path | None, settings: PostLintSettings) -> Path:
    """Corpus root from the argument, else from settings."""
    if root is not None:
        return root
    return settings.posts_path()


# ── Error handling ───────────────────────────────────────────────────────


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn ``PostLintError`` into a red message and exit code 2."""
    try:
        yield
    except PostLintError as e:
        logger.debug("command_failed", **e.to_dict())
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {escape(str(e))}")
        raise typer.Exit(code=EXIT_USAGE_ERROR) from e


# ── Output helpers ───────────────────────────────────────────────────────


def print_json(payload: Any) -> None:
    """Write JSON to stdout without rich markup or wrapping."""
    typer.echo(json.dumps(payload, indent=2, default=str))


def severity_style(severity: str) -> str:
    return _SEVERITY_STYLES.get(severity, "")


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(escape(str(v)) if v is not None else "" for v in row.values()))
    console.print(table)


def print_counter(counts: dict[str, int], *, title: str, limit: int = 15) -> None:
    """Render a name → count mapping as a two-column table."""
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    table.add_column("Posts", justify="right")
    items = list(counts.items())
    for name, count in items[:limit]:
        table.add_row(escape(name), str(count))
    if len(items) > limit:
        table.add_row(f"... and {len(items) - limit} more", "")
    console.print(table)
