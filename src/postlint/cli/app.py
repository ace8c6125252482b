"""
Root Typer application for the postlint CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from postlint.cli.utils import set_log_options
from postlint.core.settings import LOG_FORMATS, LOG_LEVELS

app = Typer(
    name="postlint",
    help="Lint and inspect a Markdown blog post corpus.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        from postlint import __version__

        try:
            v = pkg_version("postlint")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"postlint {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(  # noqa: UP007
        None,
        "--log-level",
        envvar="POSTLINT_LOG_LEVEL",
        help="DEBUG, INFO, WARNING or ERROR. Defaults to log_level from settings. Logs go to stderr.",
    ),
    log_format: str | None = typer.Option(  # noqa: UP007
        None,
        "--log-format",
        envvar="POSTLINT_LOG_FORMAT",
        help="console or json. Defaults to log_format from settings.",
    ),
) -> None:
    """Lint posts, show statistics, inspect single files."""
    if log_level is not None and log_level.upper() not in LOG_LEVELS:
        raise typer.BadParameter(f"unknown log level {log_level!r}", param_hint="--log-level")
    if log_format is not None and log_format.lower() not in LOG_FORMATS:
        raise typer.BadParameter(f"unknown log format {log_format!r}", param_hint="--log-format")
    set_log_options(level=log_level, log_format=log_format)


# ── Command registration ─────────────────────────────────────────────────

from postlint.cli.config import app as config_app  # noqa: E402
from postlint.cli.corpus import show_cmd, stats_cmd  # noqa: E402
from postlint.cli.lint import duplicates_cmd, lint_cmd, rules_cmd  # noqa: E402

app.command("lint")(lint_cmd)
app.command("stats")(stats_cmd)
app.command("show")(show_cmd)
app.command("duplicates")(duplicates_cmd)
app.command("rules")(rules_cmd)
app.add_typer(config_app, name="config", help="Configuration inspection.")
