"""
CLI: ``postlint lint``, ``duplicates`` and ``rules`` commands.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from postlint.cli.utils import (
    EXIT_LINT_FAILED,
    console,
    handle_errors,
    load_settings,
    print_json,
    resolve_root,
    severity_style,
)
from postlint.corpus import load_corpus
from postlint.linter import LintConfig, lint_corpus, rule_catalog


def lint_cmd(
    root: Path | None = typer.Argument(None, help="Corpus root. Defaults to posts_dir from settings."),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="YAML config file."),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
    strict: bool = typer.Option(False, "--strict", help="Exit non-zero on warnings too."),
    no_infos: bool = typer.Option(False, "--no-infos", help="Hide info-level diagnostics."),
    disable: list[str] = typer.Option([], "--disable", "-d", help="Rule code to skip (repeatable)."),
) -> None:
    """Lint a post corpus for errors and warnings.

    Example:
        postlint lint _posts
        postlint lint --json --disable I001 | jq '.diagnostics[]'
    """
    with handle_errors():
        settings = load_settings(config_file)
        config = LintConfig.from_settings(settings)
        config.disabled_rules |= {code.upper() for code in disable}
        config.include_infos = config.include_infos and not no_infos
        config.validate_codes()

        corpus = load_corpus(
            resolve_root(root, settings),
            patterns=settings.patterns,
            skip_patterns=settings.skip_patterns,
        )
        result = lint_corpus(corpus, config=config)

    if json_out:
        print_json(result.to_dict())
    else:
        if result.diagnostics:
            table = Table(show_lines=False, pad_edge=False)
            table.add_column("Location", style="cyan", overflow="fold")
            table.add_column("Code")
            table.add_column("Severity")
            table.add_column("Message", overflow="fold")
            for d in result.diagnostics:
                style = severity_style(d.severity.value)
                table.add_row(
                    escape(d.location),
                    d.code,
                    f"[{style}]{d.severity.value}[/{style}]",
                    escape(d.message),
                )
            console.print(table)
        style = "bold green" if result.passed else "bold red"
        console.print(f"[{style}]{result.summary()}[/{style}]")

    if result.failed(strict=strict or settings.strict):
        raise typer.Exit(code=EXIT_LINT_FAILED)


def duplicates_cmd(
    root: Path | None = typer.Argument(None, help="Corpus root. Defaults to posts_dir from settings."),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="YAML config file."),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
) -> None:
    """List posts that share the same title and date."""
    with handle_errors():
        settings = load_settings(config_file)
        corpus = load_corpus(
            resolve_root(root, settings),
            patterns=settings.patterns,
            skip_patterns=settings.skip_patterns,
        )

    groups = corpus.duplicates()

    if json_out:
        print_json(
            [
                {
                    "title": group[0].title,
                    "date": group[0].date.isoformat() if group[0].date else None,
                    "paths": [p.display_path for p in group],
                }
                for group in groups
            ]
        )
        return

    if not groups:
        console.print("[green]No duplicate posts.[/green]")
        return

    for group in groups:
        console.print(f"[bold]{escape(group[0].title or '')}[/bold] [dim]({group[0].date.isoformat()})[/dim]")
        for post in group:
            console.print(f"  • {escape(post.display_path)}")
    console.print(f"\n{len(groups)} duplicate group(s)")


def rules_cmd(
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
) -> None:
    """List lint rule codes with their default severities."""
    catalog = rule_catalog()

    if json_out:
        print_json(
            [
                {
                    "code": info.code,
                    "severity": info.severity.value,
                    "description": info.description,
                    "rule": info.rule,
                }
                for info in catalog.values()
            ]
        )
        return

    table = Table(title="Lint Rules")
    table.add_column("Code", style="cyan")
    table.add_column("Severity")
    table.add_column("Description")
    table.add_column("Rule", style="dim")
    for info in catalog.values():
        style = severity_style(info.severity.value)
        table.add_row(info.code, f"[{style}]{info.severity.value}[/{style}]", info.description, info.rule)
    console.print(table)
