"""
CLI: ``postlint stats`` and ``postlint show``.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from postlint.cli.utils import (
    console,
    handle_errors,
    load_settings,
    print_counter,
    print_json,
    print_table,
    resolve_root,
    severity_style,
)
from postlint.corpus import load_corpus, load_post
from postlint.linter import LintConfig, lint_post
from postlint.stats import corpus_stats


def stats_cmd(
    root: Path | None = typer.Argument(None, help="Corpus root. Defaults to posts_dir from settings."),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="YAML config file."),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
) -> None:
    """Show statistics about the corpus.

    Displays counts of posts, categories, tags, code sample languages
    and posts per year.
    """
    with handle_errors():
        settings = load_settings(config_file)
        corpus = load_corpus(
            resolve_root(root, settings),
            patterns=settings.patterns,
            skip_patterns=settings.skip_patterns,
        )
    stats = corpus_stats(corpus)

    if json_out:
        print_json(stats.to_dict())
        return

    console.print("\n[bold blue]📊 Corpus Statistics[/bold blue]\n")
    console.print(f"[bold]Root:[/bold] {stats.root}")
    console.print(f"[bold]Posts:[/bold] {stats.total_posts}")
    if stats.failures:
        console.print(f"[bold red]Unparseable files:[/bold red] {stats.failures}")
    console.print(f"[bold]Code samples:[/bold] {stats.total_code_samples}")
    console.print(f"[bold]Duplicate groups:[/bold] {stats.duplicate_groups}")
    if stats.earliest and stats.latest:
        console.print(
            f"[bold]Date range:[/bold] {stats.earliest.date().isoformat()} → {stats.latest.date().isoformat()}"
        )
    console.print()

    data = stats.to_dict()
    print_counter(data["categories"], title="Categories")
    print_counter(data["tags"], title="Tags")
    print_counter(data["languages"], title="Code Languages")
    print_counter(data["years"], title="Posts per Year")


def show_cmd(
    file_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Post file to inspect."),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="YAML config file."),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
) -> None:
    """Show one post's front matter, headings, code samples and diagnostics.

    Useful for checking how a single article is read before linting the
    whole corpus.
    """
    with handle_errors():
        settings = load_settings(config_file)
        post = load_post(file_path)
        result = lint_post(post, config=LintConfig.from_settings(settings))

    if json_out:
        payload = post.to_dict()
        payload["diagnostics"] = [d.to_dict() for d in result.diagnostics]
        print_json(payload)
        return

    data = post.to_dict()
    console.print(f"\n[bold blue]📄 {escape(data['path'])}[/bold blue]\n")

    table = Table(show_header=False, pad_edge=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value", overflow="fold")
    for key in ("title", "date", "categories", "tags", "mermaid", "toc"):
        value = data[key]
        if isinstance(value, list):
            value = ", ".join(value)
        table.add_row(key, "" if value is None else escape(str(value)))
    for key, value in data["extra"].items():
        table.add_row(key, escape(str(value)))
    console.print(table)

    if post.headings:
        console.print("\n[bold]Headings:[/bold]")
        for heading in post.headings:
            indent = "  " * (heading.level - 1)
            console.print(f"  {indent}{escape(heading.text)} [dim](line {heading.line})[/dim]")

    console.print()
    print_table(data["code_samples"], title="Code Samples")

    console.print()
    if not result.diagnostics:
        console.print("[green]No diagnostics.[/green]")
    for d in result.diagnostics:
        style = severity_style(d.severity.value)
        console.print(f"  [{style}]{escape(str(d))}[/{style}]")
