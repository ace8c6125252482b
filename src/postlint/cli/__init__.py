"""
Typer-based command-line interface for postlint.

Usage::

    postlint lint _posts
    postlint stats --json
    postlint show _posts/aws/2023-10-13-throttling-exception.md
"""

from postlint.cli.app import app


def main() -> None:
    """Entry point for the ``postlint`` console script."""
    app()


__all__ = ["app", "main"]
