"""Dated post filename convention: ``YYYY-MM-DD-<slug>.md``."""

from __future__ import annotations

import re
from datetime import date
from fnmatch import fnmatch
from pathlib import Path

from postlint.core.models import PostPath

_FILENAME_RE = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})-(?P<slug>[^/\\]+?)\.(?P<ext>md|markdown)$"
)


def parse_post_filename(path: Path | str) -> PostPath | None:
    """Parse the date and slug out of a post filename.

    Returns ``None`` when the name does not follow the convention or the
    date is not a real calendar date.

    Example:
        >>> parse_post_filename("_posts/aws/2023-10-13-throttling-exception.md")
        PostPath(date=datetime.date(2023, 10, 13), slug='throttling-exception', extension='md')
    """
    match = _FILENAME_RE.match(Path(path).name)
    if match is None:
        return None
    try:
        published = date(int(match["year"]), int(match["month"]), int(match["day"]))
    except ValueError:
        return None
    return PostPath(date=published, slug=match["slug"], extension=match["ext"])


def is_post_file(path: Path, patterns: list[str]) -> bool:
    """True if ``path``'s name matches any of the glob ``patterns``."""
    return path.is_file() and any(fnmatch(path.name, pattern) for pattern in patterns)


__all__ = ["is_post_file", "parse_post_filename"]
