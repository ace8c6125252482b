"""
YAML front matter parsing.

A post starts with a YAML block fenced by ``---`` lines::

    ---
    title: "ThrottlingException in AWS Lambda"
    date: 2023-10-13 10:00:00 +0800
    categories: [AWS, Lambda]
    tags: [aws, lambda, exception]
    ---

Parsing is split in two steps so the loader can report *where* things
went wrong: :func:`split_front_matter` finds the block and the first
body line, :func:`parse_front_matter` turns the YAML into a
:class:`~postlint.core.models.FrontMatter`.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Any

import yaml

from postlint.core.errors import FrontMatterError
from postlint.core.models import FrontMatter

_OPEN = "---"
_CLOSE = ("---", "...")

_DATE_RE = re.compile(
    r"""
    ^(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})
    (?:
        (?:[Tt]|\s+)
        (?P<hour>\d{1,2}):(?P<minute>\d{2})
        (?::(?P<second>\d{2})(?:\.(?P<fraction>\d+))?)?
    )?
    \s*
    (?P<tz>Z|[+-]\d{2}(?::?\d{2})?)?
    $
    """,
    re.VERBOSE,
)


def split_front_matter(text: str) -> tuple[str | None, str, int]:
    """Split raw file text into ``(yaml_text, body, body_line)``.

    ``yaml_text`` is ``None`` when the file has no front matter, in which
    case the whole text is the body and ``body_line`` is 1.

    Raises:
        FrontMatterError: An opening ``---`` has no matching closing line.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != _OPEN:
        return None, text, 1

    for index in range(1, len(lines)):
        if lines[index].rstrip() in _CLOSE:
            yaml_text = "".join(lines[1:index])
            body = "".join(lines[index + 1:])
            return yaml_text, body, index + 2

    raise FrontMatterError("Front matter opened with '---' but never closed").with_context(line=1)


def parse_front_matter(yaml_text: str | None) -> FrontMatter:
    """Parse a front matter block into a :class:`FrontMatter`.

    ``None`` (no block) yields an empty FrontMatter with ``present=False``.

    Raises:
        FrontMatterError: Invalid YAML, or a document that is not a mapping.
    """
    if yaml_text is None:
        return FrontMatter(present=False)

    try:
        data = yaml.safe_load(yaml_text)
    except yaml.YAMLError as e:
        line = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            # +2: the opening '---' is file line 1 and marks are 0-based
            line = mark.line + 2
        problem = getattr(e, "problem", None) or str(e)
        raise FrontMatterError(f"Invalid YAML in front matter: {problem}", cause=e).with_context(line=line) from e

    if data is None:
        return FrontMatter()
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"Front matter must be a mapping, got {type(data).__name__}"
        ).with_context(line=2)

    raw = {str(k): v for k, v in data.items()}
    title = raw.get("title")
    known = {"title", "date", "categories", "tags", "mermaid", "toc"}

    return FrontMatter(
        title=None if title is None else str(title),
        date=parse_date(raw.get("date")),
        categories=_as_string_list(raw.get("categories")),
        tags=_dedupe(_as_string_list(raw.get("tags"))),
        mermaid=raw["mermaid"] if isinstance(raw.get("mermaid"), bool) else None,
        toc=raw["toc"] if isinstance(raw.get("toc"), bool) else None,
        extra={k: v for k, v in raw.items() if k not in known},
        raw=raw,
    )


def parse_date(value: Any) -> datetime | None:
    """Coerce a front matter ``date`` value to a datetime.

    Accepts datetimes, dates (midnight), and Jekyll-style strings such as
    ``2023-10-13``, ``2023-10-13 10:00:00 +0800`` or
    ``2023-10-13T10:00:00Z``. Returns ``None`` when the value cannot be
    read as a real calendar timestamp.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    match = _DATE_RE.match(value.strip())
    if match is None:
        return None

    parts = match.groupdict()
    fraction = (parts["fraction"] or "0")[:6].ljust(6, "0")
    try:
        return datetime(
            int(parts["year"]),
            int(parts["month"]),
            int(parts["day"]),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
            int(fraction),
            tzinfo=_parse_tz(parts["tz"]),
        )
    except ValueError:
        return None


def _parse_tz(value: str | None) -> timezone | None:
    if not value:
        return None
    if value == "Z":
        return timezone.utc
    sign = -1 if value[0] == "-" else 1
    digits = value[1:].replace(":", "")
    hours = int(digits[:2])
    minutes = int(digits[2:4] or 0)
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _as_string_list(value: Any) -> list[str]:
    # A bare string is whitespace separated, as Jekyll reads it
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return [str(value)]


def _dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


__all__ = ["parse_date", "parse_front_matter", "split_front_matter"]
