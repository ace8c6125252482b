"""
Domain models for a blog post corpus.

A corpus is a directory of Markdown posts. Each post is a YAML front
matter block followed by a Markdown body containing headings, prose and
fenced code samples. Models here are plain dataclasses built once by the
loader and never mutated afterwards.

Architecture:
    ::

        Post
        ├── path            _posts/aws/2023-10-13-throttling-exception.md
        ├── front_matter    FrontMatter(title, date, categories, tags, ...)
        ├── body            Markdown after the closing ``---``
        ├── headings        [Heading(level, text, line), ...]
        └── code_samples    [CodeSample(language, body, start_line, ...), ...]

Tags:
    models, dataclass, post, front-matter, postlint

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class PostPath:
    """Parts of a ``YYYY-MM-DD-<slug>.md`` filename."""

    date: date
    slug: str
    extension: str


@dataclass
class FrontMatter:
    """Parsed YAML front matter of a post.

    Attributes:
        title: Post title, ``None`` when the key is absent
        date: Publish timestamp, ``None`` when absent or unparseable
        categories: Ordered category path (e.g. ``["AWS", "Lambda"]``)
        tags: Tags with duplicates removed, first-seen order kept
        mermaid: Diagram rendering flag for the site generator
        toc: Table-of-contents flag for the site generator
        extra: Every key not modelled above
        raw: The mapping exactly as YAML produced it
        present: False when the file had no front matter block at all
    """

    title: str | None = None
    date: datetime | None = None
    categories: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    mermaid: bool | None = None
    toc: bool | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)
    present: bool = True

    def has_key(self, key: str) -> bool:
        return key in self.raw


@dataclass
class Heading:
    """An ATX heading found outside code samples."""

    level: int
    text: str
    line: int


@dataclass
class CodeSample:
    """A fenced code block embedded in a post.

    Samples are illustrative text: they are never compiled or executed.

    Attributes:
        language: First word of the info string, lowercased (``None`` if absent)
        body: Text between the fences
        start_line: 1-based line of the opening fence in the file
        end_line: 1-based line of the closing fence, ``None`` when unclosed
        fence: The opening fence marker (e.g. ``"```"`` or ``"~~~~"``)
        info: Full info string after the fence
    """

    language: str | None
    body: str
    start_line: int
    end_line: int | None
    fence: str = "```"
    info: str = ""

    @property
    def closed(self) -> bool:
        return self.end_line is not None

    @property
    def line_count(self) -> int:
        return len(self.body.splitlines())


@dataclass
class Post:
    """A single Markdown article.

    Attributes:
        path: File path the post was loaded from
        front_matter: Parsed front matter
        body: Markdown body following the front matter
        body_line: 1-based file line where ``body`` starts
        headings: Headings in document order
        code_samples: Fenced blocks in document order
        filename: Parsed dated filename, ``None`` when it does not follow the convention
        relative_path: ``path`` relative to the corpus root, for display
    """

    path: Path
    front_matter: FrontMatter
    body: str
    body_line: int = 1
    headings: list[Heading] = field(default_factory=list)
    code_samples: list[CodeSample] = field(default_factory=list)
    filename: PostPath | None = None
    relative_path: str | None = None

    @property
    def title(self) -> str | None:
        return self.front_matter.title

    @property
    def date(self) -> datetime | None:
        return self.front_matter.date

    @property
    def categories(self) -> list[str]:
        return self.front_matter.categories

    @property
    def tags(self) -> list[str]:
        return self.front_matter.tags

    @property
    def slug(self) -> str:
        if self.filename is not None:
            return self.filename.slug
        return self.path.stem

    @property
    def filename_date(self) -> date | None:
        return self.filename.date if self.filename is not None else None

    @property
    def display_path(self) -> str:
        return self.relative_path or str(self.path)

    @property
    def unclosed_samples(self) -> list[CodeSample]:
        return [s for s in self.code_samples if not s.closed]

    @property
    def identity(self) -> tuple[str, str] | None:
        """``(title, date)`` key used for duplicate detection.

        ``None`` when either part is missing, so incomplete posts never
        collide with each other.
        """
        title = (self.title or "").strip()
        if not title or self.date is None:
            return None
        return (title.casefold(), self.date.isoformat())

    def to_dict(self) -> dict[str, Any]:
        """Serialisable summary used by ``postlint show --json``."""
        fm = self.front_matter
        return {
            "path": self.display_path,
            "slug": self.slug,
            "title": fm.title,
            "date": fm.date.isoformat() if fm.date else None,
            "categories": fm.categories,
            "tags": fm.tags,
            "mermaid": fm.mermaid,
            "toc": fm.toc,
            "extra": fm.extra,
            "headings": [
                {"level": h.level, "text": h.text, "line": h.line} for h in self.headings
            ],
            "code_samples": [
                {
                    "language": s.language,
                    "start_line": s.start_line,
                    "end_line": s.end_line,
                    "lines": s.line_count,
                }
                for s in self.code_samples
            ],
        }


__all__ = ["CodeSample", "FrontMatter", "Heading", "Post", "PostPath"]
