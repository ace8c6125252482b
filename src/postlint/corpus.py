"""
Corpus loading: turn a directory of Markdown files into Posts.

Manifesto:
    A lint run must see every file, including the broken ones. Loading
    never aborts on a bad post: parse failures are collected as
    ``LoadFailure`` records so the linter can report them next to the
    posts that loaded fine.

Architecture:
    ::

        load_corpus(root)
        │
        ├── walk root (sorted, skip patterns, glob patterns)
        │     └── load_post(path)
        │           ├── read UTF-8 text         → PostReadError
        │           ├── split_front_matter      → FrontMatterError
        │           ├── parse_front_matter      → FrontMatterError
        │           ├── scan_markdown
        │           └── parse_post_filename
        ▼
        Corpus(posts=[...], failures=[LoadFailure(path, error), ...])

Examples:
    >>> corpus = load_corpus(Path("_posts"))
    >>> len(corpus.posts), len(corpus.failures)
    (212, 1)
    >>> corpus.duplicates()[0][0].title
    'AWSOpenSearchServerlessException'

Tags:
    corpus, loader, markdown, front-matter, postlint

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from postlint.core.errors import CorpusNotFoundError, PostLintError, PostReadError
from postlint.core.logging import LogContext, get_logger
from postlint.core.models import Post
from postlint.parser.frontmatter import parse_front_matter, split_front_matter
from postlint.parser.markdown import scan_markdown
from postlint.parser.paths import is_post_file, parse_post_filename

logger = get_logger(__name__)

DEFAULT_PATTERNS = ["*.md", "*.markdown"]


@dataclass
class LoadFailure:
    """A file that looked like a post but could not be loaded."""

    path: Path
    error: PostLintError
    relative_path: str | None = None

    @property
    def display_path(self) -> str:
        return self.relative_path or str(self.path)


@dataclass
class Corpus:
    """All posts found under a root directory.

    Attributes:
        root: Directory that was scanned
        posts: Successfully loaded posts, in path order
        failures: Files that could not be loaded
    """

    root: Path
    posts: list[Post] = field(default_factory=list)
    failures: list[LoadFailure] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self.posts)

    def by_category(self) -> dict[str, list[Post]]:
        """Posts grouped by each category they list."""
        groups: dict[str, list[Post]] = defaultdict(list)
        for post in self.posts:
            for category in post.categories:
                groups[category].append(post)
        return dict(groups)

    def by_tag(self) -> dict[str, list[Post]]:
        """Posts grouped by each tag they carry."""
        groups: dict[str, list[Post]] = defaultdict(list)
        for post in self.posts:
            for tag in post.tags:
                groups[tag].append(post)
        return dict(groups)

    def duplicates(self) -> list[list[Post]]:
        """Groups of two or more posts sharing the same title and date."""
        groups: dict[tuple[str, str], list[Post]] = defaultdict(list)
        for post in self.posts:
            if post.identity is not None:
                groups[post.identity].append(post)
        return [group for group in groups.values() if len(group) > 1]

    def find(self, key: str) -> Post | None:
        """Look a post up by slug, filename, or path relative to the root."""
        for post in self.posts:
            if key in (post.slug, post.path.name, post.display_path, str(post.path)):
                return post
        return None


def load_post(path: Path, *, root: Path | None = None) -> Post:
    """Load a single post file.

    Raises:
        PostReadError: File is unreadable or not valid UTF-8
        FrontMatterError: Front matter is unterminated, invalid YAML, or not a mapping
    """
    relative = _relative(path, root)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PostReadError(f"Cannot read post: {e}", cause=e).with_context(path=relative) from e

    try:
        yaml_text, body, body_line = split_front_matter(text)
        front_matter = parse_front_matter(yaml_text)
    except PostLintError as e:
        e.with_context(path=relative)
        raise

    scan = scan_markdown(body, first_line=body_line)

    return Post(
        path=path,
        front_matter=front_matter,
        body=body,
        body_line=body_line,
        headings=scan.headings,
        code_samples=scan.code_samples,
        filename=parse_post_filename(path),
        relative_path=relative,
    )


def iter_post_files(
    root: Path,
    patterns: list[str] | None = None,
    skip_patterns: list[str] | None = None,
) -> Iterator[Path]:
    """Yield candidate post files under ``root`` in sorted order."""
    patterns = patterns or DEFAULT_PATTERNS
    skip_patterns = skip_patterns or []

    for path in sorted(root.rglob("*")):
        path_str = str(path.relative_to(root))
        if any(pattern in path_str for pattern in skip_patterns):
            continue
        if is_post_file(path, patterns):
            yield path


def load_corpus(
    root: Path,
    *,
    patterns: list[str] | None = None,
    skip_patterns: list[str] | None = None,
) -> Corpus:
    """Load every post under ``root``.

    Files that fail to load are recorded in ``Corpus.failures`` and
    logged; they never abort the walk.

    Raises:
        CorpusNotFoundError: ``root`` does not exist or is not a directory
    """
    root = Path(root)
    if not root.is_dir():
        raise CorpusNotFoundError(str(root))

    corpus = Corpus(root=root)
    with LogContext(corpus=str(root)):
        for path in iter_post_files(root, patterns, skip_patterns):
            try:
                corpus.posts.append(load_post(path, root=root))
            except PostLintError as e:
                logger.warning("post_load_failed", **e.to_dict())
                corpus.failures.append(
                    LoadFailure(path=path, error=e, relative_path=_relative(path, root))
                )

        logger.info("corpus_loaded", posts=len(corpus.posts), failures=len(corpus.failures))
    return corpus


def _relative(path: Path, root: Path | None) -> str:
    if root is None:
        return str(path)
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


__all__ = [
    "Corpus",
    "DEFAULT_PATTERNS",
    "LoadFailure",
    "iter_post_files",
    "load_corpus",
    "load_post",
]
