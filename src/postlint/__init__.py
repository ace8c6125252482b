"""
postlint - lint and inspect a Markdown blog post corpus.

Loads a directory of Markdown posts with YAML front matter, models each
post and its embedded code samples, and checks the corpus for the
problems that break a static-site build: missing titles or dates,
unclosed code fences, duplicated articles, filename convention drift.

Example:
    >>> from pathlib import Path
    >>> from postlint import lint_corpus, load_corpus
    >>> result = lint_corpus(load_corpus(Path("_posts")))
    >>> print(result.summary())
"""

from postlint.core.errors import PostLintError
from postlint.core.models import CodeSample, FrontMatter, Heading, Post
from postlint.corpus import Corpus, load_corpus, load_post
from postlint.linter import LintConfig, LintDiagnostic, LintResult, Severity, lint_corpus, lint_post
from postlint.stats import CorpusStats, corpus_stats

__version__ = "0.1.0"

__all__ = [
    "CodeSample",
    "Corpus",
    "CorpusStats",
    "FrontMatter",
    "Heading",
    "LintConfig",
    "LintDiagnostic",
    "LintResult",
    "Post",
    "PostLintError",
    "Severity",
    "corpus_stats",
    "lint_corpus",
    "lint_post",
    "load_corpus",
    "load_post",
    "__version__",
]
