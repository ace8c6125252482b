"""
Corpus statistics.

Counts what a corpus contains: posts per category, tag, year and code
sample language, plus the date range and how many duplicate groups the
linter would flag. Used by ``postlint stats``.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from postlint.corpus import Corpus

NO_LANGUAGE = "(none)"


@dataclass
class CorpusStats:
    """Aggregate counts for a corpus."""

    root: str
    total_posts: int = 0
    failures: int = 0
    total_code_samples: int = 0
    duplicate_groups: int = 0
    earliest: datetime | None = None
    latest: datetime | None = None
    categories: Counter = field(default_factory=Counter)
    tags: Counter = field(default_factory=Counter)
    languages: Counter = field(default_factory=Counter)
    years: Counter = field(default_factory=Counter)

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "total_posts": self.total_posts,
            "failures": self.failures,
            "total_code_samples": self.total_code_samples,
            "duplicate_groups": self.duplicate_groups,
            "earliest": self.earliest.isoformat() if self.earliest else None,
            "latest": self.latest.isoformat() if self.latest else None,
            "categories": dict(self.categories.most_common()),
            "tags": dict(self.tags.most_common()),
            "languages": dict(self.languages.most_common()),
            "years": dict(sorted(self.years.items())),
        }


def corpus_stats(corpus: Corpus) -> CorpusStats:
    """Compute :class:`CorpusStats` for a loaded corpus."""
    stats = CorpusStats(
        root=str(corpus.root),
        total_posts=len(corpus.posts),
        failures=len(corpus.failures),
        duplicate_groups=len(corpus.duplicates()),
    )

    dates = []
    for post in corpus.posts:
        stats.categories.update(post.categories)
        stats.tags.update(post.tags)
        for sample in post.code_samples:
            stats.languages[sample.language or NO_LANGUAGE] += 1
        stats.total_code_samples += len(post.code_samples)
        if post.date is not None:
            # Naive and aware timestamps do not compare; the wall-clock value does
            dates.append(post.date.replace(tzinfo=None))
            stats.years[str(post.date.year)] += 1

    if dates:
        stats.earliest = min(dates)
        stats.latest = max(dates)
    return stats


__all__ = ["CorpusStats", "NO_LANGUAGE", "corpus_stats"]
