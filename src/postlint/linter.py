"""Static checks for a Markdown post corpus.

Catches the problems that break or confuse a static-site build *before*
the site is generated: missing titles and dates, unclosed code fences,
duplicated articles, filenames that do not follow the dated convention.
Extensible via a rule registry so a blog can add its own checks.

Architecture::

    lint_corpus(corpus, config)
    │
    ├── load failures                 → E001
    ├── post rules (per Post)
    │   ├── _check_front_matter_present   E002
    │   ├── _check_title                  E003
    │   ├── _check_date                   E004, E005
    │   ├── _check_unclosed_fences        E006
    │   ├── _check_filename               W002, W003
    │   ├── _check_list_fields            W004
    │   ├── _check_flag_fields            W005
    │   ├── _check_unknown_keys           W006
    │   ├── _check_code_languages         I001
    │   ├── _check_has_tags               I003
    │   └── (custom rules via register_post_rule)
    ├── corpus rules (whole Corpus)
    │   ├── _check_duplicate_posts        W001
    │   ├── _check_reused_titles          I002
    │   └── (custom rules via register_corpus_rule)
    │
    ▼
    LintResult
    ├── diagnostics: list[LintDiagnostic]
    ├── passed → bool (no errors)
    ├── errors / warnings / infos
    └── summary() → str

Example::

    from postlint.corpus import load_corpus
    from postlint.linter import lint_corpus

    result = lint_corpus(load_corpus(Path("_posts")))
    if not result.passed:
        for d in result.errors:
            print(d)

See Also:
    postlint.corpus: loading posts into a Corpus
    postlint.stats: corpus statistics
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from postlint.core.errors import RuleError, RuleNotFoundError, categorize_error
from postlint.core.logging import LogContext, get_logger
from postlint.core.models import Post
from postlint.core.settings import DEFAULT_ALLOWED_KEYS

if TYPE_CHECKING:
    from postlint.core.settings import PostLintSettings
    from postlint.corpus import Corpus

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Diagnostic model
# ---------------------------------------------------------------------------

class Severity(str, Enum):
    """Severity level for a lint diagnostic."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class LintDiagnostic:
    """A single lint finding.

    Attributes:
        code: Short identifier (e.g. ``"E003"``).
        severity: ``error``, ``warning``, or ``info``.
        message: Human-readable description.
        path: Post path relative to the corpus root (if applicable).
        line: 1-based line in ``path`` (if known).
        suggestion: Recommended fix (optional).
    """

    code: str
    severity: Severity
    message: str
    path: str | None = None
    line: int | None = None
    suggestion: str | None = None

    @property
    def location(self) -> str:
        if self.path and self.line is not None:
            return f"{self.path}:{self.line}"
        return self.path or ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "severity": self.severity.value,
            "message": self.message,
            "path": self.path,
            "line": self.line,
            "suggestion": self.suggestion,
        }

    def __str__(self) -> str:
        prefix = f"[{self.code}] {self.severity.value.upper()}"
        location = f" {self.location}" if self.location else ""
        hint = f" ({self.suggestion})" if self.suggestion else ""
        return f"{prefix}{location}: {self.message}{hint}"


@dataclass
class LintResult:
    """Aggregated result of linting a corpus.

    Attributes:
        root: Corpus root that was linted.
        post_count: Number of files considered (loaded + failed).
        diagnostics: All findings from all rules.
    """

    root: str
    post_count: int = 0
    diagnostics: list[LintDiagnostic] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True if there are no error-level diagnostics."""
        return not any(d.severity == Severity.ERROR for d in self.diagnostics)

    def failed(self, *, strict: bool = False) -> bool:
        """True on errors, or on warnings too when ``strict``."""
        if not self.passed:
            return True
        return strict and bool(self.warnings)

    @property
    def errors(self) -> list[LintDiagnostic]:
        """Error-level diagnostics only."""
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[LintDiagnostic]:
        """Warning-level diagnostics only."""
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def infos(self) -> list[LintDiagnostic]:
        """Info-level diagnostics only."""
        return [d for d in self.diagnostics if d.severity == Severity.INFO]

    def by_path(self) -> dict[str, list[LintDiagnostic]]:
        groups: dict[str, list[LintDiagnostic]] = defaultdict(list)
        for d in self.diagnostics:
            groups[d.path or ""].append(d)
        return dict(groups)

    def codes(self) -> list[str]:
        """Distinct diagnostic codes, sorted."""
        return sorted({d.code for d in self.diagnostics})

    def summary(self) -> str:
        """One-line summary of the lint result."""
        counts = {
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "infos": len(self.infos),
        }
        status = "PASS" if self.passed else "FAIL"
        parts = [f"{status}: {self.root} ({self.post_count} posts)"]
        for label, count in counts.items():
            if count:
                parts.append(f"{count} {label}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "post_count": self.post_count,
            "passed": self.passed,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "info_count": len(self.infos),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }

    def __str__(self) -> str:
        lines = [self.summary()]
        for d in self.diagnostics:
            lines.append(f"  {d}")
        return "\n".join(lines)


@dataclass
class LintConfig:
    """Which rules run and how loudly.

    Attributes:
        disabled_rules: Codes whose diagnostics are dropped.
        severity_overrides: Code → severity replacing the rule default.
        allowed_keys: Front matter keys that do not trigger W006.
        include_infos: If ``False``, info-level diagnostics are dropped.
    """

    disabled_rules: set[str] = field(default_factory=set)
    severity_overrides: dict[str, Severity] = field(default_factory=dict)
    allowed_keys: frozenset[str] = field(default_factory=lambda: frozenset(DEFAULT_ALLOWED_KEYS))
    include_infos: bool = True

    @classmethod
    def from_settings(cls, settings: PostLintSettings) -> LintConfig:
        return cls(
            disabled_rules=set(settings.disabled_rules),
            severity_overrides={
                code: Severity(value) for code, value in settings.severity_overrides.items()
            },
            allowed_keys=frozenset(settings.allowed_keys),
            include_infos=settings.include_infos,
        )

    def validate_codes(self) -> None:
        """Raise ``RuleNotFoundError`` for any code no rule provides."""
        known = set(rule_catalog())
        for code in sorted(self.disabled_rules | set(self.severity_overrides)):
            if code not in known:
                raise RuleNotFoundError(code, sorted(known))


# ---------------------------------------------------------------------------
# Rule registry
# ---------------------------------------------------------------------------

# Rules take the subject plus the active config and return diagnostics
PostRule = Callable[[Post, LintConfig], list[LintDiagnostic]]
CorpusRule = Callable[["Corpus", LintConfig], list[LintDiagnostic]]


@dataclass(frozen=True)
class RuleInfo:
    """Catalog entry describing one diagnostic code."""

    code: str
    severity: Severity
    description: str
    rule: str


_POST_RULES: list[tuple[str, PostRule]] = []
_CORPUS_RULES: list[tuple[str, CorpusRule]] = []
_CUSTOM_CATALOG: dict[str, RuleInfo] = {}


def register_post_rule(
    name: str,
    rule: PostRule,
    *,
    codes: Iterable[tuple[str, Severity, str]] = (),
) -> None:
    """Register a custom rule that inspects one post at a time.

    Parameters
    ----------
    name
        Human-readable rule name (e.g. ``"check_author"``).
    rule
        Callable taking ``(post, config)`` and returning diagnostics.
    codes
        ``(code, severity, description)`` for each code the rule emits,
        so the codes can be listed, disabled and overridden.
    """
    _register(name, codes)
    _POST_RULES.append((name, rule))
    logger.debug("lint_rule_registered", name=name, kind="post")


def register_corpus_rule(
    name: str,
    rule: CorpusRule,
    *,
    codes: Iterable[tuple[str, Severity, str]] = (),
) -> None:
    """Register a custom rule that inspects the whole corpus."""
    _register(name, codes)
    _CORPUS_RULES.append((name, rule))
    logger.debug("lint_rule_registered", name=name, kind="corpus")


def _register(name: str, codes: Iterable[tuple[str, Severity, str]]) -> None:
    if name in list_lint_rules():
        raise RuleError(f"Lint rule '{name}' is already registered")

    # Nothing is written until every code has been checked
    entries: dict[str, RuleInfo] = {}
    known = rule_catalog()
    for code, severity, description in codes:
        code = code.upper()
        if code in known or code in entries:
            raise RuleError(f"Lint code '{code}' is already registered").with_context(rule=code)
        entries[code] = RuleInfo(code, Severity(severity), description, name)
    _CUSTOM_CATALOG.update(entries)


def list_lint_rules() -> list[str]:
    """Return names of all registered lint rules (built-in + custom)."""
    return (
        [name for name, _ in _BUILT_IN_POST_RULES]
        + [name for name, _ in _BUILT_IN_CORPUS_RULES]
        + [name for name, _ in _POST_RULES]
        + [name for name, _ in _CORPUS_RULES]
    )


def rule_catalog() -> dict[str, RuleInfo]:
    """All known diagnostic codes, built-in first."""
    catalog = dict(_BUILT_IN_CATALOG)
    catalog.update(_CUSTOM_CATALOG)
    return catalog


def clear_custom_rules() -> None:
    """Remove all custom lint rules (built-in rules are preserved)."""
    _POST_RULES.clear()
    _CORPUS_RULES.clear()
    _CUSTOM_CATALOG.clear()


def _diag(
    code: str,
    message: str,
    post: Post | None = None,
    *,
    path: str | None = None,
    line: int | None = None,
    suggestion: str | None = None,
) -> LintDiagnostic:
    return LintDiagnostic(
        code=code,
        severity=_BUILT_IN_CATALOG[code].severity,
        message=message,
        path=post.display_path if post is not None else path,
        line=line,
        suggestion=suggestion,
    )


# ---------------------------------------------------------------------------
# Built-in post rules
# ---------------------------------------------------------------------------

def _check_front_matter_present(post: Post, config: LintConfig) -> list[LintDiagnostic]:
    """E002: File has no front matter block."""
    if not post.front_matter.present:
        return [
            _diag(
                "E002",
                "Post has no YAML front matter.",
                post,
                line=1,
                suggestion="Start the file with a '---' delimited block holding title and date.",
            )
        ]
    return []


def _check_title(post: Post, config: LintConfig) -> list[LintDiagnostic]:
    """E003: Title is missing or empty."""
    fm = post.front_matter
    if not fm.present:
        return []
    if not fm.has_key("title") or fm.title is None:
        return [_diag("E003", "Front matter has no title.", post, suggestion="Add a 'title:' key.")]
    if not fm.title.strip():
        return [_diag("E003", "Title is empty.", post, suggestion="Give the post a non-empty title.")]
    return []


def _check_date(post: Post, config: LintConfig) -> list[LintDiagnostic]:
    """E004/E005: Date is missing or cannot be parsed."""
    fm = post.front_matter
    if not fm.present:
        return []
    raw = fm.raw.get("date")
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return [
            _diag(
                "E004",
                "Front matter has no date.",
                post,
                suggestion="Add 'date: YYYY-MM-DD HH:MM:SS +ZZZZ'.",
            )
        ]
    if fm.date is None:
        return [
            _diag(
                "E005",
                f"Date {raw!r} is not a valid timestamp.",
                post,
                suggestion="Use 'YYYY-MM-DD', 'YYYY-MM-DD HH:MM:SS' or add a '+ZZZZ' offset.",
            )
        ]
    return []


def _check_unclosed_fences(post: Post, config: LintConfig) -> list[LintDiagnostic]:
    """E006: Fenced code block never closed."""
    return [
        _diag(
            "E006",
            f"Code block opened with {sample.fence} is never closed.",
            post,
            line=sample.start_line,
            suggestion=f"Add a closing {sample.fence} line; everything after the fence renders as code.",
        )
        for sample in post.unclosed_samples
    ]


def _check_filename(post: Post, config: LintConfig) -> list[LintDiagnostic]:
    """W002/W003: Filename convention and date agreement."""
    if post.filename is None:
        return [
            _diag(
                "W002",
                f"Filename '{post.path.name}' does not follow YYYY-MM-DD-<slug>.md.",
                post,
                suggestion="Rename the file with its publish date prefix.",
            )
        ]
    if post.date is not None and post.filename.date != post.date.date():
        return [
            _diag(
                "W003",
                f"Filename date {post.filename.date.isoformat()} differs from "
                f"front matter date {post.date.date().isoformat()}.",
                post,
                suggestion="Make the filename prefix and the 'date:' key agree.",
            )
        ]
    return []


def _check_list_fields(post: Post, config: LintConfig) -> list[LintDiagnostic]:
    """W004: categories/tags must be a string or a list of strings."""
    diagnostics = []
    for key in ("categories", "tags"):
        if not post.front_matter.has_key(key):
            continue
        value = post.front_matter.raw[key]
        if value is None or isinstance(value, str):
            continue
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            continue
        diagnostics.append(
            _diag(
                "W004",
                f"'{key}' should be a list of strings, got {value!r}.",
                post,
                suggestion=f"Write '{key}: [a, b]' and quote non-text values.",
            )
        )
    return diagnostics


def _check_flag_fields(post: Post, config: LintConfig) -> list[LintDiagnostic]:
    """W005: mermaid/toc must be booleans."""
    diagnostics = []
    for key in ("mermaid", "toc"):
        if post.front_matter.has_key(key) and not isinstance(post.front_matter.raw[key], bool):
            diagnostics.append(
                _diag(
                    "W005",
                    f"'{key}' should be true or false, got {post.front_matter.raw[key]!r}.",
                    post,
                )
            )
    return diagnostics


def _check_unknown_keys(post: Post, config: LintConfig) -> list[LintDiagnostic]:
    """W006: Front matter key not in the allowed set."""
    return [
        _diag(
            "W006",
            f"Unknown front matter key '{key}'.",
            post,
            suggestion="Check for a typo or add the key to allowed_keys.",
        )
        for key in post.front_matter.raw
        if key not in config.allowed_keys
    ]


def _check_code_languages(post: Post, config: LintConfig) -> list[LintDiagnostic]:
    """I001: Code block has no language tag."""
    return [
        _diag(
            "I001",
            "Code block has no language tag.",
            post,
            line=sample.start_line,
            suggestion="Add a language after the fence (e.g. ```java) for highlighting.",
        )
        for sample in post.code_samples
        if sample.closed and sample.language is None
    ]


def _check_has_tags(post: Post, config: LintConfig) -> list[LintDiagnostic]:
    """I003: Post has no tags."""
    if post.front_matter.present and not post.tags:
        return [_diag("I003", "Post has no tags.", post)]
    return []


# ---------------------------------------------------------------------------
# Built-in corpus rules
# ---------------------------------------------------------------------------

def _check_duplicate_posts(corpus: Corpus, config: LintConfig) -> list[LintDiagnostic]:
    """W001: Posts sharing title and date collide in the generated site."""
    diagnostics = []
    for group in corpus.duplicates():
        for post in group:
            others = ", ".join(p.display_path for p in group if p is not post)
            diagnostics.append(
                _diag(
                    "W001",
                    f"Duplicate of {others} (same title and date).",
                    post,
                    suggestion="Merge the articles or remove the copy.",
                )
            )
    return diagnostics


def _check_reused_titles(corpus: Corpus, config: LintConfig) -> list[LintDiagnostic]:
    """I002: Same title published on different dates."""
    groups: dict[str, list[Post]] = defaultdict(list)
    for post in corpus.posts:
        if post.title and post.title.strip() and post.date is not None:
            groups[post.title.strip().casefold()].append(post)

    diagnostics = []
    for group in groups.values():
        if len({p.date for p in group}) < 2:
            continue
        for post in group:
            others = ", ".join(
                p.display_path for p in group if p is not post and p.date != post.date
            )
            diagnostics.append(
                _diag("I002", f"Title also used by {others}.", post)
            )
    return diagnostics


_BUILT_IN_CATALOG: dict[str, RuleInfo] = {
    info.code: info
    for info in [
        RuleInfo("E001", Severity.ERROR, "File could not be parsed (invalid or unterminated front matter, not UTF-8)", "load"),
        RuleInfo("E002", Severity.ERROR, "Front matter block is missing", "check_front_matter_present"),
        RuleInfo("E003", Severity.ERROR, "Title is missing or empty", "check_title"),
        RuleInfo("E004", Severity.ERROR, "Date is missing", "check_date"),
        RuleInfo("E005", Severity.ERROR, "Date cannot be parsed", "check_date"),
        RuleInfo("E006", Severity.ERROR, "Fenced code block has no closing delimiter", "check_unclosed_fences"),
        RuleInfo("W001", Severity.WARNING, "Posts share the same title and date", "check_duplicate_posts"),
        RuleInfo("W002", Severity.WARNING, "Filename does not follow YYYY-MM-DD-<slug>.md", "check_filename"),
        RuleInfo("W003", Severity.WARNING, "Filename date differs from front matter date", "check_filename"),
        RuleInfo("W004", Severity.WARNING, "categories/tags is not a string or list of strings", "check_list_fields"),
        RuleInfo("W005", Severity.WARNING, "mermaid/toc is not a boolean", "check_flag_fields"),
        RuleInfo("W006", Severity.WARNING, "Unknown front matter key", "check_unknown_keys"),
        RuleInfo("I001", Severity.INFO, "Code block has no language tag", "check_code_languages"),
        RuleInfo("I002", Severity.INFO, "Same title used on different dates", "check_reused_titles"),
        RuleInfo("I003", Severity.INFO, "Post has no tags", "check_has_tags"),
        RuleInfo("X001", Severity.WARNING, "A lint rule raised an exception", "lint"),
    ]
}

# Ordered list of built-in rules
_BUILT_IN_POST_RULES: list[tuple[str, PostRule]] = [
    ("check_front_matter_present", _check_front_matter_present),
    ("check_title", _check_title),
    ("check_date", _check_date),
    ("check_unclosed_fences", _check_unclosed_fences),
    ("check_filename", _check_filename),
    ("check_list_fields", _check_list_fields),
    ("check_flag_fields", _check_flag_fields),
    ("check_unknown_keys", _check_unknown_keys),
    ("check_code_languages", _check_code_languages),
    ("check_has_tags", _check_has_tags),
]

_BUILT_IN_CORPUS_RULES: list[tuple[str, CorpusRule]] = [
    ("check_duplicate_posts", _check_duplicate_posts),
    ("check_reused_titles", _check_reused_titles),
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def lint_post(post: Post, *, config: LintConfig | None = None) -> LintResult:
    """Run the post rules against a single post.

    Corpus rules (duplicates, reused titles) need the other posts and
    are skipped.
    """
    config = config or LintConfig()
    result = LintResult(root=post.display_path, post_count=1)
    for rule_name, rule in list(_BUILT_IN_POST_RULES) + list(_POST_RULES):
        result.diagnostics.extend(_run_rule(rule_name, rule, post, config, post.display_path))
    result.diagnostics = _finalise(result.diagnostics, config)
    return result


def lint_corpus(corpus: Corpus, *, config: LintConfig | None = None) -> LintResult:
    """Run all lint rules against a corpus.

    Parameters
    ----------
    corpus
        The loaded corpus. Its load failures become ``E001`` diagnostics.
    config
        Rule selection and severities. Defaults to every rule at its
        built-in severity.

    Returns
    -------
    LintResult
        Aggregated diagnostics from all rules, sorted by path and line.
    """
    config = config or LintConfig()
    result = LintResult(
        root=str(corpus.root),
        post_count=len(corpus.posts) + len(corpus.failures),
    )

    with LogContext(corpus=str(corpus.root)):
        for failure in corpus.failures:
            result.diagnostics.append(
                _diag(
                    "E001",
                    failure.error.message,
                    path=failure.display_path,
                    line=failure.error.context.line,
                    suggestion="Fix the front matter so it is valid YAML between two '---' lines.",
                )
            )

        for post in corpus.posts:
            for rule_name, rule in list(_BUILT_IN_POST_RULES) + list(_POST_RULES):
                result.diagnostics.extend(
                    _run_rule(rule_name, rule, post, config, post.display_path)
                )

        for rule_name, rule in list(_BUILT_IN_CORPUS_RULES) + list(_CORPUS_RULES):
            result.diagnostics.extend(_run_rule(rule_name, rule, corpus, config, None))

        result.diagnostics = _finalise(result.diagnostics, config)
        logger.info(
            "corpus_linted",
            posts=result.post_count,
            errors=len(result.errors),
            warnings=len(result.warnings),
            infos=len(result.infos),
        )
    return result


def _run_rule(rule_name: str, rule: Callable, subject: Any, config: LintConfig, path: str | None) -> list[LintDiagnostic]:
    try:
        return list(rule(subject, config))
    except Exception as e:
        logger.warning(
            "lint_rule_failed",
            rule=rule_name,
            path=path,
            category=categorize_error(e).value,
            exc_info=True,
        )
        return [
            LintDiagnostic(
                code="X001",
                severity=Severity.WARNING,
                message=f"Lint rule '{rule_name}' raised {type(e).__name__}.",
                path=path,
            )
        ]


def _finalise(diagnostics: list[LintDiagnostic], config: LintConfig) -> list[LintDiagnostic]:
    """Drop disabled codes, apply severity overrides, drop infos, sort."""
    final = []
    for d in diagnostics:
        if d.code in config.disabled_rules:
            continue
        severity = config.severity_overrides.get(d.code, d.severity)
        if severity != d.severity:
            d = replace(d, severity=severity)
        if severity == Severity.INFO and not config.include_infos:
            continue
        final.append(d)
    final.sort(key=lambda d: (d.path or "", d.line or 0, d.code))
    return final


__all__ = [
    "CorpusRule",
    "LintConfig",
    "LintDiagnostic",
    "LintResult",
    "PostRule",
    "RuleInfo",
    "Severity",
    "clear_custom_rules",
    "lint_corpus",
    "lint_post",
    "list_lint_rules",
    "register_corpus_rule",
    "register_post_rule",
    "rule_catalog",
]
