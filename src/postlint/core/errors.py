"""
Structured error types for postlint.

Every failure that postlint raises on purpose is a ``PostLintError``.
Each error carries a category, a structured context (which file, which
line, which rule) and an optional chained cause, so the CLI can print a
precise message and logs can carry the same fields.

Manifesto:
    - **Typed Error Hierarchy:** Different error types for reading, parsing,
      configuration and rule lookup
    - **Rich Context:** Errors carry the offending path and line
    - **Error Chaining:** Preserve the original exception (YAML, OS, Unicode)

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                     PostLintError                         │
        │            (category, context, cause)                     │
        ├──────────────────────────────────────────────────────────┤
        │  SourceError          ParseError        ConfigError       │
        │  (SOURCE)             (PARSE)           (CONFIG)          │
        │     │                    │                  │             │
        │  CorpusNotFoundError  FrontMatterError  InvalidConfigError│
        │  PostReadError                                            │
        │                                                           │
        │  RuleError (VALIDATION)                                   │
        │     │                                                     │
        │  RuleNotFoundError                                        │
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = FrontMatterError("Unterminated front matter")
    >>> error.with_context(path="_posts/aws/2023-10-13-x.md", line=1)
    FrontMatterError('Unterminated front matter', category=PARSE)
    >>> error.to_dict()["context"]["line"]
    1

Guardrails:
    ❌ DON'T: Raise bare ValueError for a malformed post
    ✅ DO: Raise FrontMatterError with the path and line in context

    ❌ DON'T: Swallow the YAML exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, error-context, postlint

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification.

    Attributes:
        SOURCE: Corpus directory or post file could not be read
        PARSE: Front matter or Markdown could not be parsed
        VALIDATION: Lint rule lookup or execution problems
        CONFIG: Missing or invalid settings
        INTERNAL: Bugs, unexpected state
    """

    SOURCE = "SOURCE"
    PARSE = "PARSE"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Attributes:
        path: File or directory the error relates to
        line: 1-based line number inside ``path``
        rule: Lint rule code, when a rule is involved
        metadata: Additional key-value pairs
    """

    path: str | None = None
    line: int | None = None
    rule: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["path", "line", "rule"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class PostLintError(Exception):
    """
    Base exception for all postlint errors.

    Subclasses set ``default_category`` so callers only pass a message and
    the context that matters.

    Examples:
        >>> error = PostLintError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(path="a.md").context.path
        'a.md'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> PostLintError:
        """
        Add context to this error (fluent API).

        Usage:
            raise PostReadError("Not UTF-8").with_context(path=str(path))
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __str__(self) -> str:
        location = self.context.path
        if location and self.context.line is not None:
            location = f"{location}:{self.context.line}"
        if location:
            return f"{location}: {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SOURCE ERRORS
# =============================================================================


class SourceError(PostLintError):
    """A corpus directory or post file could not be read."""

    default_category = ErrorCategory.SOURCE


class CorpusNotFoundError(SourceError):
    """The corpus root does not exist or is not a directory."""

    def __init__(self, root: str, message: str | None = None):
        super().__init__(message or f"Corpus root not found: {root}")
        self.context.path = root


class PostReadError(SourceError):
    """A post file exists but could not be read as UTF-8 text."""


# =============================================================================
# PARSE ERRORS
# =============================================================================


class ParseError(PostLintError):
    """Content could not be parsed."""

    default_category = ErrorCategory.PARSE


class FrontMatterError(ParseError):
    """YAML front matter is unterminated, malformed, or not a mapping."""


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(PostLintError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value or file is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None, **kwargs: Any):
        super().__init__(message or f"Invalid value for {key}: {value!r}", **kwargs)
        self.key = key
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["key"] = self.key
        result["value"] = repr(self.value)
        return result


# =============================================================================
# RULE ERRORS
# =============================================================================


class RuleError(PostLintError):
    """Lint rule registration or lookup error."""

    default_category = ErrorCategory.VALIDATION


class RuleNotFoundError(RuleError):
    """A rule code was referenced that no registered rule provides."""

    def __init__(self, code: str, available: list[str] | None = None):
        message = f"Unknown lint rule: {code}"
        if available:
            message += f". Available: {', '.join(available)}"
        super().__init__(message)
        self.context.rule = code


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, PostLintError):
        return error.category
    if isinstance(error, (OSError, UnicodeDecodeError)):
        return ErrorCategory.SOURCE
    if isinstance(error, ValueError):
        return ErrorCategory.PARSE
    return ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "PostLintError",
    "SourceError",
    "CorpusNotFoundError",
    "PostReadError",
    "ParseError",
    "FrontMatterError",
    "ConfigError",
    "InvalidConfigError",
    "RuleError",
    "RuleNotFoundError",
    "categorize_error",
]
