"""
postlint core: models, errors, settings and logging shared by every module.
"""

from postlint.core.errors import (
    ConfigError,
    CorpusNotFoundError,
    ErrorCategory,
    ErrorContext,
    FrontMatterError,
    InvalidConfigError,
    ParseError,
    PostLintError,
    PostReadError,
    RuleError,
    RuleNotFoundError,
    SourceError,
)
from postlint.core.models import CodeSample, FrontMatter, Heading, Post, PostPath

__all__ = [
    "CodeSample",
    "ConfigError",
    "CorpusNotFoundError",
    "ErrorCategory",
    "ErrorContext",
    "FrontMatter",
    "FrontMatterError",
    "Heading",
    "InvalidConfigError",
    "ParseError",
    "Post",
    "PostLintError",
    "PostPath",
    "PostReadError",
    "RuleError",
    "RuleNotFoundError",
    "SourceError",
]
