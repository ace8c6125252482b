"""
Centralized settings for postlint.

Manifesto:
    One validated, cached settings object decides where the corpus lives,
    which files count as posts, and which lint rules run at which
    severity. Values resolve in a single place:

    1. Explicit ``POSTLINT_*`` environment variables (any case)
    2. The project YAML file (``.postlint.yaml``) or ``--config`` path
    3. A ``.env`` file in the working directory
    4. Field defaults

Examples:
    >>> from postlint.core.settings import get_settings
    >>> settings = get_settings()
    >>> settings.posts_dir
    '_posts'

    ``.postlint.yaml``::

        posts_dir: _posts/aws
        disabled_rules: [I001]
        severity_overrides:
          W001: error

Tags:
    postlint, configuration, settings, pydantic, yaml

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from postlint.core.errors import InvalidConfigError

CONFIG_FILENAME = ".postlint.yaml"
ENV_PREFIX = "POSTLINT_"

SEVERITIES = ("error", "warning", "info")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("console", "json")

DEFAULT_ALLOWED_KEYS = [
    "title",
    "date",
    "categories",
    "tags",
    "mermaid",
    "toc",
    "layout",
    "author",
    "permalink",
    "published",
    "description",
    "image",
    "pin",
    "math",
    "comments",
    "last_modified_at",
]


class PostLintSettings(BaseSettings):
    """postlint configuration.

    All fields can be set via ``POSTLINT_*`` environment variables (e.g.
    ``POSTLINT_POSTS_DIR=_posts/aws``) or through a ``.env`` file. List
    and dict fields take JSON in the environment.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Corpus ───────────────────────────────────────────────────
    posts_dir: str = Field(default="_posts", description="Corpus root, relative to the project root")
    patterns: list[str] = Field(default=["*.md", "*.markdown"])
    skip_patterns: list[str] = Field(default=[".git", "node_modules", "_site", ".jekyll-cache"])

    # ── Rules ────────────────────────────────────────────────────
    allowed_keys: list[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_KEYS))
    disabled_rules: list[str] = Field(default_factory=list)
    severity_overrides: dict[str, str] = Field(default_factory=dict)
    include_infos: bool = Field(default=True)
    strict: bool = Field(default=False, description="Warnings fail the run too")

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="WARNING")
    log_format: str = Field(default="console", description="console or json")

    @field_validator("disabled_rules")
    @classmethod
    def _upper_codes(cls, value: list[str]) -> list[str]:
        return [code.strip().upper() for code in value]

    @field_validator("severity_overrides")
    @classmethod
    def _check_severities(cls, value: dict[str, str]) -> dict[str, str]:
        normalised = {}
        for code, severity in value.items():
            severity = severity.strip().lower()
            if severity not in SEVERITIES:
                raise ValueError(
                    f"severity for {code} must be one of {', '.join(SEVERITIES)}, got {severity!r}"
                )
            normalised[code.strip().upper()] = severity
        return normalised

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        value = value.lower()
        if value not in LOG_FORMATS:
            raise ValueError(f"log_format must be console or json, got {value!r}")
        return value

    def posts_path(self, project_root: Path | None = None) -> Path:
        """Absolute corpus root."""
        path = Path(self.posts_dir)
        if path.is_absolute():
            return path
        root = project_root or getattr(self, "_project_root", None) or Path.cwd()
        return Path(root) / path


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from ``start`` looking for ``.postlint.yaml``, ``_config.yml`` or ``.git``.

    Falls back to ``start`` (or the cwd) when no marker is found.
    """
    current = (start or Path.cwd()).resolve()
    for candidate in [current, *current.parents]:
        for marker in (CONFIG_FILENAME, "_config.yml", ".git"):
            if (candidate / marker).exists():
                return candidate
    return current


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a dict of settings values."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise InvalidConfigError("config_file", str(path), f"Cannot read config file: {e}", cause=e) from e
    except yaml.YAMLError as e:
        raise InvalidConfigError("config_file", str(path), f"Invalid YAML in config file: {e}", cause=e) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigError("config_file", str(path), "Config file must contain a mapping")

    unknown = sorted(set(data) - set(PostLintSettings.model_fields))
    if unknown:
        raise InvalidConfigError(
            "config_file",
            str(path),
            f"Unknown config keys in {path}: {', '.join(unknown)}",
        )
    return data


_settings_cache: dict[str, PostLintSettings] = {}


def get_settings(
    *,
    config_file: Path | None = None,
    project_root: Path | None = None,
    _force_reload: bool = False,
) -> PostLintSettings:
    """Load, validate, and cache a :class:`PostLintSettings` instance.

    Parameters
    ----------
    config_file:
        Explicit YAML config. Defaults to ``.postlint.yaml`` in the
        project root when it exists.
    project_root:
        Override the auto-detected project root.
    _force_reload:
        Bypass cache and reload from disk.
    """
    root = (project_root or find_project_root()).resolve()
    cache_key = f"{root}:{config_file or ''}"

    if not _force_reload and cache_key in _settings_cache:
        return _settings_cache[cache_key]

    if config_file is None and (root / CONFIG_FILENAME).is_file():
        config_file = root / CONFIG_FILENAME

    file_values: dict[str, Any] = {}
    if config_file is not None:
        file_values = load_yaml_config(Path(config_file))
        # Explicit environment variables win over the file; pydantic-settings
        # matches their names case-insensitively
        env_keys = {name.upper() for name in os.environ}
        file_values = {
            key: value
            for key, value in file_values.items()
            if f"{ENV_PREFIX}{key.upper()}" not in env_keys
        }

    try:
        settings = PostLintSettings(**file_values)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first.get("loc", ())) or "settings"
        raise InvalidConfigError(key, first.get("input"), f"Invalid setting {key}: {first.get('msg')}", cause=e) from e

    object.__setattr__(settings, "_project_root", root)
    object.__setattr__(settings, "_config_file", config_file)

    _settings_cache[cache_key] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_ALLOWED_KEYS",
    "LOG_FORMATS",
    "LOG_LEVELS",
    "PostLintSettings",
    "SEVERITIES",
    "clear_settings_cache",
    "find_project_root",
    "get_settings",
    "load_yaml_config",
]
