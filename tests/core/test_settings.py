"""Tests for postlint.core.settings."""

from pathlib import Path

import pytest

from postlint.core.errors import InvalidConfigError
from postlint.core.settings import (
    DEFAULT_ALLOWED_KEYS,
    PostLintSettings,
    find_project_root,
    get_settings,
    load_yaml_config,
)


class TestPostLintSettings:
    def test_defaults(self):
        settings = PostLintSettings()
        assert settings.posts_dir == "_posts"
        assert settings.patterns == ["*.md", "*.markdown"]
        assert settings.allowed_keys == DEFAULT_ALLOWED_KEYS
        assert settings.strict is False
        assert settings.include_infos is True

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("POSTLINT_POSTS_DIR", "_posts/aws")
        monkeypatch.setenv("POSTLINT_STRICT", "true")
        settings = PostLintSettings()
        assert settings.posts_dir == "_posts/aws"
        assert settings.strict is True

    def test_env_list_as_json(self, monkeypatch):
        monkeypatch.setenv("POSTLINT_DISABLED_RULES", '["i001", "w006"]')
        settings = PostLintSettings()
        assert settings.disabled_rules == ["I001", "W006"]

    def test_severity_overrides_normalised(self):
        settings = PostLintSettings(severity_overrides={"w001": "ERROR"})
        assert settings.severity_overrides == {"W001": "error"}

    def test_bad_severity_rejected(self):
        with pytest.raises(ValueError):
            PostLintSettings(severity_overrides={"W001": "fatal"})

    def test_bad_log_format_rejected(self):
        with pytest.raises(ValueError):
            PostLintSettings(log_format="xml")

    def test_posts_path_relative_to_root(self, tmp_path):
        settings = PostLintSettings(posts_dir="content/_posts")
        assert settings.posts_path(tmp_path) == tmp_path / "content" / "_posts"

    def test_posts_path_absolute(self, tmp_path):
        settings = PostLintSettings(posts_dir=str(tmp_path))
        assert settings.posts_path(Path("/elsewhere")) == tmp_path


class TestYamlConfig:
    def test_load(self, tmp_path):
        path = tmp_path / ".postlint.yaml"
        path.write_text("posts_dir: _posts/aws\ndisabled_rules: [I001]\n")
        assert load_yaml_config(path) == {"posts_dir": "_posts/aws", "disabled_rules": ["I001"]}

    def test_empty_file(self, tmp_path):
        path = tmp_path / ".postlint.yaml"
        path.write_text("")
        assert load_yaml_config(path) == {}

    def test_unknown_key(self, tmp_path):
        path = tmp_path / ".postlint.yaml"
        path.write_text("post_dir: typo\n")
        with pytest.raises(InvalidConfigError, match="post_dir"):
            load_yaml_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / ".postlint.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(InvalidConfigError):
            load_yaml_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / ".postlint.yaml"
        path.write_text("posts_dir: [unclosed\n")
        with pytest.raises(InvalidConfigError) as exc_info:
            load_yaml_config(path)
        assert exc_info.value.cause is not None

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidConfigError):
            load_yaml_config(tmp_path / "missing.yaml")


class TestGetSettings:
    def test_project_file_is_picked_up(self, tmp_path):
        (tmp_path / ".postlint.yaml").write_text("posts_dir: articles\n")
        settings = get_settings(project_root=tmp_path)
        assert settings.posts_dir == "articles"
        assert settings.posts_path() == tmp_path.resolve() / "articles"

    def test_env_beats_file(self, tmp_path, monkeypatch):
        (tmp_path / ".postlint.yaml").write_text("posts_dir: articles\n")
        monkeypatch.setenv("POSTLINT_POSTS_DIR", "from-env")
        settings = get_settings(project_root=tmp_path)
        assert settings.posts_dir == "from-env"

    def test_lowercase_env_beats_file(self, tmp_path, monkeypatch):
        (tmp_path / ".postlint.yaml").write_text("posts_dir: articles\n")
        monkeypatch.setenv("postlint_posts_dir", "from-env")
        settings = get_settings(project_root=tmp_path)
        assert settings.posts_dir == "from-env"

    def test_dotenv_ranks_below_file(self, tmp_path, monkeypatch):
        (tmp_path / ".postlint.yaml").write_text("posts_dir: articles\n")
        (tmp_path / ".env").write_text("POSTLINT_POSTS_DIR=from-dotenv\nPOSTLINT_STRICT=true\n")
        monkeypatch.chdir(tmp_path)
        settings = get_settings(project_root=tmp_path)
        assert settings.posts_dir == "articles"
        assert settings.strict is True

    def test_explicit_config_file(self, tmp_path):
        config = tmp_path / "custom.yaml"
        config.write_text("strict: true\n")
        settings = get_settings(config_file=config, project_root=tmp_path)
        assert settings.strict is True

    def test_invalid_value_raises_config_error(self, tmp_path):
        (tmp_path / ".postlint.yaml").write_text("severity_overrides: {W001: fatal}\n")
        with pytest.raises(InvalidConfigError, match="severity_overrides"):
            get_settings(project_root=tmp_path)

    def test_cached(self, tmp_path):
        first = get_settings(project_root=tmp_path)
        assert get_settings(project_root=tmp_path) is first
        assert get_settings(project_root=tmp_path, _force_reload=True) is not first


class TestFindProjectRoot:
    def test_finds_marker_in_parent(self, tmp_path):
        (tmp_path / "_config.yml").write_text("title: blog\n")
        nested = tmp_path / "_posts" / "aws"
        nested.mkdir(parents=True)
        assert find_project_root(nested) == tmp_path.resolve()

    def test_postlint_yaml_marker(self, tmp_path):
        (tmp_path / ".postlint.yaml").write_text("")
        nested = tmp_path / "a"
        nested.mkdir()
        assert find_project_root(nested) == tmp_path.resolve()
