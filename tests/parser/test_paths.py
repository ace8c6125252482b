"""Tests for dated post filenames."""

from datetime import date
from pathlib import Path

import pytest

from postlint.parser.paths import is_post_file, parse_post_filename


class TestParsePostFilename:
    def test_conventional_name(self):
        parsed = parse_post_filename("_posts/aws/2023-10-13-throttling-exception.md")
        assert parsed.date == date(2023, 10, 13)
        assert parsed.slug == "throttling-exception"
        assert parsed.extension == "md"

    def test_markdown_extension(self):
        assert parse_post_filename(Path("2023-10-13-a.markdown")).extension == "markdown"

    @pytest.mark.parametrize(
        "name",
        [
            "throttling-exception.md",
            "2023-10-13.md",
            "23-10-13-short-year.md",
            "2023-10-13-notes.txt",
            "2023-13-01-bad-month.md",
            "2023-02-30-bad-day.md",
        ],
    )
    def test_rejected(self, name):
        assert parse_post_filename(name) is None


class TestIsPostFile:
    def test_matches_pattern(self, tmp_path):
        path = tmp_path / "a.md"
        path.write_text("x")
        assert is_post_file(path, ["*.md"])
        assert not is_post_file(path, ["*.markdown"])

    def test_directory_is_not_a_post(self, tmp_path):
        directory = tmp_path / "dir.md"
        directory.mkdir()
        assert not is_post_file(directory, ["*.md"])
