"""Tests for front matter splitting and parsing."""

from datetime import datetime, timedelta, timezone

import pytest

from postlint.core.errors import FrontMatterError
from postlint.parser.frontmatter import parse_date, parse_front_matter, split_front_matter


class TestSplitFrontMatter:
    def test_splits_block_and_body(self):
        text = "---\ntitle: A\n---\n\n## Body\n"
        yaml_text, body, body_line = split_front_matter(text)
        assert yaml_text == "title: A\n"
        assert body == "\n## Body\n"
        assert body_line == 4

    def test_no_front_matter(self):
        yaml_text, body, body_line = split_front_matter("# Just markdown\n")
        assert yaml_text is None
        assert body == "# Just markdown\n"
        assert body_line == 1

    def test_dots_close_block(self):
        yaml_text, body, _ = split_front_matter("---\ntitle: A\n...\nbody\n")
        assert yaml_text == "title: A\n"
        assert body == "body\n"

    def test_byte_order_mark_ignored(self):
        yaml_text, _, _ = split_front_matter("\ufeff---\ntitle: A\n---\n")
        assert yaml_text == "title: A\n"

    def test_crlf_line_endings(self):
        yaml_text, body, body_line = split_front_matter("---\r\ntitle: A\r\n---\r\nbody\r\n")
        assert yaml_text == "title: A\r\n"
        assert body == "body\r\n"
        assert body_line == 4

    def test_unterminated_block(self):
        with pytest.raises(FrontMatterError) as exc_info:
            split_front_matter("---\ntitle: A\n\n## Body\n")
        assert exc_info.value.context.line == 1

    def test_horizontal_rule_later_is_not_front_matter(self):
        yaml_text, _, _ = split_front_matter("Intro\n---\nmore\n")
        assert yaml_text is None


class TestParseFrontMatter:
    def test_full_block(self):
        fm = parse_front_matter(
            'title: "ThrottlingException"\n'
            "date: 2023-10-13 10:00:00 +0800\n"
            "categories: [AWS, Lambda]\n"
            "tags: [aws, lambda, aws]\n"
            "mermaid: true\n"
            "toc: false\n"
            "layout: post\n"
        )
        assert fm.title == "ThrottlingException"
        assert fm.date == datetime(2023, 10, 13, 10, 0, tzinfo=timezone(timedelta(hours=8)))
        assert fm.categories == ["AWS", "Lambda"]
        assert fm.tags == ["aws", "lambda"]
        assert fm.mermaid is True
        assert fm.toc is False
        assert fm.extra == {"layout": "post"}
        assert fm.present is True

    def test_none_means_absent(self):
        fm = parse_front_matter(None)
        assert fm.present is False
        assert fm.title is None

    def test_empty_block(self):
        fm = parse_front_matter("")
        assert fm.present is True
        assert fm.raw == {}

    def test_string_tags_split_on_whitespace(self):
        fm = parse_front_matter("tags: aws lambda\ncategories: AWS\n")
        assert fm.tags == ["aws", "lambda"]
        assert fm.categories == ["AWS"]

    def test_non_string_title_is_stringified(self):
        assert parse_front_matter("title: 404\n").title == "404"

    def test_non_bool_flags_ignored_but_kept_raw(self):
        fm = parse_front_matter("mermaid: 'yes'\n")
        assert fm.mermaid is None
        assert fm.raw["mermaid"] == "yes"

    def test_invalid_yaml_reports_line(self):
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter("title: A\ntags: [aws\n")
        assert exc_info.value.context.line is not None
        assert exc_info.value.context.line >= 3

    def test_list_document_rejected(self):
        with pytest.raises(FrontMatterError, match="mapping"):
            parse_front_matter("- a\n- b\n")


class TestParseDate:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2023-10-13", datetime(2023, 10, 13)),
            ("2023-10-13 10:00", datetime(2023, 10, 13, 10, 0)),
            ("2023-10-13T10:00:00Z", datetime(2023, 10, 13, 10, 0, tzinfo=timezone.utc)),
            ("2023-10-13 10:00:00 -05:00", datetime(2023, 10, 13, 10, 0, tzinfo=timezone(timedelta(hours=-5)))),
            ("2023-1-5", datetime(2023, 1, 5)),
        ],
    )
    def test_strings(self, value, expected):
        assert parse_date(value) == expected

    def test_yaml_date_object(self):
        from datetime import date

        assert parse_date(date(2023, 10, 13)) == datetime(2023, 10, 13)

    def test_datetime_passthrough(self):
        value = datetime(2023, 10, 13, 1, 2, 3)
        assert parse_date(value) is value

    @pytest.mark.parametrize("value", ["2023-02-30", "yesterday", "", None, 20231013])
    def test_unreadable(self, value):
        assert parse_date(value) is None
