"""
Parsing of post files: front matter, Markdown structure, filenames.
"""

from postlint.parser.frontmatter import parse_date, parse_front_matter, split_front_matter
from postlint.parser.markdown import MarkdownScan, scan_markdown
from postlint.parser.paths import is_post_file, parse_post_filename

__all__ = [
    "MarkdownScan",
    "is_post_file",
    "parse_date",
    "parse_front_matter",
    "parse_post_filename",
    "scan_markdown",
    "split_front_matter",
]
