"""
Shared pytest fixtures for postlint tests.

This module provides:
- Post text builders for valid and broken articles
- A small on-disk corpus mirroring the ``_posts/aws`` layout
- Settings cache and custom rule cleanup for test isolation
"""

import logging
import textwrap
from pathlib import Path

import pytest

from postlint.core.settings import clear_settings_cache
from postlint.linter import clear_custom_rules


def make_post(
    title="ThrottlingException in AWS Lambda",
    date="2023-10-13 10:00:00 +0800",
    categories="[AWS, Lambda]",
    tags="[aws, lambda, exception]",
    body=None,
    extra="",
):
    """Build post text with front matter. Pass ``None`` to omit a key."""
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    if date is not None:
        lines.append(f"date: {date}")
    if categories is not None:
        lines.append(f"categories: {categories}")
    if tags is not None:
        lines.append(f"tags: {tags}")
    if extra:
        lines.append(extra)
    lines.append("---")
    if body is None:
        body = textwrap.dedent(
            """
            ## What is ThrottlingException?

            The service rejected the request because too many were sent.

            ```java
            try {
                client.invoke(request);
            } catch (ThrottlingException e) {
                Thread.sleep(backoff);
            }
            ```
            """
        )
    return "\n".join(lines) + "\n" + body


def write_post(directory: Path, name: str, text: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _isolation(monkeypatch):
    """Fresh settings cache and rule registry for every test."""
    for key in (
        "POSTLINT_POSTS_DIR",
        "POSTLINT_DISABLED_RULES",
        "POSTLINT_STRICT",
        "POSTLINT_LOG_LEVEL",
        "POSTLINT_LOG_FORMAT",
    ):
        monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    clear_custom_rules()
    yield
    clear_settings_cache()
    clear_custom_rules()
    # Handlers bound to a per-test capture stream outlive it otherwise
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


@pytest.fixture
def post_text():
    """Text of a well-formed post."""
    return make_post()


@pytest.fixture
def clean_corpus(tmp_path):
    """Corpus root with two valid, distinct posts."""
    root = tmp_path / "_posts"
    aws = root / "aws"
    write_post(aws, "2023-10-13-throttling-exception.md", make_post())
    write_post(
        aws,
        "2023-10-14-conflict-exception.md",
        make_post(
            title="ConflictException in Amazon DynamoDB",
            date="2023-10-14 09:30:00 +0800",
            categories="[AWS, DynamoDB]",
            tags="[aws, dynamodb]",
        ),
    )
    return root


@pytest.fixture
def messy_corpus(tmp_path):
    """Corpus root reproducing the problems observed in real posts.

    - two copies of the same article (same title and date)
    - an empty title
    - an unclosed code fence
    - unterminated front matter
    """
    root = tmp_path / "_posts"
    aws = root / "aws"
    dup = make_post(title="AWSOpenSearchServerlessException", date="2023-11-02 08:00:00 +0800")
    write_post(aws, "2023-11-02-opensearch-serverless-exception.md", dup)
    write_post(aws, "2023-11-02-opensearch-serverless-exception-2.md", dup)
    write_post(aws, "2023-11-03-empty-title.md", make_post(title='""', date="2023-11-03"))
    write_post(
        aws,
        "2023-11-04-internal-server-exception.md",
        make_post(
            title="InternalServerException",
            date="2023-11-04",
            body="\n## Handling\n\n```python\nimport boto3\n\n## Not a heading\n",
        ),
    )
    write_post(aws, "2023-11-05-broken.md", "---\ntitle: Broken\ndate: 2023-11-05\n")
    return root
