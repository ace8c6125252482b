"""
Line scanner for Markdown post bodies.

Only the structure postlint needs is recognised: ATX headings and fenced
code blocks. Fences follow the CommonMark rules:

- an opening fence is 3+ backticks or 3+ tildes, indented at most 3 spaces
- a backtick fence's info string may not contain a backtick
- the closing fence uses the same character, is at least as long as the
  opener, and has nothing after it but whitespace
- a fence still open at end of input runs to the end of the document

The last rule is what makes an unclosed fence dangerous in a post: every
line after it, headings included, renders as code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from postlint.core.models import CodeSample, Heading

_FENCE_RE = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
_HEADING_RE = re.compile(r"^ {0,3}(?P<hashes>#{1,6})(?:[ \t]+(?P<text>.*?))?(?:[ \t]+#+)?[ \t]*$")


@dataclass
class MarkdownScan:
    """Structure found in a Markdown body."""

    headings: list[Heading] = field(default_factory=list)
    code_samples: list[CodeSample] = field(default_factory=list)

    @property
    def unclosed(self) -> list[CodeSample]:
        return [s for s in self.code_samples if not s.closed]


@dataclass
class _OpenFence:
    char: str
    length: int
    indent: int
    info: str
    start_line: int
    lines: list[str] = field(default_factory=list)


def scan_markdown(body: str, first_line: int = 1) -> MarkdownScan:
    """Scan ``body`` for headings and fenced code samples.

    Args:
        body: Markdown text
        first_line: File line number of the first line of ``body``, so
            reported lines point into the original file
    """
    scan = MarkdownScan()
    current: _OpenFence | None = None

    for offset, line in enumerate(body.splitlines()):
        lineno = first_line + offset

        if current is not None:
            if _closes(line, current):
                scan.code_samples.append(_finish(current, end_line=lineno))
                current = None
            else:
                current.lines.append(_strip_indent(line, current.indent))
            continue

        match = _FENCE_RE.match(line)
        if match is not None:
            fence = match.group("fence")
            info = match.group("info").strip()
            if not (fence[0] == "`" and "`" in info):
                current = _OpenFence(
                    char=fence[0],
                    length=len(fence),
                    indent=len(match.group("indent")),
                    info=info,
                    start_line=lineno,
                )
                continue

        heading = _HEADING_RE.match(line)
        if heading is not None:
            scan.headings.append(
                Heading(
                    level=len(heading.group("hashes")),
                    text=(heading.group("text") or "").strip(),
                    line=lineno,
                )
            )

    if current is not None:
        scan.code_samples.append(_finish(current, end_line=None))

    return scan


def _closes(line: str, fence: _OpenFence) -> bool:
    stripped = line.lstrip(" ")
    if len(line) - len(stripped) > 3:
        return False
    run = len(stripped) - len(stripped.lstrip(fence.char))
    if run < fence.length:
        return False
    return stripped[run:].strip() == ""


def _strip_indent(line: str, indent: int) -> str:
    # Content lines lose up to the opening fence's indentation
    removable = len(line) - len(line.lstrip(" "))
    return line[min(indent, removable):]


def _finish(fence: _OpenFence, end_line: int | None) -> CodeSample:
    language = fence.info.split()[0].lower() if fence.info else None
    return CodeSample(
        language=language,
        body="\n".join(fence.lines),
        start_line=fence.start_line,
        end_line=end_line,
        fence=fence.char * fence.length,
        info=fence.info,
    )


__all__ = ["MarkdownScan", "scan_markdown"]
