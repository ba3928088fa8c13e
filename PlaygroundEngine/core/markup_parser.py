"""Playground markup slicing tool.

A playground page is a single source file in which prose lives in markup
comments (`/*: ... */` blocks and `//:` lines) and everything else is code.
This module splits such a file into an ordered list of prose and code
segments, and provides the heading/anchor helpers the validator and the
renderer share.
"""

from __future__ import annotations

import re
import textwrap
from dataclasses import dataclass
from typing import Iterator, List, Optional, Set, Tuple

BLOCK_OPEN = "/*:"
BLOCK_CLOSE = "*/"
LINE_MARKER = "//:"

heading_pattern = re.compile(
    r"""^[ ]{0,3}
    (?P<marker>\#{1,6})  # ATX heading mark
    [ \t]+
    (?P<title>[^\r\n]+?)  # heading text
    (?:[ \t]+\#+)?[ \t]*$
    """,
    re.VERBOSE,
)
fence_pattern = re.compile(r"^[ ]{0,3}(?P<fence>`{3,}|~{3,})")
internal_link_pattern = re.compile(r"\]\(#(?P<anchor>[^)\s]*)\)")


class PlaygroundParseError(ValueError):
    """Raised when a page cannot be split into segments."""

    def __init__(self, message: str, source: str = "<memory>", line: int = 0):
        super().__init__(f"{source}:{line}: {message}")
        self.source = source
        self.line = line


@dataclass
class Segment:
    """One prose or code run of a playground page.

    `line` is the 1-based line of the source file where the run starts,
    kept so that validation warnings can point back at the playground."""

    kind: str
    text: str
    line: int


class _SegmentBuilder:
    """Collects raw lines and emits trimmed segments in source order."""

    def __init__(self) -> None:
        self.segments: List[Segment] = []
        self.code_lines: List[str] = []
        self.code_start: Optional[int] = None
        self.prose_lines: List[str] = []
        self.prose_start: Optional[int] = None
        # blank lines seen after a `//:` run, owned by whichever run comes next
        self.pending_blank: List[int] = []

    def add_code(self, line: str, lineno: int) -> None:
        self.flush_prose()
        if self.code_start is None:
            self.code_start = lineno
        self.code_lines.append(line.rstrip())

    def add_marker_line(self, text: str, lineno: int) -> None:
        if self.pending_blank:
            self.prose_lines.extend("" for _ in self.pending_blank)
            self.pending_blank = []
        self.flush_code()
        if self.prose_start is None:
            self.prose_start = lineno
        self.prose_lines.append(text.rstrip())

    def add_blank(self, lineno: int) -> None:
        if self.prose_lines:
            self.pending_blank.append(lineno)
        else:
            self.add_code("", lineno)

    def add_block(self, lines: List[str], lineno: int) -> None:
        self.flush_prose()
        self.flush_code()
        text = _normalize_block(lines)
        if text:
            self.segments.append(Segment("prose", text, lineno))

    def flush_prose(self) -> None:
        if self.prose_lines:
            text = "\n".join(self.prose_lines).strip("\n")
            if text.strip():
                self.segments.append(Segment("prose", text, self.prose_start))
        self.prose_lines = []
        self.prose_start = None
        self._release_blank_to_code()

    def flush_code(self) -> None:
        lines = _trim_blank_edges(self.code_lines)
        if lines:
            first_offset = next(
                idx for idx, line in enumerate(self.code_lines) if line.strip()
            )
            self.segments.append(
                Segment("code", "\n".join(lines), self.code_start + first_offset)
            )
        self.code_lines = []
        self.code_start = None

    def finish(self) -> List[Segment]:
        self.flush_prose()
        self.flush_code()
        return self.segments

    def _release_blank_to_code(self) -> None:
        pending, self.pending_blank = self.pending_blank, []
        for lineno in pending:
            if self.code_start is None:
                self.code_start = lineno
            self.code_lines.append("")


def parse_playground_markup(
    source_text: str, source_name: str = "<memory>"
) -> List[Segment]:
    """Split a playground page into prose and code segments.

    Rules:
        - `/*:` opens a markup block which runs to the first `*/`;
        - consecutive `//:` lines form a single prose segment, blank lines
          between them included;
        - every other line is code, with ordinary comments kept as code;
        - segments that are blank after trimming are dropped.

    Parameters:
        source_text: full text of a `Contents.swift` file.
        source_name: name used in error messages.

    Return:
        list[Segment]: segments in source order.

    Raises:
        PlaygroundParseError: a markup block is never closed."""
    text = source_text.replace("\r\n", "\n").replace("\r", "\n")
    builder = _SegmentBuilder()

    block_lines: Optional[List[str]] = None
    block_start = 0

    for lineno, raw_line in enumerate(text.split("\n"), start=1):
        stripped = raw_line.strip()

        if block_lines is not None:
            if BLOCK_CLOSE in raw_line:
                head, _, tail = raw_line.partition(BLOCK_CLOSE)
                if head.strip():
                    block_lines.append(head)
                builder.add_block(block_lines, block_start)
                block_lines = None
                if tail.strip():
                    builder.add_code(tail, lineno)
            else:
                block_lines.append(raw_line)
            continue

        if stripped.startswith(BLOCK_OPEN):
            opening = stripped[len(BLOCK_OPEN):]
            if BLOCK_CLOSE in opening:
                head, _, tail = opening.partition(BLOCK_CLOSE)
                builder.add_block([head.strip()], lineno)
                if tail.strip():
                    builder.add_code(tail, lineno)
                continue
            block_lines = [opening.strip()]
            block_start = lineno
            continue

        if stripped.startswith(LINE_MARKER):
            content = stripped[len(LINE_MARKER):]
            if content.startswith(" "):
                content = content[1:]
            builder.add_marker_line(content, lineno)
            continue

        if not stripped:
            builder.add_blank(lineno)
            continue

        builder.add_code(raw_line, lineno)

    if block_lines is not None:
        raise PlaygroundParseError(
            "markup block opened with '/*:' is never closed",
            source=source_name,
            line=block_start,
        )

    return builder.finish()


def iter_fenced_lines(markdown: str) -> Iterator[Tuple[str, bool]]:
    """Yield `(line, in_code)` for every line of a Markdown text.

    Fence lines themselves count as code. Lines are split on `\\n` only, so
    joining the yielded lines with `\\n` gives back the input."""
    fence: Optional[str] = None
    for line in markdown.split("\n"):
        fence_match = fence_pattern.match(line)
        if fence_match:
            marker = fence_match.group("fence")
            if fence is None:
                fence = marker[0] * 3
            elif marker.startswith(fence):
                fence = None
            yield line, True
            continue
        yield line, fence is not None


def iter_prose_lines(markdown: str) -> Iterator[str]:
    """Yield the lines of a Markdown text that are not inside fenced code."""
    for line, in_code in iter_fenced_lines(markdown):
        if not in_code:
            yield line


def extract_headings(markdown: str) -> List[Tuple[int, str]]:
    """Return (level, title) for each ATX heading outside fenced code."""
    headings: List[Tuple[int, str]] = []
    for line in iter_prose_lines(markdown):
        match = heading_pattern.match(line)
        if match:
            headings.append((len(match.group("marker")), match.group("title").strip()))
    return headings


def extract_internal_links(markdown: str) -> List[str]:
    """Return the targets of `[text](#anchor)` links outside fenced code."""
    links: List[str] = []
    for line in iter_prose_lines(markdown):
        links.extend(match.group("anchor") for match in internal_link_pattern.finditer(line))
    return links


def github_anchor(title: str) -> str:
    """Build the anchor GitHub assigns to a heading.

    Lower-cases the text, drops everything except word characters, spaces
    and hyphens, then turns spaces into hyphens."""
    text = title.strip().lower()
    text = re.sub(r"[^\w\- ]", "", text)
    return text.replace(" ", "-")


def ensure_unique_anchor(anchor: str, used: Set[str]) -> str:
    """Append `-1`, `-2`... to repeated anchors, matching GitHub's numbering."""
    if anchor not in used:
        used.add(anchor)
        return anchor
    idx = 1
    while f"{anchor}-{idx}" in used:
        idx += 1
    unique = f"{anchor}-{idx}"
    used.add(unique)
    return unique


def _normalize_block(lines: List[str]) -> str:
    """Dedent a markup block body and trim its blank edges.

    The text following `/*:` on the opening line carries no indentation, so
    it is kept out of the common-indent computation."""
    if not lines:
        return ""
    first, rest = lines[0], lines[1:]
    body = textwrap.dedent("\n".join(line.rstrip() for line in rest))
    merged = [first.rstrip()] + (body.split("\n") if rest else [])
    return "\n".join(_trim_blank_edges(merged))


def _trim_blank_edges(lines: List[str]) -> List[str]:
    start = 0
    end = len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return [line if line.strip() else "" for line in lines[start:end]]


__all__ = [
    "Segment",
    "PlaygroundParseError",
    "parse_playground_markup",
    "iter_fenced_lines",
    "iter_prose_lines",
    "extract_headings",
    "extract_internal_links",
    "github_anchor",
    "ensure_unique_anchor",
]
