"""Markdown renderer: turns the Document IR into the README.

Besides emitting prose and fenced code, it resolves the playground-only page
links (`@next`, `@previous`, page names) to the anchors GitHub assigns to the
headings that actually end up in the README."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Set, Tuple
from urllib.parse import unquote

from loguru import logger

from ..core.markup_parser import (
    ensure_unique_anchor,
    extract_headings,
    github_anchor,
    iter_fenced_lines,
)
from ..ir.schema import NAVIGATION_TARGETS
from ..utils.config import Settings, settings as default_settings

page_link_pattern = re.compile(r"\[(?P<text>[^\]]*)\]\((?P<target>[^)\s]+)\)")
inline_code_pattern = re.compile(r"(`+)(?!`).+?(?<!`)\1(?!`)")


class MarkdownRenderer:
    """Convert Document IR to README Markdown.

    - Prose is emitted as written, apart from playground-only page links;
    - Code blocks become fenced blocks tagged with their language;
    - Output carries no timestamps, so regenerating an unchanged playground
      reproduces the same bytes."""

    def __init__(self, config: Optional[Settings] = None) -> None:
        self.config = config or default_settings
        self.document: Dict[str, Any] = {}
        self.metadata: Dict[str, Any] = {}
        self.chapters: List[Dict[str, Any]] = []
        # chapter index -> anchor of the heading the chapter opens with
        self.page_anchors: Dict[int, str] = {}

    def render(self, document_ir: Dict[str, Any]) -> str:
        """Entry: Convert IR to Markdown string.

        Chapters are rendered twice: the first pass settles which headings
        the README will contain, the second rewrites page links to them.

        Parameters:
            document_ir: Document IR data

        Return:
            str: Markdown text ending with a single newline"""
        self.document = document_ir or {}
        self.metadata = self.document.get("metadata", {}) or {}
        self.chapters = [
            chapter
            for chapter in self.document.get("chapters", []) or []
            if isinstance(chapter, dict)
        ]

        self.page_anchors = {}
        self.page_anchors = self._collect_page_anchors(self._render_chapters())

        parts: List[str] = []
        if self.config.GENERATED_NOTICE:
            parts.append(self._render_notice())

        parts.extend(chapter_md for _, chapter_md in self._render_chapters())

        if self.config.INCLUDE_SOURCES:
            appendix = self._render_sources(self.document.get("sources") or [])
            if appendix:
                parts.append(appendix)

        body = "\n\n".join(part for part in parts if part).strip("\n")
        return body + "\n" if body else ""

    # ===== Chapter and block-level rendering =====

    def _render_notice(self) -> str:
        source = self.metadata.get("source") or f"{self.document.get('playgroundId', 'the')}.playground"
        return (
            f"<!-- This file is generated from {source}. "
            "Edit the playground and run generate_readme instead of editing it by hand. -->"
        )

    def _render_chapters(self) -> List[Tuple[int, str]]:
        multi_page = len(self.chapters) > 1
        rendered: List[Tuple[int, str]] = []
        for idx, chapter in enumerate(self.chapters):
            chapter_md = self._render_chapter(chapter, idx, multi_page)
            if chapter_md:
                rendered.append((idx, chapter_md))
        return rendered

    def _render_chapter(self, chapter: Dict[str, Any], idx: int, multi_page: bool) -> str:
        blocks = chapter.get("blocks") if isinstance(chapter.get("blocks"), list) else []
        lines: List[str] = []
        body = self._render_blocks(blocks, idx)

        # Multi-page playgrounds get a heading per page unless the page already opens with one
        if multi_page and not self._opens_with_heading(body):
            title = chapter.get("title") or chapter.get("chapterId")
            if title:
                lines.append(f"## {title}")

        if body:
            lines.append(body)
        return "\n\n".join(lines)

    def _render_blocks(self, blocks: List[Dict[str, Any]], chapter_idx: int) -> str:
        rendered: List[str] = []
        for block in blocks:
            md = self._render_block(block, chapter_idx)
            if md:
                rendered.append(md)
        return "\n\n".join(rendered)

    def _render_block(self, block: Any, chapter_idx: int) -> str:
        if not isinstance(block, dict):
            return ""
        handlers = {
            "prose": self._render_prose,
            "code": self._render_code,
        }
        handler = handlers.get(block.get("type"))
        if handler is None:
            return self._fallback_unknown(block)
        return handler(block, chapter_idx)

    def _render_prose(self, block: Dict[str, Any], chapter_idx: int) -> str:
        lines: List[str] = []
        for line, in_code in iter_fenced_lines(block.get("markdown") or ""):
            if in_code:
                lines.append(line)
                continue
            if self.config.STRIP_NAVIGATION_LINKS and self._is_navigation_line(line):
                continue
            lines.append(self._rewrite_page_links(line, chapter_idx))
        return "\n".join(lines).strip("\n")

    def _render_code(self, block: Dict[str, Any], chapter_idx: int) -> str:
        lang = block.get("language") or ""
        content = (block.get("code") or "").strip("\n")
        if not content.strip():
            return ""
        return f"```{lang}\n{content}\n```"

    def _render_sources(self, sources: List[Dict[str, Any]]) -> str:
        sections: List[str] = []
        for source in sources:
            code = (source.get("code") or "").strip("\n")
            if not code.strip():
                continue
            name = str(source.get("path", "")).rsplit("/", 1)[-1]
            lang = source.get("language") or self.config.CODE_LANGUAGE
            sections.append(f"### {name}\n\n```{lang}\n{code}\n```")
        if not sections:
            return ""
        return "\n\n".join(["## Sources"] + sections)

    # ===== Playground links =====

    def _collect_page_anchors(self, rendered: List[Tuple[int, str]]) -> Dict[int, str]:
        """Anchor of each chapter's opening heading, numbered across every heading."""
        used: Set[str] = set()
        anchors: Dict[int, str] = {}
        for idx, chapter_md in rendered:
            opens_with_heading = self._opens_with_heading(chapter_md)
            for pos, (_, title) in enumerate(extract_headings(chapter_md)):
                anchor = ensure_unique_anchor(github_anchor(title), used)
                if pos == 0 and opens_with_heading:
                    anchors[idx] = anchor
        return anchors

    def _is_navigation_line(self, line: str) -> bool:
        """A line holding nothing but @next/@previous links and separators."""
        if inline_code_pattern.search(line):
            return False
        links = page_link_pattern.findall(line)
        if not links:
            return False
        if any(target not in NAVIGATION_TARGETS for _, target in links):
            return False
        residue = page_link_pattern.sub("", line)
        return not residue.strip(" \t|·•-")

    def _rewrite_page_links(self, line: str, chapter_idx: int) -> str:
        """Point @next/@previous and page-name links at in-document anchors.

        Links written inside inline code spans are left alone."""
        code_spans = [span.span() for span in inline_code_pattern.finditer(line)]

        def replace(match: re.Match) -> str:
            if any(start <= match.start() < end for start, end in code_spans):
                return match.group(0)
            anchor = self._resolve_page_target(match.group("target"), chapter_idx)
            if anchor is None:
                return match.group(0)
            return f"[{match.group('text')}](#{anchor})"

        return page_link_pattern.sub(replace, line)

    def _resolve_page_target(self, target: str, chapter_idx: int) -> Optional[str]:
        if target == "@next":
            neighbour = chapter_idx + 1
        elif target == "@previous":
            neighbour = chapter_idx - 1
        else:
            name = unquote(target)
            for idx, chapter in enumerate(self.chapters):
                if chapter.get("title") == name:
                    return self.page_anchors.get(idx)
            return None
        if 0 <= neighbour < len(self.chapters):
            return self.page_anchors.get(neighbour)
        logger.debug(f"Navigation link {target} on page {chapter_idx + 1} has no target page")
        return None

    # ===== Helpers =====

    def _opens_with_heading(self, body: str) -> bool:
        first_line = body.lstrip("\n").split("\n", 1)[0]
        return bool(extract_headings(first_line))

    def _fallback_unknown(self, block: Dict[str, Any]) -> str:
        logger.warning(f"Unrecognized block type {block.get('type')!r}, skipped")
        return ""


__all__ = ["MarkdownRenderer"]
