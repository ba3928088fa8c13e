"""Page binder: merges parsed playground pages into the Document IR.

DocumentComposer orders pages, assigns chapter ids and anchors, and resolves
the document title."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Set

from ..ir.schema import IR_VERSION
from .markup_parser import ensure_unique_anchor, extract_headings, github_anchor
from .page_storage import PlaygroundPage


class DocumentComposer:
    """A simple binder that splices playground pages into Document IR.

    Function:
        - Sort pages by order and give each one a stable chapterId;
        - Generate document-wide unique anchors for page headings;
        - Convert segments into typed prose/code blocks;
        - Inject IR version and generation timestamp."""

    def __init__(self, language: str = "swift"):
        """Record the language used to tag code blocks."""
        self.language = language
        self._seen_anchors: Set[str] = set()

    def build_document(
        self,
        playground_id: str,
        metadata: Dict[str, object],
        pages: Sequence[PlaygroundPage],
        sources: Optional[List[Dict[str, str]]] = None,
    ) -> Dict[str, object]:
        """Bind all pages into a single IR dict.

        Parameters:
            playground_id: playground name.
            metadata: extra metadata; a `title` entry overrides the derived one.
            pages: parsed pages.
            sources: shared source files from `Sources/`.

        Return:
            dict: Document IR consumed by the validator and the renderer."""
        self._seen_anchors = set()
        ordered = sorted(pages, key=lambda page: page.order)
        chapters = [
            self._build_chapter(page, idx) for idx, page in enumerate(ordered, start=1)
        ]

        title = metadata.get("title") or self._derive_title(chapters) or playground_id
        document = {
            "version": IR_VERSION,
            "playgroundId": playground_id,
            "metadata": {
                **metadata,
                "title": title,
                "generatedAt": metadata.get("generatedAt")
                or datetime.utcnow().isoformat() + "Z",
            },
            "chapters": chapters,
            "sources": [
                {
                    "path": source["path"],
                    "language": self.language,
                    "code": source["code"],
                }
                for source in (sources or [])
            ],
        }
        return document

    def _build_chapter(self, page: PlaygroundPage, idx: int) -> Dict[str, object]:
        blocks: List[Dict[str, object]] = []
        for segment in page.segments:
            if segment.kind == "prose":
                blocks.append(
                    {"type": "prose", "markdown": segment.text, "line": segment.line}
                )
            else:
                blocks.append(
                    {
                        "type": "code",
                        "language": self.language,
                        "code": segment.text,
                        "line": segment.line,
                    }
                )
        anchor = github_anchor(page.name) or f"page-{idx}"
        return {
            "chapterId": f"P{idx}",
            "title": page.name,
            "anchor": ensure_unique_anchor(anchor, self._seen_anchors),
            "order": page.order,
            "sourcePath": str(page.path),
            "blocks": blocks,
        }

    def _derive_title(self, chapters: List[Dict[str, object]]) -> Optional[str]:
        """First level-1 heading of the first page's prose, if any."""
        if not chapters:
            return None
        for block in chapters[0]["blocks"]:
            if block["type"] != "prose":
                continue
            for level, text in extract_headings(block["markdown"]):
                if level == 1:
                    return text
        return None


__all__ = ["DocumentComposer"]
