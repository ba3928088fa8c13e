"""Document IR structure validator.

Checks the composed IR before rendering, so that a malformed page shows up as
a precise warning instead of a silently broken README. Implemented as plain
Python checks that report a path for every problem."""

from __future__ import annotations

from typing import Any, Dict, List, Set, Tuple

from ..core.markup_parser import (
    ensure_unique_anchor,
    extract_headings,
    extract_internal_links,
    github_anchor,
)
from .schema import ALLOWED_BLOCK_TYPES, IR_VERSION, REQUIRED_CHAPTER_FIELDS


class IRValidator:
    """Document IR structure validator.

    Description:
        - validate_chapter / validate_document return (whether passed, error list)
        - Error locations use path syntax, e.g. `chapters[0].blocks[2].code`
        - check_internal_links inspects the rendered Markdown for dead anchors"""

    def __init__(self, schema_version: str = IR_VERSION):
        self.schema_version = schema_version

    # ======== External interface ========

    def validate_document(self, document: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """Verify document-level fields and every chapter."""
        errors: List[str] = []
        if not isinstance(document, dict):
            return False, ["document must be an object"]

        version = document.get("version")
        if not version:
            errors.append("missing document.version")
        elif version != self.schema_version:
            errors.append(
                f"document.version {version} does not match {self.schema_version}"
            )

        chapters = document.get("chapters")
        if not isinstance(chapters, list):
            errors.append("document.chapters must be an array")
            return False, errors

        for idx, chapter in enumerate(chapters):
            _, chapter_errors = self.validate_chapter(chapter)
            errors.extend(f"chapters[{idx}].{error}" for error in chapter_errors)

        return len(errors) == 0, errors

    def validate_chapter(self, chapter: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """Verify the required fields and block structure of a single chapter."""
        errors: List[str] = []
        if not isinstance(chapter, dict):
            return False, ["chapter must be an object"]

        for field in REQUIRED_CHAPTER_FIELDS:
            if field not in chapter:
                errors.append(f"missing chapter.{field}")

        blocks = chapter.get("blocks")
        if not isinstance(blocks, list):
            errors.append("chapter.blocks must be an array")
            return False, errors

        for idx, block in enumerate(blocks):
            self._validate_block(block, f"blocks[{idx}]", errors)

        return len(errors) == 0, errors

    def check_internal_links(self, markdown: str) -> List[str]:
        """List `](#anchor)` links in rendered Markdown that match no heading.

        Anchors are computed the way GitHub computes them, including the
        numeric suffix for repeated headings. The result is advisory."""
        anchors: Set[str] = set()
        for _, title in extract_headings(markdown):
            ensure_unique_anchor(github_anchor(title), anchors)

        warnings: List[str] = []
        for target in extract_internal_links(markdown):
            if target not in anchors:
                warnings.append(f"link target #{target} matches no heading")
        return warnings

    # ======== Internal Tools ========

    def _validate_block(self, block: Any, path: str, errors: List[str]):
        """Dispatch to the validator for the block's type."""
        if not isinstance(block, dict):
            errors.append(f"{path} must be an object")
            return

        block_type = block.get("type")
        if block_type not in ALLOWED_BLOCK_TYPES:
            errors.append(f"{path}.type is not supported: {block_type}")
            return

        validator = getattr(self, f"_validate_{block_type}_block")
        validator(block, path, errors)

    def _validate_prose_block(self, block: Dict[str, Any], path: str, errors: List[str]):
        """prose needs non-empty markdown"""
        markdown = block.get("markdown")
        if not isinstance(markdown, str) or not markdown.strip():
            errors.append(f"{path}.markdown must be a non-empty string")

    def _validate_code_block(self, block: Dict[str, Any], path: str, errors: List[str]):
        """code needs non-empty code and a language tag"""
        code = block.get("code")
        if code is None:
            errors.append(f"{path}.code is missing")
        elif not isinstance(code, str) or not code.strip():
            errors.append(f"{path}.code must be a non-empty string")
        if not isinstance(block.get("language"), str):
            errors.append(f"{path}.language must be a string")


__all__ = ["IRValidator"]
