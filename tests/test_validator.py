"""Test Document IR validation in PlaygroundEngine/ir/validator.py"""

import sys
from pathlib import Path

# Add project root directory to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from PlaygroundEngine.ir import IR_VERSION, IRValidator


def _chapter(**overrides):
    chapter = {
        "chapterId": "P1",
        "title": "Style",
        "anchor": "style",
        "order": 10,
        "blocks": [
            {"type": "prose", "markdown": "## Naming", "line": 1},
            {"type": "code", "language": "swift", "code": "let a = 1", "line": 3},
        ],
    }
    chapter.update(overrides)
    return chapter


class TestIRValidator:
    """Chapter and document checks"""

    def setup_method(self):
        """Initialization before each test method"""
        self.validator = IRValidator()

    def test_valid_chapter(self):
        ok, errors = self.validator.validate_chapter(_chapter())
        assert ok
        assert errors == []

    def test_missing_fields(self):
        chapter = _chapter()
        del chapter["anchor"]
        del chapter["order"]
        ok, errors = self.validator.validate_chapter(chapter)
        assert not ok
        assert "missing chapter.anchor" in errors
        assert "missing chapter.order" in errors

    def test_blocks_must_be_list(self):
        ok, errors = self.validator.validate_chapter(_chapter(blocks="nope"))
        assert not ok
        assert "chapter.blocks must be an array" in errors

    def test_unknown_block_type(self):
        ok, errors = self.validator.validate_chapter(_chapter(blocks=[{"type": "widget"}]))
        assert not ok
        assert errors == ["blocks[0].type is not supported: widget"]

    def test_empty_prose_and_code(self):
        blocks = [
            {"type": "prose", "markdown": "   "},
            {"type": "code", "language": "swift", "code": ""},
            {"type": "code", "language": None},
        ]
        ok, errors = self.validator.validate_chapter(_chapter(blocks=blocks))
        assert not ok
        assert "blocks[0].markdown must be a non-empty string" in errors
        assert "blocks[1].code must be a non-empty string" in errors
        assert "blocks[2].code is missing" in errors
        assert "blocks[2].language must be a string" in errors

    def test_non_object_chapter(self):
        assert self.validator.validate_chapter(["not", "a", "chapter"]) == (False, ["chapter must be an object"])

    def test_valid_document(self):
        document = {"version": IR_VERSION, "chapters": [_chapter()]}
        assert self.validator.validate_document(document) == (True, [])

    def test_document_errors_are_prefixed(self):
        broken = _chapter(blocks=[{"type": "code", "language": "swift"}])
        document = {"version": IR_VERSION, "chapters": [_chapter(), broken]}
        ok, errors = self.validator.validate_document(document)
        assert not ok
        assert errors == ["chapters[1].blocks[0].code is missing"]

    def test_document_version(self):
        ok, errors = self.validator.validate_document({"chapters": []})
        assert not ok
        assert errors == ["missing document.version"]
        ok, errors = self.validator.validate_document({"version": "0.1", "chapters": []})
        assert not ok
        assert "does not match" in errors[0]

    def test_document_chapters_must_be_list(self):
        ok, errors = self.validator.validate_document({"version": IR_VERSION})
        assert not ok
        assert "document.chapters must be an array" in errors


class TestInternalLinks:
    """Dead anchor detection on rendered Markdown"""

    def setup_method(self):
        """Initialization before each test method"""
        self.validator = IRValidator()

    def test_links_resolve(self):
        markdown = "* [Naming](#naming)\n* [Use of Self](#use-of-self)\n\n## Naming\n\n### Use of Self\n"
        assert self.validator.check_internal_links(markdown) == []

    def test_dead_link_is_reported(self):
        markdown = "* [Working with Storyboards](#storyboards)\n\n## Working with Storyboards\n"
        assert self.validator.check_internal_links(markdown) == [
            "link target #storyboards matches no heading"
        ]

    def test_repeated_heading_gets_suffix(self):
        markdown = (
            "* [a](#protocol-conformance)\n* [b](#protocol-conformance-1)\n\n"
            "### Protocol Conformance\n\n### Protocol Conformance\n"
        )
        assert self.validator.check_internal_links(markdown) == []

    def test_headings_in_code_do_not_count(self):
        markdown = "[x](#hidden)\n\n```swift\n# hidden\n```\n"
        assert self.validator.check_internal_links(markdown) == [
            "link target #hidden matches no heading"
        ]
