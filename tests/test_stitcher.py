"""Test Document IR binding in PlaygroundEngine/core/stitcher.py"""

import sys
from pathlib import Path

# Add project root directory to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from PlaygroundEngine.core.markup_parser import Segment
from PlaygroundEngine.core.page_storage import PlaygroundPage
from PlaygroundEngine.core.stitcher import DocumentComposer
from PlaygroundEngine.ir import IR_VERSION


def _page(name, order, segments):
    return PlaygroundPage(name=name, order=order, path=Path(f"{name}/Contents.swift"), segments=segments)


class TestDocumentComposer:
    """Chapter ordering, anchors, blocks and title resolution"""

    def setup_method(self):
        """Initialization before each test method"""
        self.composer = DocumentComposer(language="swift")
        self.pages = [
            _page("Classes", 20, [Segment("code", "class A {}", 3)]),
            _page(
                "Naming",
                10,
                [
                    Segment("prose", "# The Guide\n\n## Naming", 1),
                    Segment("code", "let a = 1", 6),
                ],
            ),
        ]

    def test_chapters_follow_order(self):
        document = self.composer.build_document("Guide", {}, self.pages)
        assert [c["title"] for c in document["chapters"]] == ["Naming", "Classes"]
        assert [c["chapterId"] for c in document["chapters"]] == ["P1", "P2"]
        assert document["version"] == IR_VERSION
        assert document["playgroundId"] == "Guide"

    def test_blocks_are_typed(self):
        document = self.composer.build_document("Guide", {}, self.pages)
        blocks = document["chapters"][0]["blocks"]
        assert blocks[0] == {"type": "prose", "markdown": "# The Guide\n\n## Naming", "line": 1}
        assert blocks[1] == {"type": "code", "language": "swift", "code": "let a = 1", "line": 6}

    def test_title_from_first_heading(self):
        document = self.composer.build_document("Guide", {}, self.pages)
        assert document["metadata"]["title"] == "The Guide"
        assert document["metadata"]["generatedAt"].endswith("Z")

    def test_title_from_metadata_wins(self):
        document = self.composer.build_document("Guide", {"title": "Custom"}, self.pages)
        assert document["metadata"]["title"] == "Custom"

    def test_title_falls_back_to_playground_name(self):
        pages = [_page("Only", 10, [Segment("code", "let a = 1", 1)])]
        document = self.composer.build_document("Guide", {}, pages)
        assert document["metadata"]["title"] == "Guide"

    def test_anchors_are_unique(self):
        pages = [
            _page("Usage", 10, [Segment("code", "a", 1)]),
            _page("Usage!", 20, [Segment("code", "b", 1)]),
        ]
        document = self.composer.build_document("Guide", {}, pages)
        assert [c["anchor"] for c in document["chapters"]] == ["usage", "usage-1"]

    def test_anchors_reset_between_documents(self):
        first = self.composer.build_document("Guide", {}, self.pages)
        second = self.composer.build_document("Guide", {}, self.pages)
        assert [c["anchor"] for c in first["chapters"]] == [c["anchor"] for c in second["chapters"]]

    def test_sources_are_tagged(self):
        sources = [{"path": "Sources/Shape.swift", "code": "open class Shape {}"}]
        document = self.composer.build_document("Guide", {}, self.pages, sources=sources)
        assert document["sources"] == [
            {"path": "Sources/Shape.swift", "language": "swift", "code": "open class Shape {}"}
        ]
