"""Playground page discovery and loading.

A playground is a directory: either a single root `Contents.swift`, or a
`Pages/` folder holding one `<Name>.xcplaygroundpage/Contents.swift` per page.
The optional `contents.xcplayground` manifest fixes the page order; shared
code lives under `Sources/`."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

from loguru import logger

from .markup_parser import Segment, parse_playground_markup

PAGE_ORDER_STEP = 10
PAGE_SUFFIX = ".xcplaygroundpage"
MANIFEST_NAME = "contents.xcplayground"
CONTENTS_NAME = "Contents.swift"


@dataclass
class PlaygroundPage:
    """A parsed playground page.

    `order` follows the manifest (or directory name) order in steps of
    PAGE_ORDER_STEP, leaving room to splice pages in between."""

    name: str
    order: int
    path: Path
    segments: List[Segment] = field(default_factory=list)


class PlaygroundStorage:
    """Reads pages and shared sources from a playground directory."""

    def __init__(self, playground_path: str):
        """Bind the storage to a playground directory.

        Args:
            playground_path: path of the `.playground` directory"""
        self.root = Path(playground_path)

    @property
    def name(self) -> str:
        """Playground name without the `.playground` suffix."""
        return self.root.stem if self.root.suffix == ".playground" else self.root.name

    # ======== Pages ========

    def read_manifest(self) -> List[str]:
        """Return page names listed in `contents.xcplayground`.

        A missing manifest or one without a page list yields an empty list.
        A manifest that is not valid XML is logged and treated the same way."""
        manifest_path = self.root / MANIFEST_NAME
        if not manifest_path.exists():
            return []
        try:
            tree = ET.parse(manifest_path)
        except ET.ParseError as exc:
            logger.warning(f"Ignoring unreadable playground manifest {manifest_path}: {exc}")
            return []
        names = [
            page.get("name")
            for page in tree.getroot().iter("page")
            if page.get("name")
        ]
        if names:
            logger.debug(f"Manifest page order: {', '.join(names)}")
        return names

    def discover_pages(self) -> List[Tuple[str, Path]]:
        """Locate page source files in display order.

        Return:
            list[tuple[str, Path]]: (page name, Contents.swift path)

        Raises:
            FileNotFoundError: the playground or its pages are missing."""
        if not self.root.is_dir():
            raise FileNotFoundError(f"Playground directory does not exist: {self.root}")

        pages_dir = self.root / "Pages"
        if not pages_dir.is_dir():
            single = self.root / CONTENTS_NAME
            if not single.exists():
                raise FileNotFoundError(f"No pages found in playground: {self.root}")
            return [(self.name, single)]

        found: Dict[str, Path] = {}
        for child in sorted(pages_dir.iterdir()):
            if not child.is_dir() or child.suffix != PAGE_SUFFIX:
                continue
            contents = child / CONTENTS_NAME
            if contents.exists():
                found[child.stem] = contents

        if not found:
            raise FileNotFoundError(f"No pages found in playground: {self.root}")

        ordered: List[Tuple[str, Path]] = []
        for name in self.read_manifest():
            if name in found:
                ordered.append((name, found.pop(name)))
            else:
                logger.warning(f"Manifest lists page '{name}' but it has no {CONTENTS_NAME}")
        # pages missing from the manifest keep directory order after the listed ones
        ordered.extend(found.items())
        return ordered

    def load_pages(self) -> List[PlaygroundPage]:
        """Parse every page into segments.

        Raises:
            FileNotFoundError: see discover_pages.
            PlaygroundParseError: a page has an unterminated markup block."""
        pages: List[PlaygroundPage] = []
        order = PAGE_ORDER_STEP
        for name, contents_path in self.discover_pages():
            source_text = contents_path.read_text(encoding="utf-8")
            segments = parse_playground_markup(source_text, source_name=str(contents_path))
            logger.debug(f"Page '{name}': {len(segments)} segments")
            pages.append(
                PlaygroundPage(name=name, order=order, path=contents_path, segments=segments)
            )
            order += PAGE_ORDER_STEP
        logger.info(f"Loaded {len(pages)} page(s) from {self.root}")
        return pages

    # ======== Shared sources ========

    def load_sources(self) -> List[Dict[str, str]]:
        """Read `Sources/*.swift` in file name order.

        Return:
            list[dict]: `{"path": relative path, "code": file text}`"""
        sources_dir = self.root / "Sources"
        if not sources_dir.is_dir():
            return []
        sources: List[Dict[str, str]] = []
        for path in sorted(sources_dir.rglob("*.swift")):
            code = path.read_text(encoding="utf-8").replace("\r\n", "\n").strip("\n")
            sources.append({"path": path.relative_to(self.root).as_posix(), "code": code})
        return sources


__all__ = ["PlaygroundStorage", "PlaygroundPage"]
