"""Playground Engine core tool collection.

Markup slicing, page loading and document composition. The CLI and the
renderer both build on these so that every consumer sees the same structure."""

from .markup_parser import (
    Segment,
    PlaygroundParseError,
    parse_playground_markup,
    extract_headings,
    extract_internal_links,
    github_anchor,
    ensure_unique_anchor,
)
from .page_storage import PlaygroundPage, PlaygroundStorage
from .stitcher import DocumentComposer

__all__ = [
    "Segment",
    "PlaygroundParseError",
    "parse_playground_markup",
    "extract_headings",
    "extract_internal_links",
    "github_anchor",
    "ensure_unique_anchor",
    "PlaygroundPage",
    "PlaygroundStorage",
    "DocumentComposer",
]
