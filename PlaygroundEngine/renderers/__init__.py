"""Playground Engine renderer collection.

Provides MarkdownRenderer for README output."""

from .markdown_renderer import MarkdownRenderer

__all__ = ["MarkdownRenderer"]
