"""Playground Engine.

Turns a style-guide playground (prose markup interleaved with example code)
into a README: pages are sliced into prose and code segments, bound into a
Document IR, validated and rendered to Markdown."""

__version__ = "1.0.0"
