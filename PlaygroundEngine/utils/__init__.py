"""Shared helpers for Playground Engine."""

from .config import Settings, settings, print_config

__all__ = ["Settings", "settings", "print_config"]
