"""Document IR definition and validation.

The composer produces, the validator checks and the renderer consumes the same
structure, so its constants live in one place."""

from .schema import (
    IR_VERSION,
    ALLOWED_BLOCK_TYPES,
    REQUIRED_CHAPTER_FIELDS,
    NAVIGATION_TARGETS,
)
from .validator import IRValidator

__all__ = [
    "IR_VERSION",
    "ALLOWED_BLOCK_TYPES",
    "REQUIRED_CHAPTER_FIELDS",
    "NAVIGATION_TARGETS",
    "IRValidator",
]
