"""Document IR constants shared by the composer, validator and renderer."""

IR_VERSION = "1.0"

ALLOWED_BLOCK_TYPES = {"prose", "code"}

REQUIRED_CHAPTER_FIELDS = ("chapterId", "title", "anchor", "order", "blocks")

# prose lines made only of these links are playground page navigation
NAVIGATION_TARGETS = ("@next", "@previous")

__all__ = [
    "IR_VERSION",
    "ALLOWED_BLOCK_TYPES",
    "REQUIRED_CHAPTER_FIELDS",
    "NAVIGATION_TARGETS",
]
