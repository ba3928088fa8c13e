#!/usr/bin/env python
"""Regenerate README.md from the style guide playground.

Contributors edit the playground, never README.md. This script slices every
playground page into prose and code, binds the pages into a Document IR,
validates it and renders the README.

How to use:
    python generate_readme.py [PLAYGROUND] [options]

Options:
    -o, --output PATH     README to write (default: README_PATH setting)
    --check               only report whether the README is up to date
    --ir [PATH]           also save the Document IR as JSON
    --include-sources     append the playground's Sources/ files
    --verbose             show detailed logs"""

import argparse
import difflib
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from PlaygroundEngine.core import DocumentComposer, PlaygroundParseError, PlaygroundStorage
from PlaygroundEngine.core.page_storage import PlaygroundPage
from PlaygroundEngine.ir import IRValidator
from PlaygroundEngine.renderers import MarkdownRenderer
from PlaygroundEngine.utils.config import Settings, print_config, settings


def setup_logger(verbose: bool = False, log_file: Optional[str] = None):
    """Set log configuration"""
    logger.remove()  # Remove default processor
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level="DEBUG" if verbose else "INFO",
    )
    if log_file:
        logger.add(log_file, level="DEBUG", rotation="1 MB", encoding="utf-8")


def load_pages(storage: PlaygroundStorage) -> List[PlaygroundPage]:
    """Read and slice every page of the playground.

    Parameters:
        storage: PlaygroundStorage bound to the playground directory

    Return:
        list[PlaygroundPage]: pages in display order"""
    pages = storage.load_pages()
    segment_count = sum(len(page.segments) for page in pages)
    logger.info(f"Number of segments loaded: {segment_count}")
    return pages


def stitch_document(
    storage: PlaygroundStorage, pages: List[PlaygroundPage], config: Settings
) -> Dict[str, Any]:
    """Bind pages (and shared sources when requested) into a Document IR.

    Parameters:
        storage: playground storage, used for its name and Sources/
        pages: parsed pages
        config: active settings

    Return:
        dict: complete Document IR object"""
    sources = storage.load_sources() if config.INCLUDE_SOURCES else []
    composer = DocumentComposer(language=config.CODE_LANGUAGE)
    document_ir = composer.build_document(
        storage.name,
        {"source": storage.root.name},
        pages,
        sources=sources,
    )
    code_blocks = sum(
        1
        for chapter in document_ir["chapters"]
        for block in chapter["blocks"]
        if block["type"] == "code"
    )
    logger.info(
        f"Binding completed: {len(document_ir['chapters'])} pages, "
        f"{code_blocks} code blocks, {len(document_ir['sources'])} sources"
    )
    return document_ir


def validate_document(document_ir: Dict[str, Any]) -> bool:
    """Use IRValidator to check the IR structure.

    Problems are logged as warnings and never stop the generation.

    Return:
        bool: True when no structural problem was found"""
    validator = IRValidator()
    ok, errors = validator.validate_document(document_ir)
    if ok:
        logger.info("Document structure verification passed")
        return True
    logger.warning(f"{len(errors)} structure problem(s) found, generation continues:")
    for error in errors[:10]:
        logger.warning(f"  - {error}")
    return False


def report_dead_links(markdown: str) -> List[str]:
    """Warn about table-of-contents style links whose target heading is missing."""
    warnings = IRValidator().check_internal_links(markdown)
    for warning in warnings:
        logger.warning(warning)
    return warnings


def save_document_ir(document_ir: Dict[str, Any], ir_path: Path) -> Path:
    """Write the Document IR to disk for debugging the conversion.

    Parameters:
        document_ir: bound IR
        ir_path: target JSON file

    Return:
        Path: saved IR file path"""
    ir_path.parent.mkdir(parents=True, exist_ok=True)
    ir_path.write_text(json.dumps(document_ir, ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info(f"IR saved: {ir_path}")
    return ir_path


def render_markdown(document_ir: Dict[str, Any], config: Settings) -> str:
    """Render the Document IR to README Markdown."""
    return MarkdownRenderer(config).render(document_ir)


def write_readme(markdown: str, readme_path: Path) -> Path:
    """Write the README and report its size."""
    readme_path.parent.mkdir(parents=True, exist_ok=True)
    readme_path.write_text(markdown, encoding="utf-8")
    file_size_kb = readme_path.stat().st_size / 1024
    logger.info(f"README generated successfully: {readme_path} ({file_size_kb:.1f} KB)")
    return readme_path


def check_readme(markdown: str, readme_path: Path) -> bool:
    """Compare freshly rendered Markdown with the README on disk.

    Return:
        bool: True when the README is up to date"""
    if not readme_path.exists():
        logger.error(f"README does not exist: {readme_path}")
        return False
    current = readme_path.read_text(encoding="utf-8")
    if current == markdown:
        logger.info(f"README is up to date: {readme_path}")
        return True

    diff = list(
        difflib.unified_diff(
            current.splitlines(),
            markdown.splitlines(),
            fromfile=str(readme_path),
            tofile="generated",
            lineterm="",
        )
    )
    logger.error(f"README is out of date with the playground ({len(diff)} diff lines)")
    for line in diff[:40]:
        logger.debug(line)
    logger.error("Run generate_readme and commit the result")
    return False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate README.md from a style guide playground",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python generate_readme.py
  python generate_readme.py SwiftStyleGuide.playground -o README.md
  python generate_readme.py --check
        """,
    )
    parser.add_argument(
        "playground",
        nargs="?",
        default=None,
        help="Playground directory (default: PLAYGROUND_PATH setting)",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="README file to write (default: README_PATH setting)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Do not write; exit with 1 when the README differs from the playground",
    )
    parser.add_argument(
        "--ir",
        nargs="?",
        const="",
        default=None,
        help="Also save the Document IR as JSON (default path under DOCUMENT_IR_OUTPUT_DIR)",
    )
    parser.add_argument(
        "--include-sources",
        action="store_true",
        help="Append the playground's Sources/ files to the README",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed logs",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry: slices the playground, binds IR and renders the README.

    Process:
        1) Load and slice pages;
        2) Bind the Document IR and verify its structure (warning only);
        3) Optionally save the IR;
        4) Render Markdown, then write it or compare it with the README.

    Return:
        int: 0 indicates success, the rest indicates failure."""
    args = build_parser().parse_args(argv)

    overrides: Dict[str, Any] = {}
    if args.playground:
        overrides["PLAYGROUND_PATH"] = args.playground
    if args.output:
        overrides["README_PATH"] = args.output
    if args.include_sources:
        overrides["INCLUDE_SOURCES"] = True
    config = settings.model_copy(update=overrides)

    setup_logger(args.verbose, config.LOG_FILE)
    print_config(config)

    storage = PlaygroundStorage(config.PLAYGROUND_PATH)
    try:
        pages = load_pages(storage)
    except FileNotFoundError as exc:
        logger.error(str(exc))
        return 1
    except PlaygroundParseError as exc:
        logger.error(f"Playground markup error: {exc}")
        return 1

    document_ir = stitch_document(storage, pages, config)
    validate_document(document_ir)

    if args.ir is not None:
        ir_path = (
            Path(args.ir)
            if args.ir
            else Path(config.DOCUMENT_IR_OUTPUT_DIR) / f"{storage.name}_ir.json"
        )
        save_document_ir(document_ir, ir_path)

    markdown = render_markdown(document_ir, config)
    report_dead_links(markdown)

    readme_path = Path(config.README_PATH)
    if args.check:
        return 0 if check_readme(markdown, readme_path) else 1

    try:
        write_readme(markdown, readme_path)
    except OSError as exc:
        logger.error(f"Failed to write README: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
