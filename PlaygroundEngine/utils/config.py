"""Playground Engine configuration module uniformly reads environment variables and provides type-safe access."""

from typing import Optional

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """README generator configuration; every field can be set from the environment or `.env`."""

    PLAYGROUND_PATH: str = Field(
        "SwiftStyleGuide.playground", description="Playground directory to convert"
    )
    README_PATH: str = Field("README.md", description="Generated Markdown file")
    CODE_LANGUAGE: str = Field("swift", description="Language tag of fenced code blocks")
    INCLUDE_SOURCES: bool = Field(
        False, description="Append the playground's Sources/ files as an appendix"
    )
    GENERATED_NOTICE: bool = Field(
        True, description="Write an 'edit the playground instead' comment at the top"
    )
    STRIP_NAVIGATION_LINKS: bool = Field(
        True, description="Drop prose lines that only hold @next/@previous links"
    )
    # The composed IR is only written when explicitly requested, for debugging the conversion.
    DOCUMENT_IR_OUTPUT_DIR: str = Field("build/ir", description="Document IR output directory")
    LOG_FILE: Optional[str] = Field(None, description="Log output file")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="allow",
    )


settings = Settings()


def print_config(config: Settings):
    """Output the current configuration items to the log in human-readable format to facilitate troubleshooting.

    Parameters:
        config: Settings instance, usually global settings."""
    message = ""
    message += "\n=== Playground Engine Configuration ===\n"
    message += f"Playground: {config.PLAYGROUND_PATH}\n"
    message += f"README: {config.README_PATH}\n"
    message += f"Code language: {config.CODE_LANGUAGE}\n"
    message += f"Include sources: {config.INCLUDE_SOURCES}\n"
    message += f"Generated notice: {config.GENERATED_NOTICE}\n"
    message += f"Strip navigation links: {config.STRIP_NAVIGATION_LINKS}\n"
    message += f"IR directory: {config.DOCUMENT_IR_OUTPUT_DIR}\n"
    message += f"Log file: {config.LOG_FILE or '(none)'}\n"
    message += "========================================\n"
    logger.debug(message)
