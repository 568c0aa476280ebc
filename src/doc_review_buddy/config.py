"""Runtime settings read from the environment (and a local ``.env`` file)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

OUTPUT_FORMATS = ("rich", "json")


@dataclass
class Settings:
    """Settings for the command-line tool.

    Attributes:
        log_level: Logging level name, from ``DOC_REVIEW_LOG_LEVEL``.
        output: Default output format, from ``DOC_REVIEW_OUTPUT``.
        excerpt_length: Characters of clause text shown in reports,
            from ``DOC_REVIEW_EXCERPT_LENGTH``.
    """

    log_level: str = "WARNING"
    output: str = "rich"
    excerpt_length: int = 160

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level!r}")
        if self.output not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format {self.output!r}. Expected one of: {', '.join(OUTPUT_FORMATS)}"
            )
        if self.excerpt_length <= 0:
            raise ValueError("excerpt_length must be positive")

    @classmethod
    def from_env(cls, dotenv: bool = True) -> Settings:
        """Build settings from ``DOC_REVIEW_*`` environment variables."""
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        raw_length = os.getenv("DOC_REVIEW_EXCERPT_LENGTH", "160")
        try:
            excerpt_length = int(raw_length)
        except ValueError as exc:
            raise ValueError(f"DOC_REVIEW_EXCERPT_LENGTH must be an integer, got {raw_length!r}") from exc

        return cls(
            log_level=os.getenv("DOC_REVIEW_LOG_LEVEL", "WARNING"),
            output=os.getenv("DOC_REVIEW_OUTPUT", "rich").lower(),
            excerpt_length=excerpt_length,
        )
