from __future__ import annotations

import logging
import os


def configure_logging() -> None:
    """Configure basic logging once."""
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


class ReplayHeaderError(Exception):
    """Base exception for replay header failures."""


class HeaderDataError(ReplayHeaderError, ValueError):
    """Raised when a decoded header dump is malformed."""


class MissingHeaderDumpError(ReplayHeaderError, FileNotFoundError):
    """Raised when the header dump file does not exist."""
