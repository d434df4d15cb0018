"""Logging configuration for termload."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "termload"


def setup_logging(*, verbose: bool = False, level: str = "INFO", console: Console | None = None) -> logging.Logger:
    """Configure the `termload` logger with a Rich handler on stderr.

    Args:
        verbose: Lower the level to DEBUG so wire traces are shown.
        level: Level used when not verbose.
        console: Console to write to (defaults to stderr).

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else level.upper())
    logger.propagate = False

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)

    return logger
