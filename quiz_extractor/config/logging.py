"""Logging setup for the quiz_extractor package."""

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "quiz_extractor"


def setup_logging(level: str = "WARNING", console: Console | None = None) -> logging.Logger:
    """
    Attach a rich handler to the package logger.

    Safe to call more than once: the handler is installed once and later calls
    only change the level.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...)
        console: Console to write to (defaults to stderr)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logger.setLevel(numeric)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)

    return logger
