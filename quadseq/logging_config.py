"""Logging setup for the Quad Sequence engine and CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "quadseq"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(level: str = "WARNING", console: Console | None = None) -> logging.Logger:
    """Route ``quadseq`` log records through a Rich handler.

    Calling this again replaces the previously installed handler, so the
    level can be changed between games.
    """

    name = level.upper()
    if name not in LOG_LEVELS:
        raise ValueError(f"unknown log level '{level}'")

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(name)
    logger.propagate = False
    return logger
