"""Logging setup for the flowman CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

# Status output and log records share stderr so stdout stays clean for piping
console = Console(stderr=True)

LOGGER_NAME = "flowman"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a RichHandler to the flowman logger.

    Warnings and errors are always shown; debug output only with verbose.
    Safe to call more than once.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=verbose,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
