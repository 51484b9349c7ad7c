"""Logging setup for the command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbose: bool = False, console: Console | None = None) -> int:
    """Route library logging through rich.

    Args:
        verbose: DEBUG when True, WARNING otherwise
        console: Console to log to; defaults to stderr

    Returns:
        The numeric level applied
    """
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(console=console or Console(stderr=True), show_path=False)
    handler.setLevel(level)

    logger = logging.getLogger("cpdscan")
    for existing in list(logger.handlers):
        if isinstance(existing, RichHandler):
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    return level
