"""Logging setup for the DR meter."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "drmeter"


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> logging.Logger:
    """Route the package logger through rich.

    Safe to call more than once; the previous handler is replaced.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
