"""Logging setup for the command-line interface."""

import logging
from typing import Optional

from rich.logging import RichHandler

from .terminal import console


def configure_logging(verbose: bool = False, logger_name: Optional[str] = None) -> logging.Logger:
    """
    Route log records through rich and return a scoped logger.
    Library modules only log; handlers are installed here.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=verbose, rich_tracebacks=True)],
        force=True,
    )
    return logging.getLogger(logger_name or "autotest_py")
