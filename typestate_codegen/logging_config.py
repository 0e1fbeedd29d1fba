"""Logging helpers shared by all modules.

Modules obtain their logger with ``get_logger(__name__)``. The library only
installs a ``NullHandler``; drivers call ``configure_logging`` to get output.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "typestate_codegen"
DEFAULT_FORMAT = "%(name)s: %(message)s"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module."""
    return logging.getLogger(name)


def configure_logging(
    level: int = logging.WARNING,
    fmt: str = DEFAULT_FORMAT,
    console: Optional[Console] = None,
) -> None:
    """Send package logs to a rich console (stderr unless given).

    Calling this more than once replaces the handler instead of stacking them.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=console or Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    logger.setLevel(level)
