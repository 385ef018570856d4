"""Logging setup shared by every table_mapper module.

Modules obtain their logger with ``get_logger(__name__)``; the CLI calls
``configure_logging`` once to attach a rich handler to the package logger.
"""

import logging

from rich.logging import RichHandler

PACKAGE_LOGGER = "table_mapper"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the package logger."""
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_logging(level: int | str = logging.WARNING) -> None:
    """Install a rich console handler on the package logger.

    Safe to call more than once; later calls only change the level.

    Args:
        level: Logging level name or number.
    """
    global _configured

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if _configured:
        return

    handler = RichHandler(show_time=False, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    _configured = True
