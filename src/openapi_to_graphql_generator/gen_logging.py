"""Logging configuration for the generator.

Modules obtain their logger with ``get_logger(__name__)``; every logger lives
under the ``openapi_to_graphql`` hierarchy so the CLI can tune them together.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

_LOGGER_NAME = "openapi_to_graphql"
_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a child logger under the generator hierarchy.

    Args:
        name (Optional[str]): Module ``__name__``, or None for the root logger.

    Returns:
        logging.Logger: Logger instance.
    """
    if name is None or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    short = name.rsplit(".", 1)[-1]
    return logging.getLogger(f"{_LOGGER_NAME}.{short}")


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Attach a stderr handler and set the level of the generator loggers.

    Args:
        verbose (bool): Emit DEBUG records.
        quiet (bool): Emit WARNING and above only.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root_logger = logging.getLogger(_LOGGER_NAME)
    root_logger.setLevel(level)
    if root_logger.handlers:
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root_logger.addHandler(handler)
