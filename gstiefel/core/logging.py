"""Logging configuration for gstiefel."""

import logging
import sys
from typing import Union
from .config import get_config

# Cache for loggers
_loggers = {}


def get_logger(name: str) -> logging.Logger:
    """Get a logger for gstiefel.

    Args:
        name: Logger name (will be prefixed with 'gstiefel.')

    Returns:
        Configured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("Projecting onto St(5, 2, B)")
    """
    full_name = f"gstiefel.{name}" if not name.startswith("gstiefel") else name

    if full_name in _loggers:
        return _loggers[full_name]

    logger = logging.getLogger(full_name)

    # Configure only if not already configured
    if not logger.handlers:
        config = get_config()

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(config.log_format))

        logger.addHandler(handler)
        logger.setLevel(config.log_level)
        logger.propagate = False

    _loggers[full_name] = logger
    return logger


def set_log_level(level: Union[int, str]) -> None:
    """Set the level of every gstiefel logger created so far.

    Args:
        level: Logging level, as accepted by ``logging.Logger.setLevel``
    """
    for logger in _loggers.values():
        logger.setLevel(level)
