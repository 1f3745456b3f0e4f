"""Ambient configuration and logging for gstiefel."""

from .config import GStiefelConfig, get_config, set_config, reset_config, config_context
from .logging import get_logger, set_log_level

__all__ = [
    'GStiefelConfig',
    'get_config',
    'set_config',
    'reset_config',
    'config_context',
    'get_logger',
    'set_log_level',
]
