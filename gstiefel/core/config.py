"""Configuration management for gstiefel."""

from dataclasses import dataclass
from typing import Optional, Dict, Any
import os
import threading


@dataclass
class GStiefelConfig:
    """Global configuration for gstiefel.

    Settings can be modified at runtime and affect every manifold that does not
    receive explicit tolerances.

    Attributes:
        atol: Default absolute tolerance for approximate equality
        rtol: Default relative tolerance (None means sqrt(eps) of the compared
            dtype when atol is zero, and zero otherwise)
        default_dtype: Data type for the default scalar product and random
            points ('float32' or 'float64')
        log_level: Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        log_format: Format string for log messages
    """

    # Numerical settings
    atol: float = 0.0
    rtol: Optional[float] = None
    default_dtype: str = "float64"

    # Logging settings
    log_level: str = "WARNING"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def from_env(cls) -> 'GStiefelConfig':
        """Create configuration from environment variables.

        Environment variables:
            GSTIEFEL_ATOL: Default absolute tolerance
            GSTIEFEL_RTOL: Default relative tolerance
            GSTIEFEL_DTYPE: Default data type
            GSTIEFEL_LOG_LEVEL: Logging level
        """
        def parse_float(value: str) -> Optional[float]:
            return float(value) if value else None

        return cls(
            atol=parse_float(os.getenv('GSTIEFEL_ATOL', '')) or 0.0,
            rtol=parse_float(os.getenv('GSTIEFEL_RTOL', '')),
            default_dtype=os.getenv('GSTIEFEL_DTYPE', 'float64'),
            log_level=os.getenv('GSTIEFEL_LOG_LEVEL', 'WARNING'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            k: v for k, v in self.__dict__.items()
            if not k.startswith('_')
        }

    def update(self, **kwargs) -> None:
        """Update configuration with keyword arguments."""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                raise ValueError(f"Unknown configuration option: {key}")


# Thread-local storage for context managers
_config_stack = threading.local()

# Global configuration instance
_global_config = GStiefelConfig.from_env()


def get_config() -> GStiefelConfig:
    """Get the current configuration.

    Returns the context-local configuration if in a context manager,
    otherwise returns the global configuration.
    """
    stack = getattr(_config_stack, 'stack', None)
    if stack:
        return stack[-1]
    return _global_config


def set_config(**kwargs) -> None:
    """Update global configuration.

    Args:
        **kwargs: Configuration options to update

    Example:
        >>> set_config(atol=1e-10, log_level='DEBUG')
    """
    _global_config.update(**kwargs)
    if 'log_level' in kwargs:
        _apply_log_level(_global_config.log_level)


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _global_config
    _global_config = GStiefelConfig()
    _apply_log_level(_global_config.log_level)


def _apply_log_level(level: str) -> None:
    # logging imports this module, so the import is deferred
    from .logging import set_log_level
    set_log_level(level)


class config_context:
    """Context manager for temporary configuration changes.

    Example:
        >>> with config_context(atol=1e-8):
        ...     M.is_manifold_point(x)
        >>> # Original configuration restored
    """

    def __init__(self, **kwargs):
        self.kwargs = kwargs

    def __enter__(self):
        if not hasattr(_config_stack, 'stack'):
            _config_stack.stack = []

        current = get_config()
        new_config = GStiefelConfig(**current.to_dict())
        new_config.update(**self.kwargs)

        _config_stack.stack.append(new_config)
        return new_config

    def __exit__(self, exc_type, exc_val, exc_tb):
        _config_stack.stack.pop()
