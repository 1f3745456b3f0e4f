"""gstiefel: Generalized Stiefel manifold primitives on PyTorch."""

from .manifold import Manifold
from .manifolds import GeneralizedStiefel
from .fields import Field, Real, Complex, Quaternion
from .retractions import RetractionMethod, PolarRetraction, QRRetraction
from .errors import (
    ManifoldDomainError,
    FieldMismatchError,
    ShapeMismatchError,
    ConstraintViolationError,
)

# Configuration and logging
from . import core
from .core import get_config, set_config, reset_config, config_context, get_logger

__version__ = "0.1.0"

__all__ = [
    # Core
    'Manifold',
    'GeneralizedStiefel',
    # Fields
    'Field',
    'Real',
    'Complex',
    'Quaternion',
    # Retractions
    'RetractionMethod',
    'PolarRetraction',
    'QRRetraction',
    # Errors
    'ManifoldDomainError',
    'FieldMismatchError',
    'ShapeMismatchError',
    'ConstraintViolationError',
    # Configuration
    'core',
    'get_config',
    'set_config',
    'reset_config',
    'config_context',
    'get_logger',
]
