"""Manifold implementations."""

from .generalized_stiefel import GeneralizedStiefel

__all__ = [
    'GeneralizedStiefel',
]
