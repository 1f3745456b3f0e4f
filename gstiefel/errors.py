"""Domain errors reported by manifold validation.

Validation functions return these errors instead of raising them, so callers
can choose between strict handling (raise whatever is returned) and lenient
handling (test whether anything was returned). Each error carries the
offending ``value`` and a human-readable message.
"""

from typing import Any, Optional


class ManifoldDomainError(Exception):
    """Base class for points or vectors outside a manifold's domain.

    Attributes:
        value: Diagnostic payload (a dtype, a shape, or a violation norm)
        message: Human-readable description
        manifold: The manifold that performed the check
    """

    kind = 'domain'

    def __init__(self, value: Any, message: str, manifold: Optional[Any] = None):
        super().__init__(message)
        self.value = value
        self.message = message
        self.manifold = manifold

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.value!r}, {self.message!r})"


class FieldMismatchError(ManifoldDomainError):
    """The scalar type of a matrix does not fit the manifold's field.

    ``value`` is the offending dtype.
    """

    kind = 'field'


class ShapeMismatchError(ManifoldDomainError):
    """The matrix does not have the manifold's representation size.

    ``value`` is the offending shape as a tuple.
    """

    kind = 'shape'


class ConstraintViolationError(ManifoldDomainError):
    """An algebraic constraint of the manifold does not hold.

    ``value`` is the Frobenius norm of the violation, e.g. ``||x^H B x - I||``
    for points.
    """

    kind = 'constraint'


__all__ = [
    'ManifoldDomainError',
    'FieldMismatchError',
    'ShapeMismatchError',
    'ConstraintViolationError',
]
