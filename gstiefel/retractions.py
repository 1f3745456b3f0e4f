"""Retraction methods.

A retraction maps a tangent vector v at x to a nearby point on the manifold
and agrees with the exponential map to first order. Methods are passed as
instances to ``Manifold.retract``.
"""


class RetractionMethod:
    """Base class for retraction method markers."""

    def __eq__(self, other) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class PolarRetraction(RetractionMethod):
    """Retraction by projecting x + v back onto the manifold (SVD based)."""


class QRRetraction(RetractionMethod):
    """Retraction by orthonormalizing x + v with a QR decomposition."""


__all__ = ['RetractionMethod', 'PolarRetraction', 'QRRetraction']
