"""Scalar fields a matrix manifold can be defined over."""

from typing import Union
import torch
from torch import Tensor


class Field:
    """A real division algebra: ℝ, ℂ or ℍ.

    Args:
        name: Lower-case name of the field
        symbol: Short symbol used in reprs
        real_dimension: Dimension of the field as a real vector space
    """

    def __init__(self, name: str, symbol: str, real_dimension: int):
        self.name = name
        self.symbol = symbol
        self.real_dimension = real_dimension

    def accepts(self, x: Tensor) -> bool:
        """Whether the element type of x can represent values in this field."""
        if self.name == 'real':
            return not x.is_complex() and x.dtype != torch.bool
        if self.name == 'complex':
            return x.dtype != torch.bool
        # torch has no quaternion dtype, element types are not restricted
        return True

    def __repr__(self) -> str:
        return self.symbol


Real = Field('real', 'ℝ', 1)
Complex = Field('complex', 'ℂ', 2)
Quaternion = Field('quaternion', 'ℍ', 4)

_ALIASES = {
    'real': Real, 'r': Real, 'ℝ': Real,
    'complex': Complex, 'c': Complex, 'ℂ': Complex,
    'quaternion': Quaternion, 'h': Quaternion, 'ℍ': Quaternion,
}


def as_field(field: Union[Field, str]) -> Field:
    """Resolve a field given as a Field instance or by name/symbol."""
    if isinstance(field, Field):
        return field
    if isinstance(field, str) and field.lower() in _ALIASES:
        return _ALIASES[field.lower()]
    raise ValueError(f"Field must be real, complex or quaternion, got {field!r}")


__all__ = ['Field', 'Real', 'Complex', 'Quaternion', 'as_field']
