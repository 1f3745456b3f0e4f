"""Numerical helpers shared by manifold implementations."""

from typing import Optional, Tuple
import torch
from torch import Tensor
from .core.config import get_config


def resolve_tolerances(
    dtype: torch.dtype,
    atol: Optional[float] = None,
    rtol: Optional[float] = None,
) -> Tuple[float, float]:
    """Fill in missing tolerances from the configuration.

    A missing rtol defaults to sqrt(eps) of dtype when atol is zero and to
    zero otherwise, so an explicit atol alone gives a purely absolute test.
    """
    config = get_config()
    if atol is None:
        atol = config.atol
    if rtol is None:
        rtol = config.rtol
    if rtol is None:
        real_dtype = torch.empty(0, dtype=dtype).real.dtype
        rtol = torch.finfo(real_dtype).eps ** 0.5 if atol == 0 else 0.0
    return atol, rtol


def isapprox(
    a: Tensor,
    b: Tensor,
    atol: Optional[float] = None,
    rtol: Optional[float] = None,
) -> bool:
    """Approximate equality in Frobenius norm.

    Holds when ||a - b|| <= max(atol, rtol * max(||a||, ||b||)).

    Args:
        a: First matrix
        b: Second matrix, same shape as a
        atol: Absolute tolerance (defaults from config)
        rtol: Relative tolerance (defaults from config)

    Returns:
        True if a and b are approximately equal
    """
    dtype = torch.promote_types(a.dtype, b.dtype)
    if not (dtype.is_floating_point or dtype.is_complex):
        dtype = torch.get_default_dtype()
    a = a.to(dtype)
    b = b.to(dtype)
    atol, rtol = resolve_tolerances(dtype, atol, rtol)
    diff = torch.linalg.norm(a - b).item()
    scale = max(torch.linalg.norm(a).item(), torch.linalg.norm(b).item())
    return diff <= max(atol, rtol * scale)


def sym(y: Tensor) -> Tensor:
    """Symmetric (Hermitian) part: (y + y^H) / 2."""
    return 0.5 * (y + y.mH)


def working_dtype(x: Tensor, B: Tensor) -> torch.dtype:
    """Floating dtype in which x and B are combined."""
    dtype = torch.promote_types(x.dtype, B.dtype)
    if not (dtype.is_floating_point or dtype.is_complex):
        dtype = B.dtype
    return dtype
