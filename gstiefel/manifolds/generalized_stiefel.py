"""
Generalized Stiefel manifold.

The n×k matrices that are orthonormal with respect to a Hermitian positive
definite scalar product B:

    St(n, k, B) = {x ∈ 𝔽ⁿˣᵏ : xᴴ B x = I_k},    𝔽 ∈ {ℝ, ℂ, ℍ}

With B = I this is the usual Stiefel manifold.

Mathematical background:
- Tangent space at x: T_x St = {v ∈ 𝔽ⁿˣᵏ : xᴴ B v + vᴴ B x = 0}
- Metric induced by B from the embedding: ⟨v, w⟩_x = Re tr(vᴴ B w)
- Projection: with x = U Σ Vᴴ and Uᴴ B U = Q Λ Qᴴ,
  proj(x) = U Q Λ^{-1/2} Qᴴ Vᴴ
- Polar retraction: retr_x(v) = proj(x + v)
"""

from typing import Optional, Tuple, Union
import torch
from torch import Tensor

from ..core.config import get_config
from ..core.logging import get_logger
from ..errors import (
    ManifoldDomainError,
    FieldMismatchError,
    ShapeMismatchError,
    ConstraintViolationError,
)
from ..fields import Field, Real, Complex, Quaternion, as_field
from ..manifold import Manifold
from ..retractions import RetractionMethod, PolarRetraction, QRRetraction
from ..utils import isapprox, sym, working_dtype

logger = get_logger(__name__)


class GeneralizedStiefel(Manifold):
    """
    Generalized Stiefel manifold St(n, k, B) over ℝ, ℂ or ℍ.

    Points and tangent vectors are plain n×k tensors. The scalar product B is
    copied on construction and never modified afterwards, so a manifold can be
    shared freely between threads.

    Args:
        n: Number of rows (ambient dimension)
        k: Number of columns (subspace dimension), k <= n
        field: Scalar field, a Field or one of 'real', 'complex', 'quaternion'
        B: Hermitian positive definite n×n matrix, defaults to the identity

    Example:
        >>> B = torch.diag(torch.tensor([1.0, 2.0, 3.0, 4.0, 5.0], dtype=torch.float64))
        >>> M = GeneralizedStiefel(5, 2, B=B)
        >>> x = M.project(torch.randn(5, 2, dtype=torch.float64))
        >>> M.check_manifold_point(x) is None
        True
        >>> M.manifold_dimension()
        7
    """

    def __init__(
        self,
        n: int,
        k: int,
        field: Union[Field, str] = Real,
        B: Optional[Tensor] = None,
    ):
        if n < 1 or k < 1:
            raise ValueError(f"GeneralizedStiefel requires n >= 1 and k >= 1, got n={n}, k={k}")
        if k > n:
            raise ValueError(f"GeneralizedStiefel requires k <= n, got n={n}, k={k}")
        self.n = n
        self.k = k
        self.field = as_field(field)

        default_dtype = getattr(torch, get_config().default_dtype)
        if B is None:
            B = torch.eye(n, dtype=default_dtype)
        else:
            B = torch.as_tensor(B)
            if not (B.dtype.is_floating_point or B.dtype.is_complex):
                B = B.to(default_dtype)
        self._check_scalar_product(B)

        self._B = B.clone()
        # Cholesky factor B = L Lᴴ, used by the QR retraction
        self._L, _ = torch.linalg.cholesky_ex(self._B)

    def _check_scalar_product(self, B: Tensor) -> None:
        if tuple(B.shape) != (self.n, self.n):
            raise ValueError(
                f"B must be a {self.n}×{self.n} matrix, got shape {tuple(B.shape)}"
            )
        if self.field is Real and B.is_complex():
            raise ValueError("B must be real-valued for a real GeneralizedStiefel manifold")
        if not torch.allclose(B, B.mH):
            raise ValueError("B must be symmetric (Hermitian)")
        _, info = torch.linalg.cholesky_ex(B)
        if info.item() != 0:
            raise ValueError("B must be positive definite")

    @property
    def B(self) -> Tensor:
        """The scalar product matrix (a copy, the manifold's own is never exposed)."""
        return self._B.clone()

    def representation_size(self) -> Tuple[int, int]:
        """Matrix dimensions (n, k) of points and tangent vectors."""
        return (self.n, self.k)

    def manifold_dimension(self) -> int:
        """
        Real dimension of St(n, k, B).

            dim St(n, k, ℝ) = nk - k(k+1)/2
            dim St(n, k, ℂ) = 2nk - k²
            dim St(n, k, ℍ) = 4nk - k(2k-1)
        """
        n, k = self.n, self.k
        if self.field is Real:
            return n * k - k * (k + 1) // 2
        if self.field is Complex:
            return 2 * n * k - k * k
        return 4 * n * k - k * (2 * k - 1)

    # ==========================================================================
    # Validation
    # ==========================================================================

    def _promote(self, *tensors: Tensor) -> Tuple[Tensor, ...]:
        """Cast tensors and B to a common floating dtype on the first tensor's device."""
        dtype = self._B.dtype
        for t in tensors:
            dtype = working_dtype(t, torch.empty(0, dtype=dtype))
        device = tensors[0].device
        B = self._B.to(device=device, dtype=dtype)
        return tuple(t.to(device=device, dtype=dtype) for t in tensors) + (B,)

    def _reject(self, error: ManifoldDomainError) -> ManifoldDomainError:
        logger.debug(f"{self!r}: {error.kind} check failed ({error.value!r})")
        return error

    def _check_field_and_shape(self, x: Tensor, what: str) -> Optional[ManifoldDomainError]:
        if not self.field.accepts(x):
            return self._reject(FieldMismatchError(
                x.dtype,
                f"The {what} has element type {x.dtype}, which is not {self.field.name}-valued, "
                f"so it does not belong to {self!r}.",
                self,
            ))
        if tuple(x.shape) != self.representation_size():
            return self._reject(ShapeMismatchError(
                tuple(x.shape),
                f"The {what} has shape {tuple(x.shape)}, but {self!r} requires "
                f"{self.representation_size()}.",
                self,
            ))
        return None

    def check_manifold_point(
        self, x: Tensor, atol: Optional[float] = None, rtol: Optional[float] = None
    ) -> Optional[ManifoldDomainError]:
        """
        Check whether x is a point on St(n, k, B).

        Checks, in order and stopping at the first failure, that the element
        type of x fits the field, that x is n×k, and that xᴴ B x ≈ I_k.

        Args:
            x: Candidate point
            atol: Absolute tolerance for xᴴ B x ≈ I
            rtol: Relative tolerance for xᴴ B x ≈ I

        Returns:
            None if x is a valid point, otherwise a FieldMismatchError,
            ShapeMismatchError or ConstraintViolationError
        """
        x = torch.as_tensor(x)
        error = self._check_field_and_shape(x, "matrix")
        if error is not None:
            return error

        x, B = self._promote(x)
        c = x.mH @ B @ x
        identity = torch.eye(self.k, dtype=c.dtype, device=c.device)
        if not isapprox(c, identity, atol=atol, rtol=rtol):
            return self._reject(ConstraintViolationError(
                torch.linalg.norm(c - identity).item(),
                f"The matrix does not lie on {self!r}, because xᴴBx is not the identity.",
                self,
            ))
        return None

    def check_tangent_vector(
        self, x: Tensor, v: Tensor, atol: Optional[float] = None, rtol: Optional[float] = None
    ) -> Optional[ManifoldDomainError]:
        """
        Check whether v is a tangent vector at x.

        x is validated first with the same tolerances; then the element type
        and shape of v, and finally xᴴ B v + vᴴ B x ≈ 0.

        The last test compares xᴴ B v with -(vᴴ B x), so rtol is relative to
        ‖xᴴ B v‖: a large skew-Hermitian part of xᴴ B v loosens the bound on
        its Hermitian part. Pass atol for an absolute bound.

        Returns:
            None if v is a tangent vector at x, otherwise the first error found
        """
        error = self.check_manifold_point(x, atol=atol, rtol=rtol)
        if error is not None:
            return error

        v = torch.as_tensor(v)
        error = self._check_field_and_shape(v, "tangent vector")
        if error is not None:
            return error

        x, v, B = self._promote(torch.as_tensor(x), v)
        # xᴴBv ≈ -(vᴴBx), so rtol is relative to the size of xᴴBv
        c = x.mH @ B @ v
        if not isapprox(c, -c.mH, atol=atol, rtol=rtol):
            return self._reject(ConstraintViolationError(
                torch.linalg.norm(c + c.mH).item(),
                f"The matrix does not lie in the tangent space of {self!r} at the given point, "
                f"since xᴴBv + vᴴBx is not the zero matrix.",
                self,
            ))
        return None

    # ==========================================================================
    # Projections
    # ==========================================================================

    def project(self, x: Tensor) -> Tensor:
        """
        Project an n×k matrix onto St(n, k, B).

        With the thin SVD x = U Σ Vᴴ and the eigendecomposition
        Uᴴ B U = Q Λ Qᴴ, returns U Q Λ^{-1/2} Qᴴ Vᴴ, which re-orthonormalizes U
        with respect to B and keeps the right singular vectors.

        x should have full column rank. This is not checked: for a rank
        deficient x the singular vectors of the null directions are arbitrary,
        so the result is a point on the manifold but not a meaningful nearest one.

        Args:
            x: Matrix to project, shape (..., n, k)

        Returns:
            Point on the manifold, shape (..., n, k)
        """
        x, B = self._promote(torch.as_tensor(x))
        logger.debug(f"{self!r}: projecting matrix of shape {tuple(x.shape)}")

        U, _, Vh = torch.linalg.svd(x, full_matrices=False)
        eigenvalues, eigenvectors = torch.linalg.eigh(U.mH @ B @ U)
        invsqrt_eigenvalues = torch.diag_embed(1.0 / eigenvalues.sqrt()).to(eigenvectors.dtype)
        return U @ eigenvectors @ invsqrt_eigenvalues @ eigenvectors.mH @ Vh

    def project_tangent(self, x: Tensor, v: Tensor) -> Tensor:
        """
        Project an ambient matrix onto the tangent space at x.

            proj_x(v) = v - x Sym(xᴴ v),    Sym(y) = (y + yᴴ) / 2

        The symmetrization uses the plain product xᴴ v and not xᴴ B v, so for
        B ≠ I the result satisfies the B-weighted tangency condition only when
        B x = x.

        Args:
            x: Point on manifold
            v: Vector in ambient space

        Returns:
            Projected vector
        """
        x, v, _ = self._promote(torch.as_tensor(x), torch.as_tensor(v))
        return v - x @ sym(x.mH @ v)

    # ==========================================================================
    # Metric
    # ==========================================================================

    def inner(self, x: Tensor, v: Tensor, w: Tensor) -> Tensor:
        """
        Riemannian inner product: ⟨v, w⟩_x = Re tr(vᴴ B w)

        The metric is induced by B from the embedding and does not depend on x.

        Args:
            x: Base point (unused)
            v, w: Tangent vectors at x

        Returns:
            Inner product value(s)
        """
        v, w, B = self._promote(torch.as_tensor(v), torch.as_tensor(w))
        return torch.real(torch.sum(v.conj() * (B @ w), dim=(-2, -1)))

    # ==========================================================================
    # Retractions
    # ==========================================================================

    def retract(
        self, x: Tensor, v: Tensor, method: RetractionMethod = PolarRetraction()
    ) -> Tensor:
        """
        Retract tangent vector v at x onto the manifold.

        PolarRetraction projects x + v with ``project``. QRRetraction
        orthonormalizes x + v with respect to B: with B = L Lᴴ and
        Q R = Lᴴ (x + v) it returns L^{-H} Q D, where D = diag(sgn(R_ii)) and
        sgn(0) = 0.

        Args:
            x: Point on manifold
            v: Tangent vector at x
            method: PolarRetraction() (default) or QRRetraction()

        Returns:
            Point on manifold
        """
        x, v = torch.as_tensor(x), torch.as_tensor(v)
        if isinstance(method, PolarRetraction):
            return self.project(x + v)
        if isinstance(method, QRRetraction):
            return self._qr_retract(x + v)
        raise TypeError(f"Unsupported retraction for {self!r}: {method!r}")

    def _qr_retract(self, y: Tensor) -> Tensor:
        y, B = self._promote(y)
        L = self._L.to(device=B.device, dtype=B.dtype)

        Q, R = torch.linalg.qr(L.mH @ y, mode='reduced')
        signs = torch.sgn(torch.diagonal(R, dim1=-2, dim2=-1))
        if bool((signs == 0).any()):
            logger.warning(f"{self!r}: QR retraction of a rank deficient matrix, zero column produced")
        return torch.linalg.solve_triangular(L.mH, Q * signs.unsqueeze(-2), upper=True)

    # ==========================================================================
    # Random sampling
    # ==========================================================================

    def random_point(self, dtype=None, device=None) -> Tensor:
        """
        Generate a random point by projecting a Gaussian n×k matrix.

        Args:
            dtype: PyTorch dtype (complex manifolds default to a complex dtype)
            device: PyTorch device

        Returns:
            Random point on the manifold
        """
        if self.field is Quaternion:
            raise NotImplementedError("Quaternionic matrices have no tensor representation")
        if dtype is None:
            dtype = self._B.dtype
            if self.field is Complex and not dtype.is_complex:
                dtype = torch.complex128 if dtype == torch.float64 else torch.complex64
        x = torch.randn(self.n, self.k, dtype=dtype, device=device)
        return self.project(x)

    def __repr__(self) -> str:
        return f"GeneralizedStiefel({self.n}, {self.k}, {self.field!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, GeneralizedStiefel):
            return False
        return (
            (self.n, self.k) == (other.n, other.k)
            and self.field is other.field
            and self._B.shape == other._B.shape
            and self._B.dtype == other._B.dtype
            and torch.equal(self._B, other._B)
        )

    def __hash__(self) -> int:
        return hash((self.n, self.k, self.field.name))
