"""Base manifold class for gstiefel."""

from abc import ABC, abstractmethod
from typing import Optional, Tuple
import torch
from torch import Tensor

from .errors import ManifoldDomainError
from .retractions import RetractionMethod, PolarRetraction
from .utils import isapprox


class Manifold(ABC):
    """Abstract base class for matrix manifolds embedded in a vector space.

    This class defines the contract every manifold implementation follows:
    size and dimension queries, validation of points and tangent vectors,
    projections, the Riemannian metric and retractions. Operations that
    produce a matrix come in pairs, a pure form returning a new tensor and a
    mutating form (trailing underscore) writing into a caller-supplied buffer.
    """

    @abstractmethod
    def representation_size(self) -> Tuple[int, ...]:
        """Shape of the tensors representing points and tangent vectors."""
        pass

    @abstractmethod
    def manifold_dimension(self) -> int:
        """Real dimension of the manifold (number of degrees of freedom)."""
        pass

    @property
    def dim(self) -> int:
        """Intrinsic dimension of the manifold."""
        return self.manifold_dimension()

    @abstractmethod
    def check_manifold_point(
        self, x: Tensor, atol: Optional[float] = None, rtol: Optional[float] = None
    ) -> Optional[ManifoldDomainError]:
        """Check whether x is a point on the manifold.

        Args:
            x: Candidate point
            atol: Absolute tolerance for the constraint check
            rtol: Relative tolerance for the constraint check

        Returns:
            None if x is a valid point, otherwise the error describing why not
        """
        pass

    @abstractmethod
    def check_tangent_vector(
        self, x: Tensor, v: Tensor, atol: Optional[float] = None, rtol: Optional[float] = None
    ) -> Optional[ManifoldDomainError]:
        """Check whether v is a tangent vector at the point x.

        Args:
            x: Base point
            v: Candidate tangent vector
            atol: Absolute tolerance for the constraint checks
            rtol: Relative tolerance for the constraint checks

        Returns:
            None if v is valid at x, otherwise the error describing why not
        """
        pass

    @abstractmethod
    def project(self, x: Tensor) -> Tensor:
        """Project ambient space point onto manifold.

        Args:
            x: Point in ambient space

        Returns:
            Closest point on manifold
        """
        pass

    @abstractmethod
    def project_tangent(self, x: Tensor, v: Tensor) -> Tensor:
        """Project ambient vector onto tangent space at x.

        Args:
            x: Point on manifold
            v: Vector in ambient space

        Returns:
            Component of v in T_xM
        """
        pass

    @abstractmethod
    def inner(self, x: Tensor, v: Tensor, w: Tensor) -> Tensor:
        """Riemannian inner product g_x(v, w) of tangent vectors at x."""
        pass

    @abstractmethod
    def retract(self, x: Tensor, v: Tensor, method: RetractionMethod = PolarRetraction()) -> Tensor:
        """Retract tangent vector v at x to a point on the manifold.

        Args:
            x: Point on manifold
            v: Tangent vector at x
            method: Retraction method to use

        Returns:
            Point on manifold
        """
        pass

    def is_manifold_point(
        self,
        x: Tensor,
        throw_error: bool = False,
        atol: Optional[float] = None,
        rtol: Optional[float] = None,
    ) -> bool:
        """Predicate form of ``check_manifold_point``.

        Args:
            x: Candidate point
            throw_error: Raise the validation error instead of returning False

        Returns:
            True if x is a point on the manifold
        """
        error = self.check_manifold_point(x, atol=atol, rtol=rtol)
        if error is not None and throw_error:
            raise error
        return error is None

    def is_tangent_vector(
        self,
        x: Tensor,
        v: Tensor,
        throw_error: bool = False,
        atol: Optional[float] = None,
        rtol: Optional[float] = None,
    ) -> bool:
        """Predicate form of ``check_tangent_vector``."""
        error = self.check_tangent_vector(x, v, atol=atol, rtol=rtol)
        if error is not None and throw_error:
            raise error
        return error is None

    def project_(self, out: Tensor, x: Tensor) -> Tensor:
        """Project x onto the manifold, writing the result into out."""
        return out.copy_(self.project(x))

    def project_tangent_(self, out: Tensor, x: Tensor, v: Tensor) -> Tensor:
        """Project v onto the tangent space at x, writing the result into out."""
        return out.copy_(self.project_tangent(x, v))

    def retract_(
        self, out: Tensor, x: Tensor, v: Tensor, method: RetractionMethod = PolarRetraction()
    ) -> Tensor:
        """Retract v at x, writing the resulting point into out."""
        return out.copy_(self.retract(x, v, method))

    def norm(self, x: Tensor, v: Tensor) -> Tensor:
        """Riemannian norm of tangent vector v at point x.

        Computes ||v||_x = sqrt(g_x(v, v)).
        """
        return self.inner(x, v, v).clamp(min=0).sqrt()

    def isapprox(
        self, x: Tensor, y: Tensor, atol: Optional[float] = None, rtol: Optional[float] = None
    ) -> bool:
        """Whether two points (or two tangent vectors) are approximately equal."""
        return isapprox(torch.as_tensor(x), torch.as_tensor(y), atol=atol, rtol=rtol)

    def zero_tangent_vector(self, x: Tensor) -> Tensor:
        """Zero vector of the tangent space at x."""
        return torch.zeros_like(torch.as_tensor(x))

    def random_point(self, dtype=None, device=None) -> Tensor:
        """Generate a random point on the manifold.

        Args:
            dtype: PyTorch dtype
            device: PyTorch device

        Returns:
            Random point on the manifold
        """
        raise NotImplementedError(f"{self.__class__.__name__} does not implement random_point")

    def random_tangent(self, x: Tensor) -> Tensor:
        """Generate random tangent vector at x.

        Args:
            x: Base point on manifold

        Returns:
            Random tangent vector at x
        """
        v = torch.randn_like(x)
        return self.project_tangent(x, v)
