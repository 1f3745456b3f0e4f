"""Pytest configuration and fixtures."""

import pytest
import torch
from gstiefel import GeneralizedStiefel, Complex, reset_config


N, K = 5, 2


def weighted_scalar_product(n: int) -> torch.Tensor:
    """Diagonally dominant symmetric positive definite n×n matrix."""
    off_diagonal = torch.ones(n, n, dtype=torch.float64) - torch.eye(n, dtype=torch.float64)
    return torch.diag(torch.arange(1.0, n + 1, dtype=torch.float64)) + 0.1 * off_diagonal


def hermitian_scalar_product(n: int) -> torch.Tensor:
    """Diagonally dominant Hermitian positive definite n×n matrix."""
    upper = 0.1j * torch.triu(torch.ones(n, n, dtype=torch.complex128), diagonal=1)
    diagonal = torch.diag(torch.arange(1.0, n + 1, dtype=torch.float64)).to(torch.complex128)
    return diagonal + upper + upper.mH


@pytest.fixture
def stiefel():
    """Fixture for the Stiefel case B = I."""
    return GeneralizedStiefel(N, K)


@pytest.fixture
def weighted():
    """Fixture for a real manifold with a non-trivial scalar product."""
    return GeneralizedStiefel(N, K, B=weighted_scalar_product(N))


@pytest.fixture(params=['identity', 'weighted', 'complex', 'complex_weighted'])
def manifold(request):
    """Fixture that parametrizes over scalar products and fields."""
    if request.param == 'identity':
        return GeneralizedStiefel(N, K)
    elif request.param == 'weighted':
        return GeneralizedStiefel(N, K, B=weighted_scalar_product(N))
    elif request.param == 'complex':
        return GeneralizedStiefel(N, K, Complex)
    elif request.param == 'complex_weighted':
        return GeneralizedStiefel(N, K, Complex, B=hermitian_scalar_product(N))


@pytest.fixture(autouse=True)
def random_seed():
    """Set random seed for reproducibility."""
    torch.manual_seed(42)
    return 42


@pytest.fixture(autouse=True)
def clean_config():
    """Restore the default configuration after each test."""
    yield
    reset_config()
