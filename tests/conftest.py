"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pycurvefit.core.compute.context import ComputeContext


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def ctx():
    """Open CPU compute context, closed after the test."""
    context = ComputeContext('cpu')
    yield context
    context.close()


@pytest.fixture
def linear_params():
    """Affine model parameters a=2, b=3."""
    return np.array([2.0, 3.0], dtype=np.float32)


@pytest.fixture
def exponential_params():
    """Exponential decay a=5, k=0.3, b=1."""
    return np.array([5.0, 0.3, 1.0], dtype=np.float32)


@pytest.fixture
def double_exponential_params():
    """Fast and slow decay components with an offset."""
    return np.array([4.0, 0.8, 2.0, 0.05, 0.5], dtype=np.float32)
