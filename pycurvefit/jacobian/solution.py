"""
Jacobian estimation payload.

Carried inside a Result[JacobianParams] envelope.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
import torch


@dataclass(frozen=True)
class JacobianParams:
    """Finite-difference Jacobian and the steps that produced it."""

    jacobian: torch.Tensor       # (n*k,) the caller's J buffer, column-major n x k
    steps: NDArray[np.float64]   # (k,) absolute perturbation applied per column
    scales: NDArray[np.float64]  # (k,) reciprocal step applied per column
    clamped: NDArray[np.bool_]   # (k,) True where the step hit MIN_STEP
    n_samples: int               # n
    n_params: int                # k
    n_evaluations: int           # model calls, always k + 1

    def as_matrix(self) -> torch.Tensor:
        """(n, k) view of the Jacobian buffer."""
        return self.jacobian.view(self.n_params, self.n_samples).t()
