"""
Core protocols for PyCurveFit.

These define structural interfaces that pluggable components must satisfy.
We use Protocol (structural typing) rather than ABC (nominal typing) so any
callable object with the right shape can be handed to the Jacobian
estimators, not only subclasses of pycurvefit.models.Model.

Design Principles:
    - Minimal contracts: prescribe only what the estimators actually call
    - No hidden state: evaluators read only the parameters and sample count
"""

from typing import Protocol, runtime_checkable, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    import torch


@runtime_checkable
class ModelEvaluator(Protocol):
    """
    Protocol for model functions evaluated over the canonical domain.
    
    An evaluator writes f(t; params) for t = 0, 1, ..., n-1 into the first
    n elements of a device buffer. It must be deterministic, safe to call
    any number of times, and have no observable effect other than writing
    the output buffer.
    
    The Jacobian estimators mutate params between calls (one coordinate
    at a time), so implementations must read params on every call rather
    than caching values derived from it.
    """
    
    @property
    def n_params(self) -> int:
        """Number of parameters the model reads (K)."""
        ...
    
    def __call__(
        self,
        output: 'torch.Tensor',
        params: NDArray[np.float32],
        n: int,
    ) -> None:
        """
        Evaluate the model into output.
        
        Args:
            output: Device buffer with at least n elements
            params: Host-resident parameter vector (length >= n_params)
            n: Number of samples
        """
        ...
