"""
Base class for model evaluators.

A Model satisfies the ModelEvaluator protocol: calling it with
(output, params, n) writes f(t; params) for t = 0..n-1 into output. The
call validates its arguments, then dispatches to a numba kernel on CUDA
buffers or to the tensor expression everywhere else.
"""

from typing import Callable, ClassVar

import numpy as np
from numpy.typing import ArrayLike, NDArray
import torch

from pycurvefit.core.validation import (
    check_buffer,
    check_dimension,
    check_min_length,
    check_parameters,
)


class Model:
    """
    Parametric model over the canonical domain t = 0, 1, ..., n-1.

    Subclasses set name, n_params, parameter_names and _expression.
    Instances hold no state, so one instance can be shared freely.
    """

    name: ClassVar[str] = ''
    n_params: ClassVar[int] = 0
    parameter_names: ClassVar[tuple[str, ...]] = ()
    _expression: ClassVar[Callable[..., torch.Tensor]]

    def __call__(
        self,
        output: torch.Tensor,
        params: NDArray[np.float32],
        n: int,
    ) -> None:
        """
        Evaluate the model into output[:n].

        Args:
            output: Device buffer with at least n elements
            params: float32 parameter vector with at least n_params entries
            n: Number of samples

        Raises:
            ValidationError: If output or params have the wrong type
            DimensionError: If output or params are too short
        """
        n = check_dimension(n, 'n')
        check_buffer(output, 'output')
        check_min_length(output, n, 'output')
        check_parameters(params, 'params', self.n_params)

        values = tuple(params[:self.n_params])
        if output.device.type == 'cuda':
            from pycurvefit.models.backends import cuda
            cuda.launch(self.name, output, values, n)
            return

        t = torch.arange(n, dtype=output.dtype, device=output.device)
        output[:n].copy_(type(self)._expression(t, *(float(v) for v in values)))

    def evaluate(
        self,
        params: ArrayLike,
        n: int,
        device: str | torch.device = 'cpu',
    ) -> torch.Tensor:
        """
        Evaluate into a freshly allocated buffer.

        Convenience wrapper for callers that don't manage buffers; params
        may be any array-like and is converted to float32.
        """
        n = check_dimension(n, 'n')
        values = np.array(params, dtype=np.float32).ravel()
        output = torch.zeros(n, dtype=torch.float32, device=device)
        self(output, values, n)
        return output

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(self.parameter_names)})"
