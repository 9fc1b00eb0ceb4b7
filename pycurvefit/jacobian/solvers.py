"""
Finite-difference Jacobian estimators.

    estimate_jacobian           fixed absolute step 2^-17 for every parameter
    estimate_jacobian_adaptive  relative step 2^-10 * |param|, floored at 1e-30

Both fill the caller's n x k column-major buffer J with

    J[:, i] = (f(params + h_i e_i) - f(params)) / h_i

using k + 1 model evaluations, and leave params bit-identical to its value
at entry. Neither sanitizes non-finite model output: NaN/Inf propagate into
J and are reported in Result.warnings and as a RuntimeWarning.
"""

import numpy as np
from numpy.typing import NDArray
import torch

from pycurvefit.core.compute.context import ComputeContext
from pycurvefit.core.compute.precision import (
    FIXED_STEP,
    MIN_STEP,
    RELATIVE_STEP,
    adaptive_reciprocal,
    adaptive_step,
    reciprocal,
)
from pycurvefit.core.protocols import ModelEvaluator
from pycurvefit.core.result import Result
from pycurvefit.jacobian._common import estimate
from pycurvefit.jacobian.solution import JacobianParams


def estimate_jacobian(
    J: torch.Tensor,
    evaluator: ModelEvaluator,
    params: NDArray[np.float32],
    n: int,
    k: int,
    ctx: ComputeContext | None = None,
) -> Result[JacobianParams]:
    """
    Estimate the Jacobian with one fixed absolute step.

    Every parameter is moved by the same step 2^-17. Columns hold raw
    differences until all k are formed, then the whole buffer is scaled by
    2^17 in one pass. Accurate when parameters are O(1); a parameter much
    larger than 1 may not move at all in float32, and one much smaller
    than the step is evaluated far outside its natural scale.

    Args:
        J: Output buffer with exactly n*k float32 elements (column-major n x k)
        evaluator: Callable (output, params, n) -> None
        params: float32 parameter vector, at least k entries; perturbed in
                place during the call and restored exactly
        n: Number of samples
        k: Number of parameters to differentiate (the first k of params)
        ctx: Compute context; a per-call context is used if None

    Returns:
        Result[JacobianParams] with steps, scales and timing. The device
        work is complete when this returns.

    Raises:
        ValidationError: If params is not a writeable float32 ndarray or
                         evaluator is not callable
        DimensionError: If J does not hold n*k elements or params is short
    """
    factor = reciprocal(FIXED_STEP)

    def step_rule(value: np.float32) -> tuple[float, float, bool]:
        return FIXED_STEP, factor, False

    return estimate(
        J, evaluator, params, n, k, ctx,
        method='fixed',
        step_rule=step_rule,
        global_scale=factor,
    )


def estimate_jacobian_adaptive(
    J: torch.Tensor,
    evaluator: ModelEvaluator,
    params: NDArray[np.float32],
    n: int,
    k: int,
    ctx: ComputeContext | None = None,
) -> Result[JacobianParams]:
    """
    Estimate the Jacobian with steps proportional to each parameter.

    Parameter i is moved by h_i = 2^-10 * params[i], so the relative
    truncation error is similar for parameters of very different scale.
    When |h_i| < 1e-30 (a parameter at or near zero) the step is clamped
    to +1e-30. Each column is scaled by 1/(params[i] * 2^-10), formed in
    extended precision, as soon as it is differenced.

    Args and Raises are as for estimate_jacobian.

    Returns:
        Result[JacobianParams]; params.clamped marks columns whose step hit
        the floor.
    """

    def step_rule(value: np.float32) -> tuple[float, float, bool]:
        step, clamped = adaptive_step(value, RELATIVE_STEP, MIN_STEP)
        return step, adaptive_reciprocal(value, RELATIVE_STEP, step, clamped), clamped

    return estimate(
        J, evaluator, params, n, k, ctx,
        method='adaptive',
        step_rule=step_rule,
        global_scale=None,
    )
