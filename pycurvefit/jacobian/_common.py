"""
Shared finite-difference machinery for the Jacobian estimators.

Both estimators follow the same evaluation pattern: one baseline
evaluation, then for each parameter i a perturbed evaluation with only
params[i] moved, the difference written to column i of J and scaled by the
reciprocal step. They differ only in how the step is chosen and whether
the scaling happens per column or once over the whole buffer.
"""

from typing import Callable
import warnings

import numpy as np
from numpy.typing import NDArray
import torch

from pycurvefit.core.compute.context import ComputeContext, context_for
from pycurvefit.core.compute.linalg.vector import scale, subtract
from pycurvefit.core.compute.precision import perturb
from pycurvefit.core.compute.timing import Timer
from pycurvefit.core.exceptions import ValidationError
from pycurvefit.core.protocols import ModelEvaluator
from pycurvefit.core.result import Result
from pycurvefit.core.validation import check_buffer, check_dimension, check_parameters
from pycurvefit.jacobian.solution import JacobianParams

# value -> (absolute step, reciprocal scale, clamped)
StepRule = Callable[[np.float32], tuple[float, float, bool]]

# Relative mismatch between requested and applied step that gets reported
STEP_ROUNDING_TOLERANCE = 0.05


def validate_inputs(
    J: torch.Tensor,
    evaluator: ModelEvaluator,
    params: NDArray[np.float32],
    n: int,
    k: int,
) -> tuple[int, int]:
    """Check estimator arguments; returns (n, k) as ints."""
    n = check_dimension(n, 'n')
    k = check_dimension(k, 'k', allow_zero=True)
    check_buffer(J, 'J', expected=n * k)
    check_parameters(params, 'params', k)
    if not callable(evaluator):
        raise ValidationError(
            f"evaluator: expected a callable (output, params, n), "
            f"got {type(evaluator).__name__}"
        )
    return n, k


def _step_rounding_warning(
    i: int,
    original: np.float32,
    moved: np.float32,
    step: float,
) -> str | None:
    """
    Describe a perturbation that float32 rounding distorted, if any.

    Column i is always scaled by 1/step, so a step that rounds to zero
    leaves a zero column and one that rounds to a different size scales
    the column by applied/step.
    """
    applied = float(moved) - float(original)
    if applied == 0.0:
        return (
            f"params[{i}]={float(original):.6g}: step {step:.3g} is below "
            f"float32 resolution, column {i} is zero"
        )
    ratio = applied / step
    if abs(ratio - 1.0) > STEP_ROUNDING_TOLERANCE:
        return (
            f"params[{i}]={float(original):.6g}: step {step:.3g} was applied as "
            f"{applied:.3g} after float32 rounding, column {i} is off by a "
            f"factor of {ratio:.3g}"
        )
    return None


def _non_finite_warnings(J: torch.Tensor, n: int, k: int) -> list[str]:
    if k == 0:
        return []
    counts = (~torch.isfinite(J.view(k, n))).sum(dim=1).cpu().numpy()
    return [
        f"Jacobian column {i} contains {int(c)} non-finite values; "
        f"the model produced NaN/Inf near params[{i}]"
        for i, c in enumerate(counts) if c > 0
    ]


def estimate(
    J: torch.Tensor,
    evaluator: ModelEvaluator,
    params: NDArray[np.float32],
    n: int,
    k: int,
    ctx: ComputeContext | None,
    *,
    method: str,
    step_rule: StepRule,
    global_scale: float | None,
) -> Result[JacobianParams]:
    """
    Fill J column by column and package the diagnostics.

    Args:
        J: n*k output buffer
        evaluator: Model evaluator
        params: float32 parameter vector, perturbed in place and restored
        n, k: Samples and parameters
        ctx: Compute context; a per-call context is used if None
        method: Label recorded in info and backend_name
        step_rule: Chooses the step and scale for each parameter
        global_scale: If given, J is scaled by this once after all columns
                      are filled; otherwise each column is scaled by its
                      own factor as soon as it is formed.
    """
    n, k = validate_inputs(J, evaluator, params, n, k)

    steps = np.zeros(k, dtype=np.float64)
    scales = np.zeros(k, dtype=np.float64)
    clamped = np.zeros(k, dtype=bool)
    warnings_list: list[str] = []

    with context_for(ctx, J, 'J') as active:
        timer = Timer(device=active.device)
        timer.start()

        with active.scratch(n, n) as (baseline, perturbed):
            with timer.section('baseline'):
                evaluator(baseline, params, n)

            with timer.section('perturbation'):
                for i in range(k):
                    column = J[i * n:(i + 1) * n]
                    original = params[i]
                    step, factor, was_clamped = step_rule(original)
                    moved = perturb(original, step)
                    message = _step_rounding_warning(i, original, moved, step)
                    if message is not None:
                        warnings_list.append(message)

                    params[i] = moved
                    try:
                        evaluator(perturbed, params, n)
                    finally:
                        params[i] = original

                    subtract(perturbed, baseline, column, ctx=active)
                    if global_scale is None:
                        scale(column, factor, column, ctx=active)

                    steps[i] = step
                    scales[i] = factor
                    clamped[i] = was_clamped

            if global_scale is not None:
                scale(J, global_scale, J, ctx=active)

        active.synchronize()
        timer.stop()

    non_finite = _non_finite_warnings(J, n, k)
    for message in non_finite:
        warnings.warn(message, RuntimeWarning, stacklevel=3)
    warnings_list.extend(non_finite)

    params_payload = JacobianParams(
        jacobian=J,
        steps=steps,
        scales=scales,
        clamped=clamped,
        n_samples=n,
        n_params=k,
        n_evaluations=k + 1,
    )
    return Result(
        params=params_payload,
        info={
            'method': method,
            'device': str(active.device),
        },
        timing=timer.result(),
        backend_name=f'{active.name}_{method}',
        warnings=tuple(warnings_list),
    )
