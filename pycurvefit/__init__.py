"""
PyCurveFit: GPU-resident building blocks for nonlinear curve fitting.

Estimates model Jacobians by finite differences evaluated on-device and
provides the column-major matrix primitives and SVD a Gauss-Newton or
Levenberg-Marquardt solver needs to turn them into parameter updates.

Submodules:
    models: Model evaluators (linear, exponential, double exponential)
    jacobian: Fixed- and adaptive-step Jacobian estimators
    core.compute.linalg: Vector, matrix and SVD primitives
"""

__version__ = "0.1.0"

from pycurvefit.core.compute.context import ComputeContext
from pycurvefit.core.compute.linalg import (
    add,
    subtract,
    scale,
    copy,
    matmul,
    diagmul,
    transpose,
    solve_svd,
    SVDResult,
    as_matrix,
    from_matrix,
)
from pycurvefit.jacobian import (
    estimate_jacobian,
    estimate_jacobian_adaptive,
    JacobianParams,
)
from pycurvefit import models

__all__ = [
    "__version__",
    "ComputeContext",
    # Vector primitives
    "add",
    "subtract",
    "scale",
    "copy",
    # Matrix primitives
    "matmul",
    "diagmul",
    "transpose",
    "solve_svd",
    "SVDResult",
    "as_matrix",
    "from_matrix",
    # Jacobian
    "estimate_jacobian",
    "estimate_jacobian_adaptive",
    "JacobianParams",
    "models",
]
