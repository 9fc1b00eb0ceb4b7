"""
Finite-difference Jacobian estimation.

Public API:
    estimate_jacobian(J, evaluator, params, n, k, ctx=None)
    estimate_jacobian_adaptive(J, evaluator, params, n, k, ctx=None)

Example:
    >>> import numpy as np, torch
    >>> from pycurvefit.models import LinearModel
    >>> from pycurvefit.jacobian import estimate_jacobian
    >>> params = np.array([2.0, 3.0], dtype=np.float32)
    >>> J = torch.zeros(5 * 2)
    >>> result = estimate_jacobian(J, LinearModel(), params, 5, 2)
    >>> result.params.as_matrix()
    tensor([[0., 1.],
            [1., 1.],
            [2., 1.],
            [3., 1.],
            [4., 1.]])
"""

from pycurvefit.jacobian.solution import JacobianParams
from pycurvefit.jacobian.solvers import estimate_jacobian, estimate_jacobian_adaptive

__all__ = [
    "estimate_jacobian",
    "estimate_jacobian_adaptive",
    "JacobianParams",
]
