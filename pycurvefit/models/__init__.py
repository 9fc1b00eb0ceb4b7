"""
Model evaluators.

Every model is callable as model(output, params, n) and satisfies the
pycurvefit.core.protocols.ModelEvaluator protocol, which is all the
Jacobian estimators depend on.

Example:
    >>> import numpy as np
    >>> from pycurvefit.models import LinearModel
    >>> LinearModel().evaluate(np.array([2, 3]), 5)
    tensor([ 3.,  5.,  7.,  9., 11.])
"""

from pycurvefit.models.base import Model
from pycurvefit.models.functions import (
    LinearModel,
    ExponentialModel,
    DoubleExponentialModel,
    DesignMatrixBuilder,
    MODELS,
    get_model,
)

__all__ = [
    "Model",
    "LinearModel",
    "ExponentialModel",
    "DoubleExponentialModel",
    "DesignMatrixBuilder",
    "MODELS",
    "get_model",
]
