"""
Core infrastructure for PyCurveFit.

Key components:
    protocols: ModelEvaluator protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Buffer and parameter validators
    compute: Device context, timing, linear algebra primitives
"""

from pycurvefit.core.protocols import ModelEvaluator
from pycurvefit.core.result import Result
from pycurvefit.core.exceptions import (
    PyCurveFitError,
    ValidationError,
    DimensionError,
    NumericalError,
    LinAlgStatusError,
    ContextError,
)

__all__ = [
    # Protocols
    "ModelEvaluator",
    # Result
    "Result",
    # Exceptions
    "PyCurveFitError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "LinAlgStatusError",
    "ContextError",
]
