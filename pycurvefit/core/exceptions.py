"""
Exception hierarchy for PyCurveFit.

All exceptions inherit from PyCurveFitError to allow catching any
library-specific error.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Library status failures are fatal: never retried, never swallowed
"""


class PyCurveFitError(Exception):
    """Base exception for all PyCurveFit errors."""
    pass


class ValidationError(PyCurveFitError):
    """
    Input validation failed.
    
    Raised when caller-provided buffers, parameter vectors or sizes fail
    validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Buffer sizes are incorrect or inconsistent.
    
    Raised when a device buffer does not hold exactly the number of
    elements implied by the matrix dimensions passed alongside it.
    """
    pass


class NumericalError(PyCurveFitError):
    """
    Numerical computation failed.
    
    Base class for errors arising from numerical issues during computation.
    """
    pass


class LinAlgStatusError(NumericalError):
    """
    The underlying linear algebra library reported a non-success status.
    
    Indicates a programming error (dimension or handle mismatch) or an
    unrecoverable resource failure. The call that raised it has already
    released any scratch space it acquired.
    
    Attributes:
        operation: Name of the primitive that failed (e.g. 'matmul', 'gesvd')
        status: Library status code, if one was reported
    """
    
    def __init__(
        self,
        message: str,
        operation: str | None = None,
        status: int | None = None
    ):
        super().__init__(message)
        self.operation = operation
        self.status = status


class ContextError(PyCurveFitError):
    """
    A compute context was used after it was closed.
    """
    pass
