"""
Tests for PyCurveFit exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyCurveFitError)
    - Diagnostic attributes on LinAlgStatusError
    - Default attribute values (None for optional attributes)
"""

import pytest

from pycurvefit.core.exceptions import (
    ContextError,
    DimensionError,
    LinAlgStatusError,
    NumericalError,
    PyCurveFitError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PyCurveFitError."""

    def test_validation_error_is_pycurvefit_error(self):
        with pytest.raises(PyCurveFitError):
            raise ValidationError("bad input")

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("wrong size")

    def test_linalg_status_error_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise LinAlgStatusError("gesvd failed")

    def test_linalg_status_error_is_pycurvefit_error(self):
        with pytest.raises(PyCurveFitError):
            raise LinAlgStatusError("gesvd failed")

    def test_context_error_is_pycurvefit_error(self):
        with pytest.raises(PyCurveFitError):
            raise ContextError("closed")

    def test_context_error_is_not_validation_error(self):
        assert not isinstance(ContextError("closed"), ValidationError)


# ═══════════════════════════════════════════════════════════════════════
# LinAlgStatusError attributes
# ═══════════════════════════════════════════════════════════════════════


class TestLinAlgStatusError:

    def test_attributes(self):
        err = LinAlgStatusError("gesvd: info=3", operation='gesvd', status=3)
        assert err.operation == 'gesvd'
        assert err.status == 3
        assert str(err) == "gesvd: info=3"

    def test_defaults_are_none(self):
        err = LinAlgStatusError("failed")
        assert err.operation is None
        assert err.status is None
