"""
Tests for the reference model evaluators and the design matrix builder.
"""

import numpy as np
import pytest
import torch

from pycurvefit.core.exceptions import DimensionError, ValidationError
from pycurvefit.core.protocols import ModelEvaluator
from pycurvefit.models import (
    MODELS,
    DesignMatrixBuilder,
    DoubleExponentialModel,
    ExponentialModel,
    LinearModel,
    get_model,
)


T = np.arange(20, dtype=np.float32)


# ═══════════════════════════════════════════════════════════════════════
# Evaluation
# ═══════════════════════════════════════════════════════════════════════


class TestLinearModel:

    def test_affine_values(self, linear_params):
        out = torch.zeros(5)
        LinearModel()(out, linear_params, 5)
        assert out.tolist() == [3.0, 5.0, 7.0, 9.0, 11.0]

    def test_evaluate_allocates(self):
        out = LinearModel().evaluate([2, 3], 5)
        assert out.dtype == torch.float32
        assert out.tolist() == [3.0, 5.0, 7.0, 9.0, 11.0]

    def test_writes_only_first_n(self, linear_params):
        out = torch.full((6,), -1.0)
        LinearModel()(out, linear_params, 4)
        assert out.tolist() == [3.0, 5.0, 7.0, 9.0, -1.0, -1.0]

    def test_extra_params_ignored(self):
        params = np.array([1.0, 0.0, 99.0], dtype=np.float32)
        out = torch.zeros(3)
        LinearModel()(out, params, 3)
        assert out.tolist() == [0.0, 1.0, 2.0]


class TestExponentialModels:

    def test_exponential_matches_numpy(self, exponential_params):
        a, k, b = exponential_params
        out = ExponentialModel().evaluate(exponential_params, 20)
        np.testing.assert_allclose(out.numpy(), a * np.exp(-k * T) + b, rtol=1e-6)

    def test_negative_rate_still_decays(self):
        pos = ExponentialModel().evaluate([5.0, 0.3, 1.0], 10)
        neg = ExponentialModel().evaluate([5.0, -0.3, 1.0], 10)
        assert torch.equal(pos, neg)

    def test_zero_rate_is_constant(self):
        out = ExponentialModel().evaluate([2.0, 0.0, 1.0], 4)
        assert out.tolist() == [3.0, 3.0, 3.0, 3.0]

    def test_double_exponential_matches_numpy(self, double_exponential_params):
        a1, k1, a2, k2, b = double_exponential_params
        out = DoubleExponentialModel().evaluate(double_exponential_params, 20)
        expected = a1 * np.exp(-k1 * T) + a2 * np.exp(-k2 * T) + b
        np.testing.assert_allclose(out.numpy(), expected, rtol=1e-6)

    def test_reads_params_every_call(self, exponential_params):
        model = ExponentialModel()
        first = torch.zeros(5)
        second = torch.zeros(5)
        model(first, exponential_params, 5)
        exponential_params[0] = 10.0
        model(second, exponential_params, 5)
        assert not torch.equal(first, second)


class TestModelValidation:

    def test_short_params(self):
        with pytest.raises(DimensionError, match="at least 3"):
            ExponentialModel()(torch.zeros(4), np.ones(2, dtype=np.float32), 4)

    def test_short_output(self, linear_params):
        with pytest.raises(DimensionError):
            LinearModel()(torch.zeros(3), linear_params, 4)

    def test_float64_params_rejected(self):
        with pytest.raises(ValidationError, match="float32"):
            LinearModel()(torch.zeros(3), np.ones(2), 3)

    def test_zero_samples_rejected(self, linear_params):
        with pytest.raises(ValidationError):
            LinearModel()(torch.zeros(3), linear_params, 0)


# ═══════════════════════════════════════════════════════════════════════
# Protocol, registry, design matrix
# ═══════════════════════════════════════════════════════════════════════


class TestRegistry:

    @pytest.mark.parametrize("name", sorted(MODELS))
    def test_models_satisfy_protocol(self, name):
        model = get_model(name)
        assert isinstance(model, ModelEvaluator)
        assert model.n_params == len(model.parameter_names)

    def test_parameter_counts(self):
        assert LinearModel.n_params == 2
        assert ExponentialModel.n_params == 3
        assert DoubleExponentialModel.n_params == 5

    def test_unknown_model(self):
        with pytest.raises(ValidationError, match="Unknown model"):
            get_model('gaussian')

    def test_repr(self):
        assert repr(ExponentialModel()) == 'ExponentialModel(a, k, b)'


class TestDesignMatrix:

    def test_columns(self):
        X = DesignMatrixBuilder().build(4)
        assert X.tolist() == [0.0, 1.0, 2.0, 3.0, 1.0, 1.0, 1.0, 1.0]

    def test_fills_caller_buffer(self):
        out = torch.full((8,), -1.0)
        DesignMatrixBuilder()(out, 3)
        assert out.tolist() == [0.0, 1.0, 2.0, 1.0, 1.0, 1.0, -1.0, -1.0]

    def test_short_buffer(self):
        with pytest.raises(DimensionError):
            DesignMatrixBuilder()(torch.zeros(5), 3)
