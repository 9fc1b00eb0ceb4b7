"""
Reference model functions and the linear-regression design matrix.

    LinearModel             a*t + b                                   K=2
    ExponentialModel        a*exp(-|k| t) + b                         K=3
    DoubleExponentialModel  a1*exp(-|k1| t) + a2*exp(-|k2| t) + b     K=5

Decay rates are folded through -|k|, so a rate parameter that wanders
negative during a fit still describes decay rather than growth.

DesignMatrixBuilder is not a fitting model: it fills the n x 2 design
matrix [t, 1] used for closed-form linear regression.
"""

import torch

from pycurvefit.core.exceptions import ValidationError
from pycurvefit.core.validation import check_buffer, check_dimension, check_min_length
from pycurvefit.models.base import Model
from pycurvefit.models.backends import tensor


class LinearModel(Model):
    """Affine model a*t + b."""
    name = 'linear'
    n_params = 2
    parameter_names = ('a', 'b')
    _expression = staticmethod(tensor.linear)


class ExponentialModel(Model):
    """Single exponential decay with offset, a*exp(-|k| t) + b."""
    name = 'exponential'
    n_params = 3
    parameter_names = ('a', 'k', 'b')
    _expression = staticmethod(tensor.exponential)


class DoubleExponentialModel(Model):
    """Sum of two exponential decays with a shared offset."""
    name = 'double_exponential'
    n_params = 5
    parameter_names = ('a1', 'k1', 'a2', 'k2', 'b')
    _expression = staticmethod(tensor.double_exponential)


class DesignMatrixBuilder:
    """
    Fills the n x 2 column-major design matrix for y = a*t + b.

    Column 0 holds t = 0..n-1, column 1 holds ones. The result can be fed
    to matmul to form normal equations, or to solve_svd directly.
    """
    name = 'design_matrix'
    n_columns = 2

    def __call__(self, output: torch.Tensor, n: int) -> None:
        """
        Write the design matrix into output[:2n].

        Raises:
            ValidationError: If output is not a float32 buffer
            DimensionError: If output holds fewer than 2n elements
        """
        n = check_dimension(n, 'n')
        check_buffer(output, 'output')
        check_min_length(output, self.n_columns * n, 'output')

        if output.device.type == 'cuda':
            from pycurvefit.models.backends import cuda
            cuda.launch(self.name, output, (), n)
            return

        t = torch.arange(n, dtype=output.dtype, device=output.device)
        tensor.design_matrix(t, output)

    def build(self, n: int, device: str | torch.device = 'cpu') -> torch.Tensor:
        """Allocate and fill a 2n-element design matrix buffer."""
        n = check_dimension(n, 'n')
        output = torch.zeros(self.n_columns * n, dtype=torch.float32, device=device)
        self(output, n)
        return output

    def __repr__(self) -> str:
        return 'DesignMatrixBuilder()'


MODELS: dict[str, type[Model]] = {
    LinearModel.name: LinearModel,
    ExponentialModel.name: ExponentialModel,
    DoubleExponentialModel.name: DoubleExponentialModel,
}


def get_model(name: str) -> Model:
    """
    Instantiate a registered model by name.

    Raises:
        ValidationError: If name is not registered
    """
    try:
        return MODELS[name]()
    except KeyError:
        raise ValidationError(
            f"Unknown model: {name!r}. Available: {sorted(MODELS)}"
        ) from None
