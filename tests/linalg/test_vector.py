"""
Tests for element-wise vector primitives.
"""

import pytest
import torch

from pycurvefit.core.compute.linalg.vector import add, copy, scale, subtract
from pycurvefit.core.exceptions import DimensionError, ValidationError


class TestVectorOps:

    def test_add(self, ctx):
        out = torch.zeros(3)
        add(torch.tensor([1.0, 2.0, 3.0]), torch.tensor([10.0, 20.0, 30.0]), out, ctx=ctx)
        assert out.tolist() == [11.0, 22.0, 33.0]

    def test_subtract(self):
        out = torch.zeros(3)
        subtract(torch.tensor([5.0, 5.0, 5.0]), torch.tensor([1.0, 2.0, 3.0]), out)
        assert out.tolist() == [4.0, 3.0, 2.0]

    def test_subtract_in_place(self, ctx):
        a = torch.tensor([5.0, 6.0])
        subtract(a, torch.tensor([1.0, 1.0]), a, ctx=ctx)
        assert a.tolist() == [4.0, 5.0]

    def test_scale_in_place(self, ctx):
        buf = torch.tensor([1.0, -2.0, 4.0])
        scale(buf, 0.5, buf, ctx=ctx)
        assert buf.tolist() == [0.5, -1.0, 2.0]

    def test_copy(self, ctx):
        dst = torch.zeros(3)
        copy(dst, torch.tensor([1.0, 2.0, 3.0]), ctx=ctx)
        assert dst.tolist() == [1.0, 2.0, 3.0]

    def test_length_limits_work(self, ctx):
        out = torch.full((4,), -1.0)
        subtract(torch.ones(4), torch.zeros(4), out, length=2, ctx=ctx)
        assert out.tolist() == [1.0, 1.0, -1.0, -1.0]

    def test_slice_views_as_outputs(self, ctx):
        # Jacobian columns are written through slices of one buffer
        J = torch.zeros(6)
        subtract(torch.full((3,), 2.0), torch.ones(3), J[3:6], ctx=ctx)
        assert J.tolist() == [0.0, 0.0, 0.0, 1.0, 1.0, 1.0]

    def test_input_too_short(self, ctx):
        with pytest.raises(DimensionError):
            add(torch.zeros(2), torch.zeros(3), torch.zeros(3), ctx=ctx)

    def test_rejects_float64(self, ctx):
        with pytest.raises(ValidationError):
            copy(torch.zeros(2), torch.zeros(2, dtype=torch.float64), ctx=ctx)
