"""
Tests for the full SVD and LAPACK status translation.
"""

import numpy as np
import pytest
import torch

from pycurvefit.core.compute.linalg.layout import from_matrix, to_numpy
from pycurvefit.core.compute.linalg.status import check_status, library_call
from pycurvefit.core.compute.linalg.svd import (
    SVDResult,
    gesvd_min_lwork,
    query_workspace,
    solve_svd,
)
from pycurvefit.core.compute.tolerances import SVD_FP32
from pycurvefit.core.exceptions import DimensionError, LinAlgStatusError


def _buffers(m, n):
    return torch.zeros(m * m), torch.zeros(min(m, n)), torch.zeros(n * n)


def _reconstruct(result, m, n):
    r = min(m, n)
    U = to_numpy(result.U, m, m)
    VT = to_numpy(result.VT, n, n)
    S = result.S.numpy()
    return U[:, :r] @ np.diag(S) @ VT[:r, :]


# ═══════════════════════════════════════════════════════════════════════
# Factorization
# ═══════════════════════════════════════════════════════════════════════


class TestSolveSVD:

    def test_diagonal_matrix(self, ctx):
        A = from_matrix(np.array([[3.0, 0.0], [0.0, -2.0]]))
        U, S, VT = _buffers(2, 2)

        result = solve_svd(A, U, S, VT, 2, 2, ctx=ctx)

        np.testing.assert_allclose(result.S.numpy(), [3.0, 2.0], rtol=1e-6)
        np.testing.assert_allclose(
            _reconstruct(result, 2, 2), [[3.0, 0.0], [0.0, -2.0]], atol=1e-6
        )

    @pytest.mark.parametrize("m,n", [(5, 3), (3, 5), (4, 4), (1, 3), (30, 2)])
    def test_reconstructs_input(self, rng, ctx, m, n):
        original = rng.standard_normal((m, n)).astype(np.float32)
        U, S, VT = _buffers(m, n)

        result = solve_svd(from_matrix(original), U, S, VT, m, n, ctx=ctx)

        np.testing.assert_allclose(
            _reconstruct(result, m, n), original,
            rtol=SVD_FP32.rtol, atol=SVD_FP32.atol * 10,
        )

    def test_singular_values_descending_and_nonnegative(self, rng, ctx):
        m, n = 6, 4
        U, S, VT = _buffers(m, n)
        solve_svd(from_matrix(rng.standard_normal((m, n))), U, S, VT, m, n, ctx=ctx)
        s = S.numpy()
        assert np.all(s >= 0)
        assert np.all(np.diff(s) <= 0)

    def test_factors_are_orthogonal(self, rng, ctx):
        m, n = 5, 3
        U, S, VT = _buffers(m, n)
        solve_svd(from_matrix(rng.standard_normal((m, n))), U, S, VT, m, n, ctx=ctx)
        u = to_numpy(U, m, m)
        vt = to_numpy(VT, n, n)
        np.testing.assert_allclose(u.T @ u, np.eye(m), atol=1e-5)
        np.testing.assert_allclose(vt @ vt.T, np.eye(n), atol=1e-5)

    def test_input_unchanged(self, rng, ctx):
        A = from_matrix(rng.standard_normal((4, 3)))
        before = A.clone()
        solve_svd(A, *_buffers(4, 3), 4, 3, ctx=ctx)
        assert torch.equal(A, before)

    def test_result_references_caller_buffers(self, ctx):
        A = from_matrix(np.eye(2))
        U, S, VT = _buffers(2, 2)
        result = solve_svd(A, U, S, VT, 2, 2, ctx=ctx)
        assert isinstance(result, SVDResult)
        assert result.U is U
        assert result.S is S
        assert result.VT is VT

    def test_reports_workspace_on_host(self, ctx):
        result = solve_svd(from_matrix(np.eye(3)), *_buffers(3, 3), 3, 3, ctx=ctx)
        assert result.lwork >= gesvd_min_lwork(3, 3)

    def test_per_call_context(self):
        result = solve_svd(from_matrix(np.diag([1.0, 4.0])), *_buffers(2, 2), 2, 2)
        np.testing.assert_allclose(result.S.numpy(), [4.0, 1.0], rtol=1e-6)

    def test_least_squares_solution(self, rng, ctx):
        # x = V diag(1/S) U^T y recovers the coefficients of y = 2t + 1
        n = 10
        t = np.arange(n, dtype=np.float32)
        X = np.column_stack([t, np.ones(n, dtype=np.float32)])
        y = 2.0 * t + 1.0
        U, S, VT = _buffers(n, 2)

        solve_svd(from_matrix(X), U, S, VT, n, 2, ctx=ctx)
        u = to_numpy(U, n, n)[:, :2]
        vt = to_numpy(VT, 2, 2)
        coef = vt.T @ ((u.T @ y) / S.numpy())

        np.testing.assert_allclose(coef, [2.0, 1.0], rtol=1e-4)

    def test_wrong_singular_value_length(self, ctx):
        with pytest.raises(DimensionError):
            solve_svd(torch.zeros(6), torch.zeros(9), torch.zeros(3), torch.zeros(4), 3, 2, ctx=ctx)

    def test_wrong_u_size(self, ctx):
        with pytest.raises(DimensionError):
            solve_svd(torch.zeros(6), torch.zeros(6), torch.zeros(2), torch.zeros(4), 3, 2, ctx=ctx)


# ═══════════════════════════════════════════════════════════════════════
# Workspace and status
# ═══════════════════════════════════════════════════════════════════════


class TestWorkspace:

    @pytest.mark.parametrize("m,n", [(1, 1), (5, 3), (3, 5)])
    def test_query_meets_minimum(self, m, n):
        assert query_workspace(m, n) >= gesvd_min_lwork(m, n)

    def test_min_lwork(self):
        assert gesvd_min_lwork(5, 3) == max(3 * 3 + 5, 5 * 3)


class TestStatus:

    def test_zero_is_success(self):
        check_status('gesvd', 0)

    def test_illegal_argument(self):
        with pytest.raises(LinAlgStatusError, match="argument 4") as excinfo:
            check_status('gesvd', -4)
        assert excinfo.value.operation == 'gesvd'
        assert excinfo.value.status == -4

    def test_convergence_failure(self):
        with pytest.raises(LinAlgStatusError, match="info=2"):
            check_status('gesvd', 2)

    def test_library_call_translates_runtime_error(self):
        with pytest.raises(LinAlgStatusError, match="matmul") as excinfo:
            with library_call('matmul'):
                raise RuntimeError("CUBLAS_STATUS_ALLOC_FAILED")
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_library_call_passes_success(self):
        with library_call('matmul'):
            pass
