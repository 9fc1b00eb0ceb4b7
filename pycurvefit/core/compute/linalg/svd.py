"""
Full singular value decomposition of a column-major matrix.

Computes A = U diag(S) VT for an m x n matrix A with U (m x m) and VT (n x n)
in their complete, non-economy form and S (min(m, n)) in descending order.
Used by the solver to solve the least-squares system built from a Jacobian.

Host devices call LAPACK sgesvd through SciPy with an explicit workspace
query, matching the cuSOLVER gesvd call sequence. CUDA devices call
torch.linalg.svd, where cuSOLVER sizes and frees its own workspace. Any
non-zero status is fatal and raised as LinAlgStatusError.
"""

from dataclasses import dataclass

import numpy as np
import torch

from pycurvefit.core.compute.context import ComputeContext, context_for
from pycurvefit.core.compute.linalg.layout import as_matrix
from pycurvefit.core.compute.linalg.status import check_status, library_call
from pycurvefit.core.validation import check_buffer, check_dimension, check_same_device


@dataclass(frozen=True)
class SVDResult:
    """
    Result of a full SVD.

    Attributes:
        U: Left singular vectors, m x m column-major (the caller's buffer)
        S: Singular values, length min(m, n), descending (the caller's buffer)
        VT: Right singular vectors transposed, n x n column-major (the caller's buffer)
        lwork: Workspace size in elements requested from LAPACK, or None when
               the device library managed its own workspace
    """
    U: torch.Tensor
    S: torch.Tensor
    VT: torch.Tensor
    lwork: int | None


def gesvd_min_lwork(m: int, n: int) -> int:
    """Smallest workspace LAPACK gesvd accepts for an m x n matrix."""
    mn, mx = min(m, n), max(m, n)
    return max(1, 3 * mn + mx, 5 * mn)


def query_workspace(m: int, n: int) -> int:
    """
    Ask LAPACK for the optimal sgesvd workspace for an m x n matrix.

    Raises:
        LinAlgStatusError: If the query reports a non-zero status
    """
    from scipy.linalg import lapack

    work, info = lapack.sgesvd_lwork(m, n, compute_uv=1, full_matrices=1)
    check_status('gesvd_lwork', info)
    return max(int(np.real(work)), gesvd_min_lwork(m, n))


def _svd_lapack(
    A: torch.Tensor,
    U: torch.Tensor,
    S: torch.Tensor,
    VT: torch.Tensor,
    m: int,
    n: int,
) -> int:
    """Host LAPACK path. A is copied by f2py and left untouched."""
    from scipy.linalg import lapack

    lwork = query_workspace(m, n)
    a = as_matrix(A, m, n, 'A').numpy()
    u, s, vt, info = lapack.sgesvd(
        a, compute_uv=1, full_matrices=1, lwork=lwork, overwrite_a=0
    )
    check_status('gesvd', info)

    as_matrix(U, m, m, 'U').copy_(torch.from_numpy(u))
    S.copy_(torch.from_numpy(s))
    as_matrix(VT, n, n, 'VT').copy_(torch.from_numpy(vt))
    return lwork


def _svd_device(
    A: torch.Tensor,
    U: torch.Tensor,
    S: torch.Tensor,
    VT: torch.Tensor,
    m: int,
    n: int,
) -> None:
    """GPU path via torch.linalg.svd (cuSOLVER on CUDA)."""
    a = as_matrix(A, m, n, 'A')
    with library_call('gesvd'):
        try:
            u, s, vh = torch.linalg.svd(a, full_matrices=True)
        except NotImplementedError:
            # Not every MPS build implements SVD; factor on the host.
            u, s, vh = (t.to(a.device) for t in torch.linalg.svd(a.cpu(), full_matrices=True))

    as_matrix(U, m, m, 'U').copy_(u)
    S.copy_(s)
    as_matrix(VT, n, n, 'VT').copy_(vh)


def solve_svd(
    A: torch.Tensor,
    U: torch.Tensor,
    S: torch.Tensor,
    VT: torch.Tensor,
    m: int,
    n: int,
    ctx: ComputeContext | None = None,
) -> SVDResult:
    """
    Full SVD: A = U[:, :r] diag(S) VT[:r, :] with r = min(m, n).

    Args:
        A: m x n column-major input buffer (not modified)
        U: m x m output buffer
        S: min(m, n) output buffer
        VT: n x n output buffer
        m, n: Dimensions of A
        ctx: Compute context; a per-call context is used if None

    Returns:
        SVDResult referencing the filled U, S, VT buffers

    Raises:
        DimensionError: If a buffer's size does not match its dimensions
        LinAlgStatusError: If the workspace query or factorization fails
    """
    m = check_dimension(m, 'm')
    n = check_dimension(n, 'n')

    as_matrix(A, m, n, 'A')
    as_matrix(U, m, m, 'U')
    check_buffer(S, 'S', expected=min(m, n))
    as_matrix(VT, n, n, 'VT')
    check_same_device(A, U, S, VT, names=('A', 'U', 'S', 'VT'))

    with context_for(ctx, A, 'A') as active:
        if active.device.type == 'cpu':
            lwork = _svd_lapack(A, U, S, VT, m, n)
        else:
            _svd_device(A, U, S, VT, m, n)
            lwork = None

    return SVDResult(U=U, S=S, VT=VT, lwork=lwork)
