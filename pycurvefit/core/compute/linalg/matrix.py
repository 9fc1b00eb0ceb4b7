"""
Dense matrix primitives on column-major device buffers.

    matmul:    C = alpha * op(A) @ op(B)   (GEMM against a zeroed C)
    diagmul:   C = diag(d) @ B
    transpose: B = A^T, in place allowed

None of these synchronize. Work is queued on the context's stream and the
caller must synchronize (ctx.synchronize(), or close a per-call context)
before reading the output on the host or on another stream.

The product primitives go through torch's dense BLAS (cuBLAS on CUDA); the
transpose runs a numba shared-memory kernel on CUDA and blocked tensor
copies elsewhere.
"""

from contextlib import ExitStack

import torch

from pycurvefit.core.compute.context import ComputeContext, context_for
from pycurvefit.core.compute.linalg.layout import as_matrix
from pycurvefit.core.compute.linalg.status import library_call
from pycurvefit.core.compute.precision import TILE_DIM
from pycurvefit.core.exceptions import ValidationError
from pycurvefit.core.validation import check_dimension, check_same_device


def _overlaps(a: torch.Tensor, b: torch.Tensor) -> bool:
    """True if two contiguous buffers share any bytes."""
    a_start, b_start = a.data_ptr(), b.data_ptr()
    a_end = a_start + a.numel() * a.element_size()
    b_end = b_start + b.numel() * b.element_size()
    return a_start < b_end and b_start < a_end


def _check_no_alias(out: torch.Tensor, out_name: str, **inputs: torch.Tensor) -> None:
    # Outputs are zeroed before the product is formed.
    for name, buf in inputs.items():
        if _overlaps(out, buf):
            raise ValidationError(
                f"{out_name} overlaps {name}; "
                f"{out_name} is zeroed before use and would destroy the input"
            )


def matmul(
    A: torch.Tensor,
    B: torch.Tensor,
    C: torch.Tensor,
    alpha: float,
    beta: float,
    trans_a: bool,
    trans_b: bool,
    m: int,
    n: int,
    k: int,
    ctx: ComputeContext | None = None,
) -> torch.Tensor:
    """
    General matrix multiply that always overwrites C.

    C is zeroed, then the GEMM C = alpha * op(A) @ op(B) + beta * C runs
    against that zeroed C. beta therefore never folds a previous C into
    the output; this is not an accumulate primitive.

    Args:
        A: m x n buffer (n x m when trans_a)
        B: n x k buffer (k x n when trans_b)
        C: m x k output buffer, must not overlap A or B
        alpha: Scale applied to the product
        beta: Scale applied to the zeroed C
        trans_a: Use A^T
        trans_b: Use B^T
        m, n, k: Dimensions of op(A) (m x n) and op(B) (n x k)
        ctx: Compute context; a per-call context is used if None

    Returns:
        C

    Raises:
        DimensionError: If a buffer's size does not match its dimensions
        ValidationError: If C overlaps an input or buffers span devices
        LinAlgStatusError: If the BLAS backend reports failure
    """
    m = check_dimension(m, 'm')
    n = check_dimension(n, 'n')
    k = check_dimension(k, 'k')

    a = as_matrix(A, n, m, 'A').t() if trans_a else as_matrix(A, m, n, 'A')
    b = as_matrix(B, k, n, 'B').t() if trans_b else as_matrix(B, n, k, 'B')
    as_matrix(C, m, k, 'C')
    check_same_device(A, B, C, names=('A', 'B', 'C'))
    _check_no_alias(C, 'C', A=A, B=B)

    with context_for(ctx, C, 'C'):
        C.zero_()
        # Column-major C (m x k) is row-major C^T (k x m) = op(B)^T op(A)^T,
        # which lets the GEMM write straight into the contiguous buffer.
        c_rows = C.view(k, m)
        with library_call('matmul'):
            c_rows.addmm_(b.t(), a.t(), beta=beta, alpha=alpha)
    return C


def diagmul(
    d: torch.Tensor,
    B: torch.Tensor,
    C: torch.Tensor,
    m: int,
    n: int,
    ctx: ComputeContext | None = None,
) -> torch.Tensor:
    """
    Left-multiply by a diagonal matrix: C = diag(d) @ B.

    Row r of B is scaled by d[r]. C is zeroed first and the scaled rows
    are accumulated into it.

    Args:
        d: Diagonal entries, length m
        B: m x n buffer
        C: m x n output buffer, must not overlap B or d
        m, n: Dimensions of B
        ctx: Compute context; a per-call context is used if None

    Returns:
        C

    Raises:
        DimensionError: If a buffer's size does not match its dimensions
        ValidationError: If C overlaps an input or buffers span devices
        LinAlgStatusError: If the backend reports failure
    """
    m = check_dimension(m, 'm')
    n = check_dimension(n, 'n')

    as_matrix(d, m, 1, 'd')
    as_matrix(B, m, n, 'B')
    as_matrix(C, m, n, 'C')
    check_same_device(d, B, C, names=('d', 'B', 'C'))
    _check_no_alias(C, 'C', d=d, B=B)

    with context_for(ctx, C, 'C'):
        C.zero_()
        # Row-major (n, m) view: every row is one column of B, scaled
        # element-wise by d.
        with library_call('diagmul'):
            C.view(n, m).addcmul_(B.view(n, m), d.view(1, m))
    return C


def _transpose_blocked(src: torch.Tensor, dst: torch.Tensor, m: int, n: int) -> None:
    """Tile-by-tile transpose via strided tensor copies (non-CUDA devices)."""
    a = as_matrix(src, m, n, 'A')
    b = as_matrix(dst, n, m, 'B')
    for r0 in range(0, m, TILE_DIM):
        r1 = min(r0 + TILE_DIM, m)
        for c0 in range(0, n, TILE_DIM):
            c1 = min(c0 + TILE_DIM, n)
            b[c0:c1, r0:r1].copy_(a[r0:r1, c0:c1].t())


def transpose(
    A: torch.Tensor,
    B: torch.Tensor,
    m: int,
    n: int,
    ctx: ComputeContext | None = None,
) -> torch.Tensor:
    """
    Transpose an m x n matrix: B = A^T (n x m).

    A and B may be the same buffer. In that case A is first snapshotted
    into a scratch buffer that lives only for this call, and the transpose
    reads from the snapshot.

    Args:
        A: m x n buffer
        B: output buffer with m*n elements, interpreted as n x m
        m, n: Dimensions of A (need not be multiples of the tile size)
        ctx: Compute context; a per-call context is used if None

    Returns:
        B
    """
    m = check_dimension(m, 'm')
    n = check_dimension(n, 'n')

    as_matrix(A, m, n, 'A')
    as_matrix(B, n, m, 'B')
    check_same_device(A, B, names=('A', 'B'))

    with context_for(ctx, B, 'B') as active, ExitStack() as stack:
        source = A
        if _overlaps(A, B):
            (snapshot,) = stack.enter_context(active.scratch(m * n))
            snapshot.copy_(A)
            source = snapshot

        if active.is_cuda:
            from pycurvefit.core.compute import kernels
            kernels.transpose_tiled(source, B, m, n, active.stream)
        else:
            _transpose_blocked(source, B, m, n)
    return B
