"""
Translation of linear algebra library failures.

Any non-success status from the dense linear algebra backend (cuBLAS,
cuSOLVER, host BLAS/LAPACK) is a programming error or resource exhaustion.
It is surfaced as LinAlgStatusError immediately and never retried.
"""

from contextlib import contextmanager
from typing import Iterator

import torch

from pycurvefit.core.exceptions import LinAlgStatusError


def check_status(operation: str, info: int) -> None:
    """
    Raise if a LAPACK-style info code reports failure.

    Args:
        operation: Routine name for the error message
        info: 0 on success; < 0 flags an illegal argument, > 0 a
              routine-specific failure (e.g. gesvd did not converge)

    Raises:
        LinAlgStatusError: If info != 0
    """
    info = int(info)
    if info == 0:
        return
    if info < 0:
        detail = f"argument {-info} had an illegal value"
    else:
        detail = f"routine failed with info={info}"
    raise LinAlgStatusError(
        f"{operation}: {detail}",
        operation=operation,
        status=info,
    )


@contextmanager
def library_call(operation: str) -> Iterator[None]:
    """
    Re-raise backend failures inside the block as LinAlgStatusError.

    torch reports cuBLAS/cuSOLVER status codes and shape mismatches as
    RuntimeError (LinAlgError for factorization failures).
    """
    try:
        yield
    except torch.linalg.LinAlgError as e:
        raise LinAlgStatusError(
            f"{operation}: linear algebra library reported failure: {e}",
            operation=operation,
        ) from e
    except RuntimeError as e:
        raise LinAlgStatusError(
            f"{operation}: library call failed: {e}",
            operation=operation,
        ) from e
