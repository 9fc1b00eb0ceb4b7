"""
Column-major layout helpers.

Device buffers are flat float32 tensors. A matrix with m rows and n columns
stores element (r, c) at offset c*m + r. Viewing the buffer as an (n, m)
row-major tensor and transposing gives an (m, n) view with strides (1, m)
that shares storage with the buffer, so torch operations on the view read
and write the column-major layout directly.
"""

import numpy as np
from numpy.typing import NDArray
import torch

from pycurvefit.core.exceptions import DimensionError
from pycurvefit.core.validation import check_buffer


def as_matrix(buffer: torch.Tensor, m: int, n: int, name: str = 'buffer') -> torch.Tensor:
    """
    View a column-major buffer as an (m, n) tensor.

    Args:
        buffer: Flat float32 buffer with exactly m*n elements
        m: Rows
        n: Columns
        name: Parameter name for error messages

    Returns:
        (m, n) view sharing storage with buffer

    Raises:
        ValidationError: If buffer is not a flat contiguous float32 tensor
        DimensionError: If buffer does not hold m*n elements
    """
    check_buffer(buffer, name, expected=m * n)
    return buffer.view(n, m).t()


def from_matrix(matrix: torch.Tensor | NDArray, device: str | torch.device = 'cpu') -> torch.Tensor:
    """
    Pack a 2D array into a new column-major float32 buffer.

    Accepts a torch tensor or anything numpy can convert; the result lives
    on `device` (a tensor input keeps its own device).

    Raises:
        DimensionError: If matrix is not 2D
    """
    if not isinstance(matrix, torch.Tensor):
        matrix = torch.from_numpy(np.asarray(matrix, dtype=np.float32))
        matrix = matrix.to(device)
    if matrix.ndim != 2:
        raise DimensionError(f"matrix: expected 2D, got {matrix.ndim}D")
    return matrix.to(torch.float32).t().contiguous().view(-1)


def to_numpy(buffer: torch.Tensor, m: int, n: int, name: str = 'buffer') -> NDArray[np.float32]:
    """Copy a column-major buffer to host as an (m, n) numpy array."""
    return as_matrix(buffer, m, n, name).cpu().numpy()
