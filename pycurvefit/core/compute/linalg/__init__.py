"""
Linear algebra kernels for PyCurveFit.

All functions follow these conventions:
    - Buffers are flat, contiguous torch.float32 tensors; matrices are
      column-major (element (r, c) at offset c*m + r)
    - Outputs are written into caller-owned buffers; scratch space is
      acquired and released inside the call
    - Work is queued on the ComputeContext's stream; only the SVD path on
      host devices is inherently synchronous
    - Library failures raise LinAlgStatusError immediately

Submodules:
    layout: Column-major views and packing
    vector: Element-wise add/subtract/scale/copy
    matrix: matmul, diagmul, tiled transpose
    svd: Full singular value decomposition
    status: Library status translation
"""

from pycurvefit.core.compute.linalg.layout import as_matrix, from_matrix, to_numpy
from pycurvefit.core.compute.linalg.vector import add, subtract, scale, copy
from pycurvefit.core.compute.linalg.matrix import matmul, diagmul, transpose
from pycurvefit.core.compute.linalg.svd import (
    SVDResult,
    solve_svd,
    query_workspace,
)

__all__ = [
    # Layout
    "as_matrix",
    "from_matrix",
    "to_numpy",
    # Vector primitives
    "add",
    "subtract",
    "scale",
    "copy",
    # Matrix primitives
    "matmul",
    "diagmul",
    "transpose",
    # SVD
    "SVDResult",
    "solve_svd",
    "query_workspace",
]
