"""
CUDA kernels and launch plumbing (numba.cuda).

Only imported on CUDA devices. Kernels receive torch buffers through the
CUDA array interface and are launched on the torch stream of the active
ComputeContext, so they are ordered with the cuBLAS/cuSOLVER work queued
there.
"""

from numba import cuda, float32
import torch

from pycurvefit.core.compute.launch import launch_config_2d
from pycurvefit.core.compute.precision import TILE_DIM


def device_array(buffer: torch.Tensor):
    """Zero-copy numba view of a CUDA torch buffer."""
    return cuda.as_cuda_array(buffer.detach())


def launch_stream(stream: 'torch.cuda.Stream | None' = None):
    """numba handle for a torch stream (the current one if None)."""
    if stream is None:
        stream = torch.cuda.current_stream()
    return cuda.external_stream(stream.cuda_stream)


@cuda.jit
def _transpose_tiled(src, dst, m, n):
    # src is m x n column-major, dst is n x m column-major.
    tile = cuda.shared.array(shape=(TILE_DIM, TILE_DIM + 1), dtype=float32)

    tx = cuda.threadIdx.x
    ty = cuda.threadIdx.y

    row = cuda.blockIdx.x * TILE_DIM + tx
    col = cuda.blockIdx.y * TILE_DIM + ty
    if row < m and col < n:
        tile[ty, tx] = src[col * m + row]

    cuda.syncthreads()

    # Swap block roles: threads now walk rows of dst (length n).
    out_row = cuda.blockIdx.y * TILE_DIM + tx
    out_col = cuda.blockIdx.x * TILE_DIM + ty
    if out_row < n and out_col < m:
        dst[out_col * n + out_row] = tile[tx, ty]


def transpose_tiled(
    src: torch.Tensor,
    dst: torch.Tensor,
    m: int,
    n: int,
    stream: 'torch.cuda.Stream | None' = None,
) -> None:
    """
    Launch the shared-memory tiled transpose of an m x n matrix.

    src and dst must not overlap; the caller snapshots src for in-place use.
    """
    grid, block = launch_config_2d(m, n, TILE_DIM)
    with torch.cuda.device(dst.device):
        _transpose_tiled[grid, block, launch_stream(stream)](
            device_array(src), device_array(dst), m, n
        )
