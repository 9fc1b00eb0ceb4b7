"""
CUDA backend for model evaluation (numba.cuda).

One thread per sample on a 1D grid from launch_config_1d; threads past n
are masked. Parameters arrive as float32 kernel arguments, so the
arithmetic stays in single precision.
"""

import math

import numpy as np
from numba import cuda, float32
import torch

from pycurvefit.core.compute.kernels import device_array, launch_stream
from pycurvefit.core.compute.launch import launch_config_1d


@cuda.jit
def _linear(out, n, a, b):
    i = cuda.grid(1)
    if i < n:
        out[i] = a * float32(i) + b


@cuda.jit
def _exponential(out, n, a, k, b):
    i = cuda.grid(1)
    if i < n:
        out[i] = a * math.exp(-abs(k) * float32(i)) + b


@cuda.jit
def _double_exponential(out, n, a1, k1, a2, k2, b):
    i = cuda.grid(1)
    if i < n:
        t = float32(i)
        out[i] = a1 * math.exp(-abs(k1) * t) + a2 * math.exp(-abs(k2) * t) + b


@cuda.jit
def _design_matrix(out, n):
    i = cuda.grid(1)
    if i < n:
        out[i] = float32(i)
        out[n + i] = float32(1.0)


KERNELS = {
    'linear': _linear,
    'exponential': _exponential,
    'double_exponential': _double_exponential,
    'design_matrix': _design_matrix,
}


def launch(
    name: str,
    output: torch.Tensor,
    values: tuple[np.float32, ...],
    n: int,
    stream: 'torch.cuda.Stream | None' = None,
) -> None:
    """
    Launch the kernel for model `name` writing n samples into output.

    Runs on the current torch stream unless one is given, which inside an
    active ComputeContext is the context's stream.
    """
    kernel = KERNELS[name]
    blocks, threads = launch_config_1d(n)
    args = tuple(np.float32(v) for v in values)
    with torch.cuda.device(output.device):
        kernel[blocks, threads, launch_stream(stream)](device_array(output), n, *args)
