"""
Shared compute infrastructure for PyCurveFit.

This module provides device selection, the explicit compute context, timing,
precision constants and the linear algebra primitives shared by the models
and the Jacobian estimators.

Submodules:
    device: Hardware detection and device selection
    context: ComputeContext (device, dtype, stream, scratch accounting)
    timing: Execution timing utilities
    precision: Step sizes, clamp floors and kernel geometry constants
    tolerances: Expected float32 accuracy per primitive
    launch: Kernel launch configuration
    kernels: numba.cuda kernels (imported lazily on CUDA devices)
    linalg: Vector, matrix and SVD primitives
"""

from pycurvefit.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)
from pycurvefit.core.compute.context import ComputeContext
from pycurvefit.core.compute.timing import Timer

__all__ = [
    # Device detection
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
    # Context
    "ComputeContext",
    # Timing
    "Timer",
]
