"""
Device detection and selection.

Maps caller device preferences ('cpu', 'gpu', 'auto', or an explicit torch
device string) onto a torch.device, and describes the selection with a
DeviceInfo record. Only CUDA devices run the numba kernels; MPS runs the
tensor paths on the GPU and CPU runs them on the host.
"""

from dataclasses import dataclass
from typing import Literal
import platform
import warnings

import torch


@dataclass(frozen=True)
class DeviceInfo:
    """
    Description of the device a ComputeContext runs on.

    Attributes:
        device_type: 'cpu', 'cuda' or 'mps'
        device_index: CUDA ordinal, 0 for MPS, None for CPU
        name: Processor or GPU model name
        memory_bytes: Total device memory, None when the backend doesn't report it
        compute_capability: (major, minor) on CUDA, None elsewhere
    """
    device_type: Literal['cpu', 'cuda', 'mps']
    device_index: int | None
    name: str
    memory_bytes: int | None
    compute_capability: tuple[int, int] | None

    def __str__(self) -> str:
        if self.device_type == 'cpu':
            return f"CPU ({self.name})"
        label = f"{self.device_type.upper()}:{self.device_index} ({self.name}"
        if self.memory_bytes is not None:
            label += f", {self.memory_bytes / 1024**3:.1f}GB"
        return label + ")"

    @property
    def is_gpu(self) -> bool:
        return self.device_type != 'cpu'

    @property
    def torch_device(self) -> torch.device:
        """The torch.device this record describes."""
        if self.device_type == 'cuda':
            return torch.device('cuda', self.device_index)
        return torch.device(self.device_type)


def _mps_available() -> bool:
    return hasattr(torch.backends, 'mps') and torch.backends.mps.is_available()


def _mps_info() -> DeviceInfo:
    # MPS reports neither total memory nor a capability level.
    return DeviceInfo('mps', 0, 'Apple Silicon GPU', None, None)


def cuda_info(index: int) -> DeviceInfo:
    """DeviceInfo for CUDA device `index`."""
    props = torch.cuda.get_device_properties(index)
    return DeviceInfo(
        device_type='cuda',
        device_index=index,
        name=props.name,
        memory_bytes=props.total_memory,
        compute_capability=(props.major, props.minor),
    )


def detect_gpu() -> DeviceInfo | None:
    """
    The preferred GPU, CUDA before MPS, or None when there is none.
    """
    if torch.cuda.is_available():
        return cuda_info(torch.cuda.current_device())
    if _mps_available():
        return _mps_info()
    return None


def get_cpu_info() -> DeviceInfo:
    """DeviceInfo for the host CPU."""
    name = platform.processor() or platform.machine() or "Unknown CPU"
    return DeviceInfo('cpu', None, name, None, None)


def select_device(prefer: str = 'auto') -> DeviceInfo:
    """
    Select compute device based on preference and availability.

    Args:
        prefer: Device preference
            - 'cpu': Always use CPU
            - 'gpu': Require GPU (raises if unavailable)
            - 'auto': Use GPU if available, else CPU
            - 'cuda', 'cuda:N', 'mps': that exact device; falls back to
              CPU with a warning if it is not available

    Returns:
        DeviceInfo for selected device

    Raises:
        RuntimeError: If 'gpu' requested but no GPU available
        ValueError: If prefer is not a recognised device string
    """
    if prefer == 'cpu':
        return get_cpu_info()

    if prefer in ('gpu', 'auto'):
        gpu = detect_gpu()
        if prefer == 'gpu' and gpu is None:
            raise RuntimeError(
                "GPU requested but no GPU available. "
                "Ensure PyTorch is installed with CUDA/MPS support."
            )
        return gpu if gpu is not None else get_cpu_info()

    try:
        requested = torch.device(prefer)
    except RuntimeError as e:
        raise ValueError(
            f"Unknown device: {prefer!r}. Use 'cpu', 'gpu', 'auto', "
            f"'cuda[:N]' or 'mps'."
        ) from e

    if requested.type == 'cuda':
        if torch.cuda.is_available():
            index = requested.index
            if index is None:
                index = torch.cuda.current_device()
            return cuda_info(index)
        warnings.warn("CUDA not available, falling back to CPU")
        return get_cpu_info()

    if requested.type == 'mps':
        if _mps_available():
            return _mps_info()
        warnings.warn("MPS not available, falling back to CPU")
        return get_cpu_info()

    if requested.type == 'cpu':
        return get_cpu_info()

    raise ValueError(
        f"Unsupported device type: {requested.type!r}. Use 'cpu', 'cuda' or 'mps'."
    )


def info_for(device: torch.device) -> DeviceInfo:
    """DeviceInfo describing an existing torch.device (e.g. a buffer's)."""
    if device.type == 'cuda':
        index = device.index if device.index is not None else torch.cuda.current_device()
        return cuda_info(index)
    if device.type == 'mps':
        return _mps_info()
    return get_cpu_info()
