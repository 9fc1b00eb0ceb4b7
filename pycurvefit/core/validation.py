"""
Input validation utilities for PyCurveFit.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about caller intent.

Design principles:
    - No silent type coercion: device buffers and parameter vectors are
      written in place, so a converted copy would break the contract
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numbers

import numpy as np
from numpy.typing import NDArray
import torch

from pycurvefit.core.exceptions import ValidationError, DimensionError


def check_dimension(value: int, name: str, allow_zero: bool = False) -> int:
    """
    Validate a matrix dimension or sample count.

    Args:
        value: Dimension to check
        name: Parameter name for error messages
        allow_zero: If True, accept 0 (e.g. a model with no parameters)

    Returns:
        value as a Python int

    Raises:
        ValidationError: If value is not an integer or is out of range
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(
            f"{name}: expected an integer, got {type(value).__name__}"
        )
    value = int(value)
    lower = 0 if allow_zero else 1
    if value < lower:
        raise ValidationError(f"{name}: must be >= {lower}, got {value}")
    return value


def check_buffer(
    buffer: torch.Tensor,
    name: str,
    expected: int | None = None,
) -> torch.Tensor:
    """
    Verify a device buffer is a flat, contiguous float32 tensor.

    Args:
        buffer: Tensor to check
        name: Parameter name for error messages
        expected: Exact number of elements required, if known

    Returns:
        The same tensor (never a copy)

    Raises:
        ValidationError: If buffer is not a 1D contiguous float32 tensor
        DimensionError: If buffer does not hold exactly `expected` elements
    """
    if not isinstance(buffer, torch.Tensor):
        raise ValidationError(
            f"{name}: expected a torch.Tensor device buffer, "
            f"got {type(buffer).__name__}"
        )
    if buffer.dtype != torch.float32:
        raise ValidationError(
            f"{name}: expected dtype torch.float32, got {buffer.dtype}"
        )
    if buffer.ndim != 1:
        raise ValidationError(
            f"{name}: expected a flat 1D buffer, got shape {tuple(buffer.shape)}"
        )
    if not buffer.is_contiguous():
        raise ValidationError(f"{name}: buffer must be contiguous")
    if expected is not None and buffer.numel() != expected:
        raise DimensionError(
            f"{name}: expected {expected} elements, got {buffer.numel()}"
        )
    return buffer


def check_min_length(buffer: torch.Tensor, length: int, name: str) -> None:
    """
    Verify a device buffer holds at least `length` elements.

    Raises:
        DimensionError: If the buffer is too short
    """
    if buffer.numel() < length:
        raise DimensionError(
            f"{name}: requires at least {length} elements, got {buffer.numel()}"
        )


def check_parameters(
    params: NDArray[np.float32],
    name: str = 'params',
    min_length: int = 0,
) -> NDArray[np.float32]:
    """
    Verify a host parameter vector can be perturbed in place.

    The Jacobian estimators write perturbed values into this array and
    restore them afterwards, so it must be a writeable float32 ndarray:
    a list or a float64 array would be silently copied by numpy and the
    caller would never see the restoration.

    Args:
        params: Parameter vector
        name: Parameter name for error messages
        min_length: Minimum number of entries

    Returns:
        The same array (never a copy)

    Raises:
        ValidationError: If params is not a writeable 1D float32 ndarray
        DimensionError: If params has fewer than min_length entries
    """
    if not isinstance(params, np.ndarray):
        raise ValidationError(
            f"{name}: expected numpy.ndarray, got {type(params).__name__}"
        )
    if params.dtype != np.float32:
        raise ValidationError(
            f"{name}: expected dtype float32, got {params.dtype}"
        )
    if params.ndim != 1:
        raise ValidationError(
            f"{name}: expected 1D array, got {params.ndim}D with shape {params.shape}"
        )
    if not params.flags.writeable:
        raise ValidationError(f"{name}: array must be writeable")
    if params.shape[0] < min_length:
        raise DimensionError(
            f"{name}: requires at least {min_length} entries, got {params.shape[0]}"
        )
    return params


def check_same_device(*buffers: torch.Tensor, names: tuple[str, ...]) -> None:
    """
    Verify all buffers live on the same device.

    Raises:
        ValueError: If number of names doesn't match number of buffers
        ValidationError: If buffers are spread across devices
    """
    if len(buffers) != len(names):
        raise ValueError(
            f"Number of buffers ({len(buffers)}) must match number of names ({len(names)})"
        )
    devices = [buf.device for buf in buffers]
    if len(set(devices)) > 1:
        details = ", ".join(f"{n}={d}" for n, d in zip(names, devices))
        raise ValidationError(f"Buffers on different devices: {details}")
