"""
Element-wise vector primitives over device buffers.

All operations act on the leading `length` elements (default: the whole
output buffer), write through `out` in place, and queue their work on the
context's stream without synchronizing. `out` may alias an input.
"""

import torch

from pycurvefit.core.compute.context import ComputeContext, context_for
from pycurvefit.core.validation import (
    check_buffer,
    check_dimension,
    check_min_length,
    check_same_device,
)


def _prepare(
    out: torch.Tensor,
    inputs: dict[str, torch.Tensor],
    length: int | None,
) -> int:
    """Validate buffers for an element-wise op and resolve its length."""
    check_buffer(out, 'out')
    for name, buf in inputs.items():
        check_buffer(buf, name)
    check_same_device(out, *inputs.values(), names=('out', *inputs))

    if length is None:
        length = out.numel()
    else:
        length = check_dimension(length, 'length', allow_zero=True)
        check_min_length(out, length, 'out')
    for name, buf in inputs.items():
        check_min_length(buf, length, name)
    return length


def add(
    a: torch.Tensor,
    b: torch.Tensor,
    out: torch.Tensor,
    length: int | None = None,
    ctx: ComputeContext | None = None,
) -> torch.Tensor:
    """out = a + b."""
    length = _prepare(out, {'a': a, 'b': b}, length)
    with context_for(ctx, out, 'out'):
        torch.add(a[:length], b[:length], out=out[:length])
    return out


def subtract(
    a: torch.Tensor,
    b: torch.Tensor,
    out: torch.Tensor,
    length: int | None = None,
    ctx: ComputeContext | None = None,
) -> torch.Tensor:
    """
    out = a - b.

    Args:
        a: Minuend buffer
        b: Subtrahend buffer
        out: Destination (may be a or b)
        length: Number of leading elements to process
        ctx: Compute context; a per-call context is used if None

    Returns:
        out
    """
    length = _prepare(out, {'a': a, 'b': b}, length)
    with context_for(ctx, out, 'out'):
        torch.sub(a[:length], b[:length], out=out[:length])
    return out


def scale(
    buffer: torch.Tensor,
    factor: float,
    out: torch.Tensor,
    length: int | None = None,
    ctx: ComputeContext | None = None,
) -> torch.Tensor:
    """
    out = factor * buffer.

    factor is rounded to float32 on the device.
    """
    length = _prepare(out, {'buffer': buffer}, length)
    with context_for(ctx, out, 'out'):
        torch.mul(buffer[:length], float(factor), out=out[:length])
    return out


def copy(
    dst: torch.Tensor,
    src: torch.Tensor,
    length: int | None = None,
    ctx: ComputeContext | None = None,
) -> torch.Tensor:
    """dst = src, element for element."""
    length = _prepare(dst, {'src': src}, length)
    with context_for(ctx, dst, 'dst'):
        dst[:length].copy_(src[:length])
    return dst
