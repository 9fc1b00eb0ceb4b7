"""
Explicit compute context.

A ComputeContext bundles what every device primitive needs: the target
device, the working dtype, and on CUDA a dedicated stream on which all of
the primitive's kernels and library calls are queued. It plays the role of
the linear algebra library handle.

Primitives accept ctx=None, in which case they open a context for the
device of their first buffer and close it again before returning. A solver
that calls the Jacobian estimator and the matrix primitives many times per
iteration should instead open one context and pass it to every call:

    with ComputeContext('cuda') as ctx:
        for _ in range(max_iter):
            estimate_jacobian_adaptive(J, model, params, n, k, ctx=ctx)
            matmul(J, J, JtJ, 1.0, 0.0, True, False, k, n, k, ctx=ctx)
            ctx.synchronize()
            ...

Closing a context drains its stream.
"""

from contextlib import contextmanager
from typing import Iterator

import torch

from pycurvefit.core.compute.device import DeviceInfo, info_for, select_device
from pycurvefit.core.compute.timing import synchronize
from pycurvefit.core.exceptions import ContextError, ValidationError


def same_device(a: torch.device, b: torch.device) -> bool:
    """True if a and b name the same device; a missing index matches any."""
    if a.type != b.type:
        return False
    return a.index is None or b.index is None or a.index == b.index


class ComputeContext:
    """
    Device, dtype and work queue shared by a sequence of primitive calls.

    Attributes:
        device_info: Description of the selected device
        device: The torch.device all buffers must live on
        dtype: Working dtype of device buffers (always torch.float32)
    """

    def __init__(self, device: str | torch.device = 'auto'):
        """
        Open a context.

        Args:
            device: 'cpu', 'gpu', 'auto', a torch device string such as
                    'cuda:1' or 'mps', or a torch.device
        """
        if isinstance(device, torch.device):
            self.device_info: DeviceInfo = info_for(device)
        else:
            self.device_info = select_device(device)
        self.device = self.device_info.torch_device
        self.dtype = torch.float32

        self._stream = None
        if self.device.type == 'cuda':
            self._stream = torch.cuda.Stream(device=self.device)
        self._closed = False
        self._live_scratch = 0

    @classmethod
    def for_buffer(cls, buffer: torch.Tensor) -> 'ComputeContext':
        """Open a context on the device that holds `buffer`."""
        return cls(buffer.device)

    @property
    def name(self) -> str:
        """Short device label used in backend names, e.g. 'cpu', 'cuda'."""
        return self.device.type

    @property
    def is_cuda(self) -> bool:
        return self.device.type == 'cuda'

    @property
    def stream(self) -> 'torch.cuda.Stream | None':
        """The CUDA stream work is queued on (None off CUDA)."""
        self._check_open()
        return self._stream

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def live_scratch(self) -> int:
        """Number of scratch buffers currently checked out."""
        return self._live_scratch

    def _check_open(self) -> None:
        if self._closed:
            raise ContextError(f"{self!r} has been closed")

    def check_buffer_device(self, buffer: torch.Tensor, name: str) -> None:
        """
        Verify `buffer` lives on this context's device.

        Raises:
            ValidationError: If it does not
        """
        if not same_device(buffer.device, self.device):
            raise ValidationError(
                f"{name}: buffer is on {buffer.device}, context is on {self.device}"
            )

    @contextmanager
    def activate(self) -> Iterator['ComputeContext']:
        """
        Route work issued inside the block to this context's stream.

        The stream first waits for work already queued on the current
        stream, so buffers the caller filled there are complete before
        this context reads them.
        """
        self._check_open()
        if self._stream is None:
            yield self
            return
        self._stream.wait_stream(torch.cuda.current_stream(self.device))
        with torch.cuda.stream(self._stream):
            yield self

    @contextmanager
    def scratch(self, *lengths: int) -> Iterator[tuple[torch.Tensor, ...]]:
        """
        Check out zero-initialised scratch buffers for the duration of a block.

        Buffers are released on every exit path, including exceptions raised
        inside the block.

        Args:
            *lengths: Element count of each buffer

        Yields:
            Tuple of float32 buffers, one per length
        """
        self._check_open()
        buffers = tuple(
            torch.zeros(length, dtype=self.dtype, device=self.device)
            for length in lengths
        )
        self._live_scratch += len(buffers)
        try:
            yield buffers
        finally:
            self._live_scratch -= len(buffers)
            del buffers

    def synchronize(self) -> None:
        """Block until all work queued through this context has completed."""
        self._check_open()
        if self._stream is not None:
            self._stream.synchronize()
        else:
            synchronize(self.device)

    def close(self) -> None:
        """Drain outstanding work and release the stream. Idempotent."""
        if self._closed:
            return
        self.synchronize()
        self._stream = None
        self._closed = True

    def __enter__(self) -> 'ComputeContext':
        self._check_open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = 'closed' if self._closed else 'open'
        return f"ComputeContext(device={str(self.device)!r}, {state})"


@contextmanager
def context_for(
    ctx: ComputeContext | None,
    buffer: torch.Tensor,
    name: str,
) -> Iterator[ComputeContext]:
    """
    Yield an active context for a primitive call.

    With an explicit ctx, checks the buffer is on its device and activates
    it. With ctx=None, opens a context on the buffer's device for the
    duration of the call and closes it afterwards.
    """
    if ctx is not None:
        ctx.check_buffer_device(buffer, name)
        with ctx.activate():
            yield ctx
        return

    ephemeral = ComputeContext.for_buffer(buffer)
    try:
        with ephemeral.activate():
            yield ephemeral
    finally:
        ephemeral.close()
