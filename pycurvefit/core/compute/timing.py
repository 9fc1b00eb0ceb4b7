"""
Wall-clock timing of device work.

Device work is queued asynchronously, so a section's wall time only means
something if the device is drained at both ends of it. Timer drains the
device it was given at every boundary; on CPU that is a no-op.
"""

import time
from contextlib import contextmanager
from typing import Iterator

import torch


def synchronize(device: torch.device) -> None:
    """Block until all queued work on `device` has completed."""
    if device.type == 'cuda':
        torch.cuda.synchronize(device)
    elif device.type == 'mps':
        torch.mps.synchronize()


class Timer:
    """
    Overall timer plus named, accumulating sections.

    Usage:
        timer = Timer(device=J.device)
        timer.start()
        with timer.section('baseline'):
            model(f0, params, n)
        timer.stop()
        timer.result()   # {'total_seconds': ..., 'baseline': ...}
    """

    def __init__(self, device: torch.device | None = None):
        """
        Args:
            device: Device drained at every measurement boundary; None
                    measures host time only
        """
        self._device = device
        self._sections: dict[str, float] = {}
        self._t0: float | None = None
        self._elapsed: float | None = None

    def _now(self) -> float:
        if self._device is not None:
            synchronize(self._device)
        return time.perf_counter()

    def start(self) -> None:
        self._t0 = self._now()

    def stop(self) -> None:
        """
        Raises:
            RuntimeError: If start() was never called
        """
        t1 = self._now()
        if self._t0 is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._elapsed = t1 - self._t0

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """
        Add the wall time of the block to section `name`.

        Time is recorded even when the block raises. Re-entering a name
        adds to its total.
        """
        t0 = self._now()
        try:
            yield
        finally:
            self._sections[name] = self._sections.get(name, 0.0) + self._now() - t0

    def result(self) -> dict[str, float]:
        """
        Seconds per section plus 'total_seconds'.

        Raises:
            RuntimeError: If stop() has not been called
        """
        if self._elapsed is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._elapsed, **self._sections}
