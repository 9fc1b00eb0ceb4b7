"""
Result envelope returned by the Jacobian estimators.

Carries the domain payload alongside metadata, timing and non-fatal
warnings, so a solver loop can inspect diagnostics without the estimator
deciding how to react to them. Results are frozen; the payload may still
reference caller-owned device buffers.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope, generic over the payload type P.

    Attributes:
        params: Domain payload (e.g. JacobianParams)
        info: Metadata such as 'method' and 'device'
        timing: Seconds per timed section plus 'total_seconds', or None
        backend_name: Code path that produced the result, e.g. 'cuda_adaptive'
        warnings: Human-readable descriptions of non-fatal problems
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """True if any warning message contains `substring`."""
        return any(substring in w for w in self.warnings)
