"""
Tolerance tiers for numerical validation.

Defines precision expectations for the float32 device primitives:
- Exact data movement (copy, transpose): bit-for-bit
- Dense products and SVD: single-precision rounding
- Fixed-step Jacobian: dominated by cancellation at an absolute 2^-17 step
- Adaptive Jacobian: relative 2^-10 step, truncation-limited

Used by the test suite and available to callers deciding how far to trust
an estimated Jacobian.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


EXACT = ToleranceTier(
    rtol=0.0,
    atol=0.0,
    name='exact',
    description='Pure data movement, bitwise equal',
)

MATMUL_FP32 = ToleranceTier(
    rtol=1e-5,
    atol=1e-5,
    name='matmul_fp32',
    description='Dense float32 products (cuBLAS / host BLAS)',
)

SVD_FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-5,
    name='svd_fp32',
    description='Float32 SVD factors and reconstruction',
)

# float32 values near 1 carry ~1.2e-7 absolute error; divided by a 2^-17
# step that becomes ~1.6e-2 relative error in a derivative of order 1.
JACOBIAN_FIXED = ToleranceTier(
    rtol=5e-2,
    atol=5e-2,
    name='jacobian_fixed',
    description='Fixed absolute step 2^-17, float32 model evaluations',
)

JACOBIAN_ADAPTIVE = ToleranceTier(
    rtol=5e-3,
    atol=5e-3,
    name='jacobian_adaptive',
    description='Relative step 2^-10, float32 model evaluations',
)


def select_tolerance(operation: str) -> ToleranceTier:
    """Select the tolerance tier for a primitive by name."""
    tiers = {
        'copy': EXACT,
        'transpose': EXACT,
        'matmul': MATMUL_FP32,
        'diagmul': MATMUL_FP32,
        'svd': SVD_FP32,
        'fixed': JACOBIAN_FIXED,
        'adaptive': JACOBIAN_ADAPTIVE,
    }
    try:
        return tiers[operation]
    except KeyError:
        raise ValueError(
            f"Unknown operation: {operation!r}. "
            f"Expected one of {sorted(tiers)}"
        ) from None
