"""
Numerical precision constants and step-size utilities.

Finite-difference steps, clamp floors and kernel geometry used by the
Jacobian estimators and the device primitives. All device buffers are
float32; host-side step arithmetic is done in float64 or extended precision
and rounded once.
"""

import numpy as np


# Absolute step of the fixed-step estimator
FIXED_STEP: float = 2.0 ** -17

# Relative step of the adaptive estimator (multiplied by |param|)
RELATIVE_STEP: float = 2.0 ** -10

# Floor on the magnitude of an adaptive step. Representable in float32
# (smallest normal is ~1.18e-38), so a zero parameter still moves.
MIN_STEP: float = 1e-30

# Square tile edge of the shared-memory transpose
TILE_DIM: int = 32

# Default block size for element-wise kernels
THREADS_PER_BLOCK: int = 256


def perturb(value: np.float32, step: float) -> np.float32:
    """
    Return value + step rounded once to float32.

    Args:
        value: Current (float32) parameter value
        step: Absolute step in float64

    Returns:
        The perturbed parameter as float32
    """
    return np.float32(np.float64(value) + step)


def adaptive_step(
    value: np.float32,
    relative: float = RELATIVE_STEP,
    floor: float = MIN_STEP,
) -> tuple[float, bool]:
    """
    Step proportional to the parameter's own magnitude.

    Args:
        value: Current (float32) parameter value
        relative: Relative step size
        floor: Minimum absolute step

    Returns:
        (step, clamped) where clamped is True if the floor was applied.
        The step keeps the sign of value unless clamped, in which case
        it is +floor.
    """
    step = float(np.float64(value) * relative)
    if abs(step) < floor:
        return floor, True
    return step, False


def reciprocal(step: float) -> float:
    """
    1/step evaluated in extended precision.

    Multiplying by 1/step after subtracting two float32 evaluations
    compounds rounding; dividing in np.longdouble keeps the scale factor
    itself exact to float64 before it reaches the device.
    """
    return float(np.longdouble(1) / np.longdouble(step))


def adaptive_reciprocal(value: np.float32, relative: float, step: float, clamped: bool) -> float:
    """
    Scale factor 1/(value * relative) for an adaptive column.

    The product is re-formed from the original parameter value in extended
    precision rather than reusing the rounded float64 step. A clamped column
    uses the floor directly since value * relative would vanish.
    """
    if clamped:
        return reciprocal(step)
    return float(np.longdouble(1) / (np.longdouble(value) * np.longdouble(relative)))
