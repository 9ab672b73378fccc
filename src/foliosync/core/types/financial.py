"""
Financial primitives for portfolio valuation and rebalancing.

All calculations use float. Holdings are entered by hand and valued at
display precision, so float64 (~15-16 significant digits) is ample. Compare
totals with a tolerance, never with ==.
"""

import math

from foliosync.core.enums import RoundingMode

# Common financial values as float constants
ZERO = 0.0
HUNDRED = 100.0

# Absorbs float noise such as 2.9999999999999996 units before flooring
_UNIT_EPSILON = 1e-9


def calculate_weight_difference(current_weight: float, target_weight: float) -> float:
    """Calculate the weight difference between current and target allocation.

    Args:
        current_weight: Current weight percentage
        target_weight: Target weight percentage

    Returns:
        Difference in percentage points (positive = overweight)

    Examples:
        >>> calculate_weight_difference(60, 50)
        10
        >>> calculate_weight_difference(40, 50)
        -10
    """
    return current_weight - target_weight


def is_rebalancing_needed(weight_difference: float, threshold: float) -> bool:
    """Check whether a weight difference exceeds the rebalance threshold.

    Args:
        weight_difference: Weight difference in percentage points
        threshold: Rebalance threshold in percentage points

    Returns:
        True if the absolute difference is strictly above the threshold
    """
    return abs(weight_difference) > threshold


def round_to_unit(
    quantity: float, unit: float, mode: RoundingMode = RoundingMode.FLOOR
) -> float:
    """Round a signed quantity to a whole multiple of the trading unit.

    The sign of the quantity is preserved; rounding applies to its magnitude.

    Args:
        quantity: Raw quantity change (negative for sells)
        unit: Minimum trading unit, must be positive
        mode: FLOOR truncates toward zero, NEAREST rounds half away from zero

    Returns:
        Quantity as a multiple of unit

    Raises:
        ValueError: If unit is not positive

    Examples:
        >>> round_to_unit(7.6, 1)
        7.0
        >>> round_to_unit(-7.6, 1, RoundingMode.NEAREST)
        -8.0
    """
    if unit <= ZERO:
        raise ValueError(f"Trading unit must be positive, got {unit}")

    units = abs(quantity) / unit
    if mode == RoundingMode.NEAREST:
        whole_units = math.floor(units + 0.5)
    else:
        whole_units = math.floor(units + _UNIT_EPSILON)

    return math.copysign(whole_units * unit, quantity) if whole_units else ZERO


def clamp(value: float, lower: float = ZERO, upper: float = HUNDRED) -> float:
    """Clamp a value into [lower, upper]."""
    return max(lower, min(upper, value))


def safe_float_comparison(a: float, b: float, tolerance: float = 1e-9) -> bool:
    """Compare floats with tolerance for precision issues.

    Args:
        a: First float to compare
        b: Second float to compare
        tolerance: Acceptable difference (default: 1e-9)

    Returns:
        True if floats are equal within tolerance

    Examples:
        >>> safe_float_comparison(0.1 + 0.2, 0.3)
        True
        >>> safe_float_comparison(100.0, 100.02, 0.01)
        False
    """
    return abs(a - b) <= tolerance
