"""
Core type definitions and utilities.
"""

# Re-export financial utilities for easy access
from .financial import (
    HUNDRED,
    ZERO,
    calculate_weight_difference,
    clamp,
    is_rebalancing_needed,
    round_to_unit,
    safe_float_comparison,
)

__all__ = [
    # Utility functions
    "round_to_unit",
    "clamp",
    "calculate_weight_difference",
    "is_rebalancing_needed",
    "safe_float_comparison",
    # Constants
    "ZERO",
    "HUNDRED",
]
