"""
Unit tests for financial primitives.
Testing weight differences, threshold checks, rounding and comparisons.
"""

import pytest

from foliosync.core.enums import RoundingMode
from foliosync.core.types.financial import (
    HUNDRED,
    ZERO,
    calculate_weight_difference,
    clamp,
    is_rebalancing_needed,
    round_to_unit,
    safe_float_comparison,
)


class TestFinancialConstants:
    def test_should_expose_constants(self) -> None:
        assert ZERO == 0.0
        assert HUNDRED == 100.0


class TestWeightDifference:
    """Test suite for weight difference and threshold checks."""

    def test_should_be_positive_when_overweight(self) -> None:
        """Test that overweight positions have a positive difference."""
        assert calculate_weight_difference(60, 50) == 10
        assert calculate_weight_difference(40, 50) == -10

    def test_should_require_difference_strictly_above_threshold(self) -> None:
        """Test that exactly the threshold does not trigger rebalancing."""
        assert is_rebalancing_needed(5.0, 5.0) is False
        assert is_rebalancing_needed(-5.0, 5.0) is False
        assert is_rebalancing_needed(5.01, 5.0) is True
        assert is_rebalancing_needed(-6.0, 5.0) is True

    def test_should_trigger_on_any_difference_with_zero_threshold(self) -> None:
        assert is_rebalancing_needed(0.001, 0.0) is True
        assert is_rebalancing_needed(0.0, 0.0) is False


class TestRoundToUnit:
    """Test suite for minimum trading unit rounding."""

    def test_should_floor_toward_zero_by_default(self) -> None:
        """Test FLOOR rounds magnitude down for buys and sells."""
        assert round_to_unit(7.6, 1) == 7.0
        assert round_to_unit(-7.6, 1) == -7.0

    def test_should_round_to_nearest_multiple(self) -> None:
        """Test NEAREST rounds half away from zero."""
        assert round_to_unit(7.6, 1, RoundingMode.NEAREST) == 8.0
        assert round_to_unit(-7.6, 1, RoundingMode.NEAREST) == -8.0
        assert round_to_unit(7.4, 1, RoundingMode.NEAREST) == 7.0
        assert round_to_unit(2.5, 1, RoundingMode.NEAREST) == 3.0

    def test_should_respect_unit_size(self) -> None:
        """Test rounding to lots larger than one share."""
        assert round_to_unit(27.0, 10) == 20.0
        assert round_to_unit(27.0, 10, RoundingMode.NEAREST) == 30.0
        assert round_to_unit(-0.75, 0.5) == -0.5

    def test_should_absorb_float_noise_below_a_whole_unit(self) -> None:
        """Test that 0.3 / 0.1 == 2.9999999999999996 units counts as 3."""
        assert round_to_unit(0.3, 0.1) == pytest.approx(0.3)

    def test_should_return_zero_below_one_unit(self) -> None:
        assert round_to_unit(0.4, 1) == ZERO
        assert round_to_unit(-0.4, 1, RoundingMode.NEAREST) == ZERO

    def test_should_reject_non_positive_unit(self) -> None:
        with pytest.raises(ValueError, match="Trading unit must be positive"):
            round_to_unit(5.0, 0)


class TestHelpers:
    """Test suite for clamp and float comparison."""

    def test_should_clamp_into_percentage_range(self) -> None:
        assert clamp(-5.0) == 0.0
        assert clamp(150.0) == 100.0
        assert clamp(42.0) == 42.0
        assert clamp(5.0, 10.0, 20.0) == 10.0

    def test_should_compare_floats_with_tolerance(self) -> None:
        assert safe_float_comparison(0.1 + 0.2, 0.3) is True
        assert safe_float_comparison(100.0, 100.02, 0.01) is False
