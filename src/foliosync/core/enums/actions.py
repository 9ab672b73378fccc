"""
Trade action and severity enumerations.

This module defines the rebalancing actions and the imbalance severity scale.
"""

from enum import StrEnum


class TradeAction(StrEnum):
    """
    Rebalancing actions.

    Defines what a position needs to move towards its target weight.
    """

    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"

    @property
    def is_trade(self) -> bool:
        """Check if action requires an order."""
        return self != self.HOLD

    @classmethod
    def from_difference(cls, difference: float, threshold: float) -> "TradeAction":
        """
        Classify a weight difference against a rebalance threshold.

        Args:
            difference: Current weight minus target weight (percentage points)
            threshold: Rebalance threshold (percentage points)

        Returns:
            HOLD within the threshold, SELL when overweight, BUY when underweight
        """
        if abs(difference) <= threshold:
            return cls.HOLD
        return cls.SELL if difference > 0 else cls.BUY


class Severity(StrEnum):
    """Imbalance severity levels."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank, higher is more severe."""
        ranks = {
            Severity.HIGH: 3,
            Severity.MEDIUM: 2,
            Severity.LOW: 1,
        }
        return ranks[self]


class Priority(StrEnum):
    """Trading plan priority levels."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RoundingMode(StrEnum):
    """
    Minimum trading unit rounding rules.

    FLOOR rounds the quantity magnitude down (never overshoots the target),
    NEAREST rounds to the closest multiple of the unit.
    """

    FLOOR = "floor"
    NEAREST = "nearest"
