"""
Portfolio summary model.

A PortfolioSummary is the valued view of a holdings snapshot. It is rebuilt
from the latest holdings on every read and has no storage of its own.
"""

from dataclasses import dataclass, field

import pandas as pd

from foliosync.core.models.holding import ValuedHolding
from foliosync.core.types.financial import HUNDRED, ZERO

SUMMARY_COLUMNS = [
    "id",
    "name",
    "ticker",
    "quantity",
    "purchase_price",
    "current_price",
    "total_value",
    "cost_basis",
    "profit_loss",
    "profit_loss_percent",
    "weight",
]


@dataclass(frozen=True)
class PortfolioSummary:
    """Aggregate valuation of a portfolio.

    Invariants:
        total_value == sum of holding total values
        total_profit_loss_percent == total_profit_loss / total_cost * 100 (0 if no cost)
    """

    total_value: float = ZERO
    total_cost: float = ZERO
    total_profit_loss: float = ZERO
    total_profit_loss_percent: float = ZERO
    holdings: tuple[ValuedHolding, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        """Check if the portfolio holds no positions."""
        return len(self.holdings) == 0

    def weight_of(self, holding: ValuedHolding) -> float:
        """Weight of a holding in this portfolio, in percent."""
        if self.total_value == ZERO:
            return ZERO
        return holding.total_value / self.total_value * HUNDRED

    def to_frame(self) -> pd.DataFrame:
        """Export positions as a DataFrame, one row per holding, in order."""
        rows = [
            {
                "id": h.id,
                "name": h.name,
                "ticker": h.ticker,
                "quantity": h.quantity,
                "purchase_price": h.purchase_price,
                "current_price": h.current_price,
                "total_value": h.total_value,
                "cost_basis": h.cost_basis,
                "profit_loss": h.profit_loss,
                "profit_loss_percent": h.profit_loss_percent,
                "weight": self.weight_of(h),
            }
            for h in self.holdings
        ]
        return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
