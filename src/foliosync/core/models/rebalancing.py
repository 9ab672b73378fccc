"""
Rebalancing option, calculation and result models.
"""

from dataclasses import dataclass, field

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from foliosync.core.constants import (
    DEFAULT_COMMISSION,
    MIN_TRADING_UNIT,
    REBALANCE_THRESHOLD,
)
from foliosync.core.enums import RoundingMode, TradeAction
from foliosync.core.types.financial import ZERO


class RebalancingOptions(BaseModel):
    """Options controlling how a rebalancing plan is derived."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    minimum_trading_unit: float = Field(
        default=MIN_TRADING_UNIT, gt=0, description="Smallest tradable quantity step"
    )
    rebalance_threshold: float = Field(
        default=REBALANCE_THRESHOLD,
        ge=0,
        le=100,
        description="Weight difference (percentage points) before trading",
    )
    commission: float = Field(
        default=DEFAULT_COMMISSION, ge=0, description="Commission per unit traded"
    )
    consider_commission: bool = Field(
        default=False, description="Deduct commission from realized trade values"
    )
    allow_fractional_shares: bool = Field(
        default=False, description="Skip minimum trading unit rounding"
    )
    rounding_mode: RoundingMode = Field(
        default=RoundingMode.FLOOR, description="Minimum trading unit rounding rule"
    )
    include_untargeted: bool = Field(
        default=False, description="Also plan sell-downs for holdings absent from the target"
    )


@dataclass(frozen=True)
class RebalancingCalculation:
    """Trade plan line for one matched position."""

    name: str
    ticker: str | None
    current_quantity: float
    current_price: float
    current_weight: float
    target_weight: float
    current_value: float
    target_value: float
    difference: float
    action: TradeAction
    quantity_change: float
    value_change: float
    minimum_trading_unit: float
    adjusted_quantity_change: float
    adjusted_value_change: float
    commission_cost: float = ZERO
    realized_value_change: float = ZERO

    @property
    def key(self) -> str:
        return self.ticker or self.name


@dataclass(frozen=True)
class TradingSummary:
    """Aggregate of the actionable lines of a plan."""

    total_trades: int = 0
    buy_trades: int = 0
    sell_trades: int = 0
    total_buy_value: float = ZERO
    total_sell_value: float = ZERO
    total_buy_quantity: float = ZERO
    total_sell_quantity: float = ZERO
    total_commission: float = ZERO
    net_cash_flow: float = ZERO


@dataclass(frozen=True)
class RebalancingResult:
    """Complete rebalancing plan."""

    calculations: tuple[RebalancingCalculation, ...]
    trading_summary: TradingSummary
    total_current_value: float
    total_target_value: float
    total_rebalance_value: float
    is_balanced: bool
    has_significant_differences: bool
    rebalance_threshold: float

    @property
    def actionable(self) -> tuple[RebalancingCalculation, ...]:
        """Lines that require an order."""
        return tuple(c for c in self.calculations if c.action.is_trade)

    def to_frame(self) -> pd.DataFrame:
        """Export the plan as a DataFrame, one row per calculation."""
        columns = [
            "name",
            "ticker",
            "action",
            "current_weight",
            "target_weight",
            "difference",
            "current_value",
            "target_value",
            "adjusted_quantity_change",
            "adjusted_value_change",
            "commission_cost",
        ]
        rows = [
            {
                "name": c.name,
                "ticker": c.ticker,
                "action": c.action.value,
                "current_weight": c.current_weight,
                "target_weight": c.target_weight,
                "difference": c.difference,
                "current_value": c.current_value,
                "target_value": c.target_value,
                "adjusted_quantity_change": c.adjusted_quantity_change,
                "adjusted_value_change": c.adjusted_value_change,
                "commission_cost": c.commission_cost,
            }
            for c in self.calculations
        ]
        return pd.DataFrame(rows, columns=columns)


@dataclass(frozen=True)
class CalculationReport:
    """Sanity report over a rebalancing result."""

    is_valid: bool
    issues: list[str] = field(default_factory=list)
