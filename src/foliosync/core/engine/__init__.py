"""
Valuation, rebalancing and analytics calculations.
"""

from .analytics import AnalyticsService
from .rebalancing import RebalancingEngine, summarize_trades
from .valuation import (
    ProfitLoss,
    portfolio_cost,
    portfolio_value,
    profit_loss,
    summarize,
    value,
    value_holding,
    weight,
    weights,
)

__all__ = [
    "AnalyticsService",
    "RebalancingEngine",
    "summarize_trades",
    "ProfitLoss",
    "value",
    "weight",
    "weights",
    "profit_loss",
    "value_holding",
    "portfolio_value",
    "portfolio_cost",
    "summarize",
]
