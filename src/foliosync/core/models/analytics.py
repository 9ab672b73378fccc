"""
Portfolio analytics result models.

The "risk" figures here are simple heuristics over current weights and
profit/loss percentages, not statistical risk models.
"""

from dataclasses import dataclass

from foliosync.core.enums import Priority, Severity, TradeAction
from foliosync.core.types.financial import ZERO


@dataclass(frozen=True)
class PortfolioComparison:
    """Current vs. target weight for one position."""

    current_weight: float
    target_weight: float
    difference: float
    is_significant: bool
    action: TradeAction


@dataclass(frozen=True)
class RiskMetrics:
    concentration: float = ZERO  # Highest single position weight
    volatility: float = ZERO  # Spread of per-position profit/loss percent
    diversification_ratio: float = ZERO  # 1 means a single position


@dataclass(frozen=True)
class PerformanceMetrics:
    total_return: float = ZERO
    total_return_percentage: float = ZERO
    top_performer: str | None = None
    worst_performer: str | None = None
    win_rate: float = ZERO  # Percentage of profitable positions


@dataclass(frozen=True)
class PortfolioAnalytics:
    total_value: float
    position_count: int
    diversification_score: float
    risk_metrics: RiskMetrics
    performance_metrics: PerformanceMetrics


@dataclass(frozen=True)
class HealthScore:
    """Blended 0-100 portfolio health score with its components."""

    overall: float
    diversification: float
    performance: float
    risk: float


@dataclass(frozen=True)
class Imbalance:
    """A significant deviation from the target allocation."""

    name: str
    difference: float
    issue: str
    recommendation: str
    severity: Severity


@dataclass(frozen=True)
class TradingInsights:
    total_trades: int
    buy_trades: int
    sell_trades: int
    total_value: float
    total_commission: float
    efficiency: float  # Value moved per trade
    priority: Priority
