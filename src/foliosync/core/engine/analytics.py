"""
Portfolio analytics.

Heuristic scores derived from a valued portfolio and, for the comparison
views, a target allocation. Every function degrades to 0 or neutral values
on an empty portfolio.
"""

import numpy as np
from loguru import logger

from foliosync.core.constants import (
    HEALTH_DIVERSIFICATION_WEIGHT,
    HEALTH_PERFORMANCE_WEIGHT,
    HEALTH_RISK_WEIGHT,
    HIGH_PRIORITY_BUY_VALUE,
    HIGH_PRIORITY_TRADES,
    HIGH_SEVERITY_DIFFERENCE,
    MEDIUM_PRIORITY_BUY_VALUE,
    MEDIUM_PRIORITY_TRADES,
    MEDIUM_SEVERITY_DIFFERENCE,
    REBALANCE_THRESHOLD,
)
from foliosync.core.enums import Priority, Severity, TradeAction
from foliosync.core.models.analytics import (
    HealthScore,
    Imbalance,
    PerformanceMetrics,
    PortfolioAnalytics,
    PortfolioComparison,
    RiskMetrics,
    TradingInsights,
)
from foliosync.core.models.portfolio import PortfolioSummary
from foliosync.core.models.rebalancing import RebalancingCalculation, RebalancingOptions
from foliosync.core.models.target_allocation import TargetAllocation
from foliosync.core.types.financial import HUNDRED, ZERO, clamp, is_rebalancing_needed

from .rebalancing import RebalancingEngine, summarize_trades
from .valuation import weights


class AnalyticsService:
    """Scores and insights over valued portfolios."""

    def __init__(self, engine: RebalancingEngine | None = None) -> None:
        self.engine = engine or RebalancingEngine()

    def compare_portfolios(
        self,
        current: PortfolioSummary,
        target: TargetAllocation,
        threshold: float = REBALANCE_THRESHOLD,
    ) -> dict[str, PortfolioComparison]:
        """Compare current weights with a target allocation.

        Args:
            current: Valued current portfolio
            target: Target allocation
            threshold: Rebalance threshold in percentage points

        Returns:
            Comparison per matching key, largest difference first. When two lines
            share a key only the first (larger difference) is kept.
        """
        result = self.engine.calculate(
            current, target, RebalancingOptions(rebalance_threshold=threshold)
        )

        comparison: dict[str, PortfolioComparison] = {}
        for calc in result.calculations:
            if calc.key in comparison:
                logger.warning(f"Duplicate position '{calc.key}' in '{target.name}'; keeping first")
                continue
            comparison[calc.key] = PortfolioComparison(
                current_weight=calc.current_weight,
                target_weight=calc.target_weight,
                difference=calc.difference,
                is_significant=is_rebalancing_needed(calc.difference, threshold),
                action=calc.action,
            )
        return comparison

    def calculate_diversification_score(self, portfolio: PortfolioSummary) -> float:
        """Score 0-100 of how close the weights are to an equal split."""
        if portfolio.is_empty:
            return ZERO

        current = np.asarray(weights(portfolio), dtype=float)
        ideal = HUNDRED / len(current)
        mean_deviation = float(np.mean(np.abs(current - ideal)))

        return float(round(max(ZERO, HUNDRED - mean_deviation * 2)))

    def calculate_risk_metrics(self, portfolio: PortfolioSummary) -> RiskMetrics:
        """Concentration, profit/loss spread and diversification ratio."""
        if portfolio.is_empty:
            return RiskMetrics()

        concentration = float(np.max(weights(portfolio)))
        returns = np.asarray([h.profit_loss_percent for h in portfolio.holdings], dtype=float)
        volatility = float(np.std(returns))  # population standard deviation
        diversification_ratio = HUNDRED / concentration if concentration > ZERO else ZERO

        return RiskMetrics(
            concentration=concentration,
            volatility=volatility,
            diversification_ratio=diversification_ratio,
        )

    def calculate_performance_metrics(self, portfolio: PortfolioSummary) -> PerformanceMetrics:
        """Returns, best/worst positions and win rate."""
        holdings = portfolio.holdings
        if not holdings:
            return PerformanceMetrics(
                total_return=portfolio.total_profit_loss,
                total_return_percentage=portfolio.total_profit_loss_percent,
            )

        ranked = sorted(holdings, key=lambda h: h.profit_loss_percent, reverse=True)
        profitable = sum(1 for h in holdings if h.profit_loss > ZERO)

        return PerformanceMetrics(
            total_return=portfolio.total_profit_loss,
            total_return_percentage=portfolio.total_profit_loss_percent,
            top_performer=ranked[0].name,
            worst_performer=ranked[-1].name,
            win_rate=profitable / len(holdings) * HUNDRED,
        )

    def calculate_portfolio_analytics(self, portfolio: PortfolioSummary) -> PortfolioAnalytics:
        return PortfolioAnalytics(
            total_value=portfolio.total_value,
            position_count=len(portfolio.holdings),
            diversification_score=self.calculate_diversification_score(portfolio),
            risk_metrics=self.calculate_risk_metrics(portfolio),
            performance_metrics=self.calculate_performance_metrics(portfolio),
        )

    def calculate_health_score(self, portfolio: PortfolioSummary) -> HealthScore:
        """Blend diversification, performance and risk into a 0-100 score.

        Performance is 50 plus half the win rate; risk is 100 minus the
        concentration. All components are clamped to [0, 100] and rounded.
        """
        analytics = self.calculate_portfolio_analytics(portfolio)

        diversification = clamp(analytics.diversification_score)
        performance = clamp(50 + analytics.performance_metrics.win_rate * 0.5)
        risk = clamp(HUNDRED - analytics.risk_metrics.concentration)

        overall = (
            diversification * HEALTH_DIVERSIFICATION_WEIGHT
            + performance * HEALTH_PERFORMANCE_WEIGHT
            + risk * HEALTH_RISK_WEIGHT
        )

        return HealthScore(
            overall=float(round(overall)),
            diversification=float(round(diversification)),
            performance=float(round(performance)),
            risk=float(round(risk)),
        )

    def detect_imbalances(
        self,
        current: PortfolioSummary,
        target: TargetAllocation,
        threshold: float = REBALANCE_THRESHOLD,
    ) -> list[Imbalance]:
        """List significant deviations from the target, most severe first."""
        imbalances: list[Imbalance] = []

        for key, comp in self.compare_portfolios(current, target, threshold).items():
            if not comp.is_significant:
                continue

            magnitude = abs(comp.difference)
            if magnitude > HIGH_SEVERITY_DIFFERENCE:
                severity = Severity.HIGH
            elif magnitude > MEDIUM_SEVERITY_DIFFERENCE:
                severity = Severity.MEDIUM
            else:
                severity = Severity.LOW

            if comp.difference > ZERO:
                issue = f"Overweight by {magnitude:.1f}%"
            else:
                issue = f"Underweight by {magnitude:.1f}%"

            if comp.action == TradeAction.BUY:
                recommendation = f"Consider buying more {key}"
            else:
                recommendation = f"Consider reducing {key} position"

            imbalances.append(
                Imbalance(
                    name=key,
                    difference=comp.difference,
                    issue=issue,
                    recommendation=recommendation,
                    severity=severity,
                )
            )

        imbalances.sort(key=lambda i: i.severity.rank, reverse=True)
        if imbalances:
            logger.debug(f"Detected {len(imbalances)} imbalances in '{target.name}'")
        return imbalances

    def generate_trading_insights(
        self, calculations: list[RebalancingCalculation], commission: float = ZERO
    ) -> TradingInsights:
        """Summarize a plan's trades and rate how urgent it is.

        Args:
            calculations: Plan lines from RebalancingEngine
            commission: Commission per unit, applied to actionable lines

        Returns:
            TradingInsights with efficiency as value moved per trade
        """
        summary = summarize_trades(list(calculations))
        total_commission = summary.total_commission
        if commission > ZERO:
            total_commission = sum(
                (
                    abs(c.adjusted_quantity_change) * commission
                    for c in calculations
                    if c.action.is_trade
                ),
                ZERO,
            )

        total_value = summary.total_buy_value + summary.total_sell_value
        efficiency = total_value / summary.total_trades if summary.total_trades > 0 else ZERO

        if (
            summary.total_trades > HIGH_PRIORITY_TRADES
            or summary.total_buy_value > HIGH_PRIORITY_BUY_VALUE
        ):
            priority = Priority.HIGH
        elif (
            summary.total_trades > MEDIUM_PRIORITY_TRADES
            or summary.total_buy_value > MEDIUM_PRIORITY_BUY_VALUE
        ):
            priority = Priority.MEDIUM
        else:
            priority = Priority.LOW

        return TradingInsights(
            total_trades=summary.total_trades,
            buy_trades=summary.buy_trades,
            sell_trades=summary.sell_trades,
            total_value=total_value,
            total_commission=total_commission,
            efficiency=efficiency,
            priority=priority,
        )
