"""
Rebalancing engine.

Compares a valued portfolio against a target allocation and derives a
per-position trade plan plus a trading summary.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from loguru import logger

from foliosync.core.constants import (
    EXTREME_REBALANCE_RATIO,
    TOTAL_PORTFOLIO_WEIGHT,
    WEIGHT_TOLERANCE,
)
from foliosync.core.enums import TradeAction
from foliosync.core.models.portfolio import PortfolioSummary
from foliosync.core.models.rebalancing import (
    CalculationReport,
    RebalancingCalculation,
    RebalancingOptions,
    RebalancingResult,
    TradingSummary,
)
from foliosync.core.models.target_allocation import TargetAllocation, TargetPosition
from foliosync.core.types.financial import (
    HUNDRED,
    ZERO,
    calculate_weight_difference,
    is_rebalancing_needed,
    round_to_unit,
    safe_float_comparison,
)

from .valuation import weight


@dataclass(frozen=True)
class CurrentPosition:
    """Holdings sharing one matching key, merged into a single position."""

    name: str
    ticker: str | None
    quantity: float
    value: float

    @property
    def price(self) -> float:
        return self.value / self.quantity if self.quantity > ZERO else ZERO


class PositionLookup:
    """Index of current positions by ticker and by display name.

    A target position matches by ticker when both sides carry one, and by
    display name otherwise. Each current position is claimed by at most one
    target line; later lines for the same position count as not held.
    """

    def __init__(self, summary: PortfolioSummary) -> None:
        self._positions: dict[str, CurrentPosition] = {}
        self._by_ticker: dict[str, str] = {}
        self._by_name: dict[str, str] = {}
        self._by_name_without_ticker: dict[str, str] = {}
        self._matched: set[str] = set()

        for holding in summary.holdings:
            key = holding.matching_key
            existing = self._positions.get(key)
            if existing is None:
                self._positions[key] = CurrentPosition(
                    name=holding.name,
                    ticker=holding.ticker,
                    quantity=holding.quantity,
                    value=holding.total_value,
                )
            else:
                self._positions[key] = CurrentPosition(
                    name=existing.name,
                    ticker=existing.ticker,
                    quantity=existing.quantity + holding.quantity,
                    value=existing.value + holding.total_value,
                )
            if holding.ticker:
                self._by_ticker.setdefault(holding.ticker, key)
            else:
                self._by_name_without_ticker.setdefault(holding.name, key)
            self._by_name.setdefault(holding.name, key)

    def match(self, target: TargetPosition) -> CurrentPosition | None:
        """Find the current position for a target line, if held and unclaimed."""
        if target.ticker:
            key = self._by_ticker.get(target.ticker)
            if key is None:
                # A ticker on both sides must agree; only ticker-less holdings match by name
                key = self._by_name_without_ticker.get(target.name)
        else:
            key = self._by_name.get(target.name)

        if key is None:
            return None
        if key in self._matched:
            logger.debug(f"Position {key} already matched; '{target.name}' counts as not held")
            return None
        self._matched.add(key)
        return self._positions[key]

    def unmatched(self) -> list[CurrentPosition]:
        """Current positions no target line has claimed, in holding order."""
        return [p for key, p in self._positions.items() if key not in self._matched]


class RebalancingEngine:
    """Derives buy/sell/hold plans from current vs. target weights."""

    def __init__(self, options: RebalancingOptions | None = None) -> None:
        """Initialize with default options.

        Args:
            options: Options used when calculate() is not given any
        """
        self.options = options or RebalancingOptions()

    def calculate(
        self,
        current: PortfolioSummary,
        target: TargetAllocation,
        options: RebalancingOptions | None = None,
        prices: Mapping[str, float] | None = None,
    ) -> RebalancingResult:
        """Calculate the rebalancing plan.

        Args:
            current: Valued current portfolio
            target: Target allocation, already validated
            options: Overrides the engine's default options
            prices: Price proxies by ticker or name for positions not held yet

        Returns:
            RebalancingResult ordered by descending absolute weight difference
        """
        opts = options or self.options
        prices = prices or {}
        lookup = PositionLookup(current)

        calculations: list[RebalancingCalculation] = []
        for position in target.positions:
            held = lookup.match(position)
            price = held.price if held else self._price_proxy(position, prices)
            calculations.append(
                self._calculate_position(
                    name=position.name,
                    ticker=position.ticker or (held.ticker if held else None),
                    quantity=held.quantity if held else ZERO,
                    current_value=held.value if held else ZERO,
                    price=price,
                    target_weight=position.target_weight,
                    total_value=current.total_value,
                    opts=opts,
                )
            )

        if opts.include_untargeted:
            for held in lookup.unmatched():
                calculations.append(
                    self._calculate_position(
                        name=held.name,
                        ticker=held.ticker,
                        quantity=held.quantity,
                        current_value=held.value,
                        price=held.price,
                        target_weight=ZERO,
                        total_value=current.total_value,
                        opts=opts,
                    )
                )

        calculations.sort(key=lambda c: abs(c.difference), reverse=True)
        summary = summarize_trades(calculations)

        has_significant = any(
            is_rebalancing_needed(c.difference, opts.rebalance_threshold) for c in calculations
        )
        is_balanced = not any(c.action.is_trade for c in calculations)

        logger.debug(
            f"Rebalancing plan for '{target.name}': {summary.total_trades} trades "
            f"({summary.buy_trades} buy, {summary.sell_trades} sell)"
        )

        return RebalancingResult(
            calculations=tuple(calculations),
            trading_summary=summary,
            total_current_value=current.total_value,
            total_target_value=current.total_value,
            total_rebalance_value=abs(summary.total_buy_value - summary.total_sell_value),
            is_balanced=is_balanced,
            has_significant_differences=has_significant,
            rebalance_threshold=opts.rebalance_threshold,
        )

    @staticmethod
    def _price_proxy(position: TargetPosition, prices: Mapping[str, float]) -> float:
        if position.ticker and position.ticker in prices:
            return prices[position.ticker]
        return prices.get(position.name, ZERO)

    @staticmethod
    def _calculate_position(
        name: str,
        ticker: str | None,
        quantity: float,
        current_value: float,
        price: float,
        target_weight: float,
        total_value: float,
        opts: RebalancingOptions,
    ) -> RebalancingCalculation:
        """Build the plan line for one position."""
        current_weight = weight(current_value, total_value)
        target_value = target_weight / HUNDRED * total_value
        difference = calculate_weight_difference(current_weight, target_weight)
        value_change = target_value - current_value
        action = TradeAction.from_difference(difference, opts.rebalance_threshold)

        quantity_change = ZERO
        if price > ZERO and action.is_trade:
            quantity_change = value_change / price

        adjusted_quantity = quantity_change
        if not opts.allow_fractional_shares and quantity_change != ZERO:
            adjusted_quantity = round_to_unit(
                quantity_change, opts.minimum_trading_unit, opts.rounding_mode
            )
        adjusted_value = adjusted_quantity * price

        commission_cost = ZERO
        if opts.consider_commission:
            commission_cost = abs(adjusted_quantity) * opts.commission

        # Commission shrinks what the trade actually moves, never flips its sign
        realized_magnitude = max(ZERO, abs(adjusted_value) - commission_cost)
        realized_value = realized_magnitude if adjusted_value >= ZERO else -realized_magnitude

        return RebalancingCalculation(
            name=name,
            ticker=ticker,
            current_quantity=quantity,
            current_price=price,
            current_weight=current_weight,
            target_weight=target_weight,
            current_value=current_value,
            target_value=target_value,
            difference=difference,
            action=action,
            quantity_change=quantity_change,
            value_change=value_change,
            minimum_trading_unit=opts.minimum_trading_unit,
            adjusted_quantity_change=adjusted_quantity,
            adjusted_value_change=adjusted_value,
            commission_cost=commission_cost,
            realized_value_change=realized_value,
        )

    @staticmethod
    def recommendations(result: RebalancingResult) -> list[str]:
        """Human-readable guidance lines for a plan."""
        if result.is_balanced:
            return ["Your portfolio is well-balanced and aligned with your target allocation."]

        lines: list[str] = []
        buys = [
            c
            for c in result.calculations
            if c.action == TradeAction.BUY and c.adjusted_quantity_change > ZERO
        ]
        sells = [
            c
            for c in result.calculations
            if c.action == TradeAction.SELL and c.adjusted_quantity_change < ZERO
        ]

        if buys:
            lines.append("Consider buying:")
            lines.extend(
                f"  • {c.name}: {abs(c.adjusted_quantity_change):g} shares "
                f"(${abs(c.adjusted_value_change):,.2f})"
                for c in buys
            )
        if sells:
            lines.append("Consider selling:")
            lines.extend(
                f"  • {c.name}: {abs(c.adjusted_quantity_change):g} shares "
                f"(${abs(c.adjusted_value_change):,.2f})"
                for c in sells
            )
        if result.total_rebalance_value > ZERO:
            lines.append(f"Total rebalancing value: ${result.total_rebalance_value:,.2f}")

        return lines

    @staticmethod
    def validate_result(result: RebalancingResult) -> CalculationReport:
        """Flag plans that look wrong or risky."""
        issues: list[str] = []

        total_target_weight = sum(c.target_weight for c in result.calculations)
        if result.calculations and not safe_float_comparison(
            total_target_weight, TOTAL_PORTFOLIO_WEIGHT, WEIGHT_TOLERANCE
        ):
            issues.append(f"Target weights total {total_target_weight:.2f}% instead of 100%")

        negative = [
            c.name
            for c in result.calculations
            if c.current_quantity + c.adjusted_quantity_change < ZERO
        ]
        if negative:
            issues.append(f"Negative quantities would result for: {', '.join(negative)}")

        if result.total_rebalance_value > result.total_current_value * EXTREME_REBALANCE_RATIO:
            issues.append(
                "Rebalancing requires moving more than 50% of portfolio value - "
                "consider gradual rebalancing"
            )

        return CalculationReport(is_valid=not issues, issues=issues)


def summarize_trades(calculations: list[RebalancingCalculation]) -> TradingSummary:
    """Aggregate the actionable lines of a plan.

    Commission is whatever each line already carries, so it is only non-zero
    when the plan was calculated with commission considered.
    """
    actionable = [c for c in calculations if c.action.is_trade]
    buys = [c for c in actionable if c.action == TradeAction.BUY]
    sells = [c for c in actionable if c.action == TradeAction.SELL]

    total_buy_value = sum((abs(c.adjusted_value_change) for c in buys), ZERO)
    total_sell_value = sum((abs(c.adjusted_value_change) for c in sells), ZERO)
    total_commission = sum((c.commission_cost for c in actionable), ZERO)

    return TradingSummary(
        total_trades=len(actionable),
        buy_trades=len(buys),
        sell_trades=len(sells),
        total_buy_value=total_buy_value,
        total_sell_value=total_sell_value,
        total_buy_quantity=sum((abs(c.adjusted_quantity_change) for c in buys), ZERO),
        total_sell_quantity=sum((abs(c.adjusted_quantity_change) for c in sells), ZERO),
        total_commission=total_commission,
        net_cash_flow=total_sell_value - total_buy_value - total_commission,
    )
