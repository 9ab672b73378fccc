"""
Valuation calculations.

Pure functions turning raw holdings into valued positions and portfolio
summaries. Inputs are assumed to have passed the validation boundary, so
nothing here raises; divisions by a zero total degrade to 0.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from foliosync.core.models.holding import Holding, ValuedHolding
from foliosync.core.models.portfolio import PortfolioSummary
from foliosync.core.types.financial import HUNDRED, ZERO


@dataclass(frozen=True)
class ProfitLoss:
    """Profit/loss breakdown for one position."""

    cost_basis: float
    current_value: float
    absolute_change: float
    percentage_change: float


def value(quantity: float, price: float) -> float:
    """Value of a position: quantity x price."""
    return quantity * price


def weight(position_value: float, portfolio_value: float) -> float:
    """Weight of a position as a percentage of the portfolio.

    Returns 0 for an empty (zero-valued) portfolio instead of dividing by zero.
    """
    if portfolio_value == ZERO:
        return ZERO
    return position_value / portfolio_value * HUNDRED


def profit_loss(quantity: float, purchase_price: float, current_price: float) -> ProfitLoss:
    """Profit/loss of a position against its cost basis.

    Args:
        quantity: Number of shares
        purchase_price: Price paid per share
        current_price: Current price per share

    Returns:
        ProfitLoss with percentage_change of 0 when the cost basis is 0
    """
    cost_basis = value(quantity, purchase_price)
    current_value = value(quantity, current_price)
    absolute_change = current_value - cost_basis
    percentage_change = absolute_change / cost_basis * HUNDRED if cost_basis > ZERO else ZERO

    return ProfitLoss(
        cost_basis=cost_basis,
        current_value=current_value,
        absolute_change=absolute_change,
        percentage_change=percentage_change,
    )


def value_holding(holding: Holding) -> ValuedHolding:
    """Attach derived valuation fields to a holding."""
    pl = profit_loss(holding.quantity, holding.purchase_price, holding.current_price)
    return ValuedHolding(
        holding=holding,
        total_value=pl.current_value,
        cost_basis=pl.cost_basis,
        profit_loss=pl.absolute_change,
        profit_loss_percent=pl.percentage_change,
    )


def portfolio_value(holdings: Iterable[Holding]) -> float:
    """Total current value of the holdings."""
    return sum((value(h.quantity, h.current_price) for h in holdings), ZERO)


def portfolio_cost(holdings: Iterable[Holding]) -> float:
    """Total cost basis of the holdings."""
    return sum((value(h.quantity, h.purchase_price) for h in holdings), ZERO)


def summarize(holdings: Sequence[Holding]) -> PortfolioSummary:
    """Fold holdings into a PortfolioSummary, preserving their order."""
    valued = tuple(value_holding(h) for h in holdings)

    total_value = sum((v.total_value for v in valued), ZERO)
    total_cost = sum((v.cost_basis for v in valued), ZERO)
    total_profit_loss = total_value - total_cost
    total_profit_loss_percent = (
        total_profit_loss / total_cost * HUNDRED if total_cost > ZERO else ZERO
    )

    return PortfolioSummary(
        total_value=total_value,
        total_cost=total_cost,
        total_profit_loss=total_profit_loss,
        total_profit_loss_percent=total_profit_loss_percent,
        holdings=valued,
    )


def weights(summary: PortfolioSummary) -> list[float]:
    """Per-position weights of a summary, in holding order."""
    return [weight(h.total_value, summary.total_value) for h in summary.holdings]
