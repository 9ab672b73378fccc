"""
Optimistic stores for the holdings and target portfolio collections.
"""

from foliosync.core.interfaces import ILocalCache, IRemoteStore
from foliosync.core.models.holding import Holding
from foliosync.core.models.target_allocation import TargetAllocation
from foliosync.core.schemas import (
    HoldingDraft,
    HoldingPatch,
    TargetAllocationDraft,
    TargetAllocationPatch,
)

from .adapters import HoldingAdapter, ItemAdapter, TargetAllocationAdapter, is_temp_id
from .optimistic_store import OptimisticStore
from .state import StoreState

type HoldingsStore = OptimisticStore[Holding, HoldingDraft, HoldingPatch]
type TargetPortfolioStore = OptimisticStore[
    TargetAllocation, TargetAllocationDraft, TargetAllocationPatch
]


def create_holdings_store(
    remote: IRemoteStore[Holding, HoldingDraft, HoldingPatch],
    cache: ILocalCache | None = None,
) -> HoldingsStore:
    """Create the store for a user's holdings."""
    return OptimisticStore(remote, HoldingAdapter(), cache)


def create_target_portfolio_store(
    remote: IRemoteStore[TargetAllocation, TargetAllocationDraft, TargetAllocationPatch],
    cache: ILocalCache | None = None,
) -> TargetPortfolioStore:
    """Create the store for a user's target portfolios."""
    return OptimisticStore(remote, TargetAllocationAdapter(), cache)


__all__ = [
    "OptimisticStore",
    "StoreState",
    "ItemAdapter",
    "HoldingAdapter",
    "TargetAllocationAdapter",
    "HoldingsStore",
    "TargetPortfolioStore",
    "create_holdings_store",
    "create_target_portfolio_store",
    "is_temp_id",
]
