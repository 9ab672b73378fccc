"""
Integration tests for the synchronized portfolio workflow.

Tests the interaction between the optimistic stores, the in-memory remote
store and push channel, the realtime subscription and the calculation
engine.
"""

import pytest

from foliosync.core.engine import AnalyticsService, RebalancingEngine, summarize
from foliosync.core.enums import TradeAction
from foliosync.core.exceptions.portfolio import RemoteStoreError
from foliosync.core.schemas import HoldingPatch
from foliosync.infrastructure.cache.session_cache import SessionCache
from foliosync.infrastructure.memory import InMemoryPushChannel, InMemoryRemoteStore
from foliosync.infrastructure.realtime.subscription import subscribe_to_user_data
from foliosync.infrastructure.store import (
    HoldingAdapter,
    TargetAllocationAdapter,
    create_holdings_store,
    create_target_portfolio_store,
    is_temp_id,
)

OWNER = "user-1"


class TestPortfolioSyncIntegration:
    """Integration tests for stores, push delivery and calculations."""

    @pytest.fixture
    def holdings_channel(self):
        return InMemoryPushChannel()

    @pytest.fixture
    def holdings_remote(self, holdings_channel):
        return InMemoryRemoteStore(HoldingAdapter(), OWNER, holdings_channel)

    @pytest.fixture
    def target_channel(self):
        return InMemoryPushChannel()

    @pytest.fixture
    def target_remote(self, target_channel):
        return InMemoryRemoteStore(TargetAllocationAdapter(), OWNER, target_channel)

    @pytest.fixture
    def cache(self, tmp_path):
        return SessionCache(directory=tmp_path)

    @pytest.fixture
    def holdings(self, holdings_remote, cache):
        return create_holdings_store(holdings_remote, cache)

    @pytest.fixture
    def targets(self, target_remote, cache):
        return create_target_portfolio_store(target_remote, cache)

    @pytest.fixture
    def unsubscribe(self, holdings, holdings_channel, targets, target_channel):
        stop = subscribe_to_user_data(OWNER, holdings, holdings_channel, targets, target_channel)
        yield stop
        stop()

    @pytest.mark.asyncio
    async def test_should_create_rebalance_and_analyze(self, holdings, targets, unsubscribe):
        """Test a full session: record holdings, define a target, plan trades."""
        await holdings.create(
            {
                "name": "Apple Inc.",
                "ticker": "AAPL",
                "quantity": 10,
                "purchase_price": 150,
                "current_price": 180,
            }
        )
        await holdings.create(
            {
                "name": "Microsoft Corp.",
                "ticker": "MSFT",
                "quantity": 5,
                "purchase_price": 300,
                "current_price": 330,
            }
        )
        target = await targets.create(
            {
                "name": "Balanced",
                "positions": [
                    {"name": "Apple Inc.", "ticker": "AAPL", "target_weight": 30},
                    {"name": "Microsoft Corp.", "ticker": "MSFT", "target_weight": 50},
                    {"name": "Alphabet", "ticker": "GOOGL", "target_weight": 20},
                ],
            }
        )

        # Push inserts arrived before each create returned; no duplicates remain
        assert len(holdings.items) == 2
        assert not any(is_temp_id(h.id) for h in holdings.items)
        assert [h.ticker for h in holdings.items] == ["MSFT", "AAPL"]
        assert len(targets.items) == 1

        summary = summarize(holdings.items)
        assert summary.total_value == 3450
        assert summary.total_profit_loss_percent == pytest.approx(15.0)

        result = RebalancingEngine().calculate(summary, target, prices={"GOOGL": 140.0})
        actions = {calc.key: calc.action for calc in result.calculations}
        assert actions == {
            "AAPL": TradeAction.SELL,
            "MSFT": TradeAction.HOLD,
            "GOOGL": TradeAction.BUY,
        }

        health = AnalyticsService().calculate_health_score(summary)
        assert health.overall == 83

    @pytest.mark.asyncio
    async def test_should_follow_changes_made_elsewhere(
        self, holdings, holdings_remote, unsubscribe
    ):
        """Test that another client's update and delete reach the store."""
        created = await holdings.create(
            {
                "name": "Tesla",
                "ticker": "TSLA",
                "quantity": 2,
                "purchase_price": 200,
                "current_price": 250,
            }
        )
        holdings.select(created.id)

        await holdings_remote.update(created.id, HoldingPatch(current_price=300))
        assert holdings.selected.current_price == 300

        await holdings_remote.delete(created.id)
        assert holdings.items == ()
        assert holdings.selected is None

    @pytest.mark.asyncio
    async def test_should_roll_back_when_server_rejects(self, holdings, holdings_remote):
        """Test that deleting a row already gone on the server restores it locally."""
        created = await holdings.create(
            {"name": "Tesla", "quantity": 2, "purchase_price": 200, "current_price": 250}
        )
        await holdings_remote.delete(created.id)  # not subscribed; local copy is stale

        with pytest.raises(RemoteStoreError):
            await holdings.delete(created.id)

        assert [h.id for h in holdings.items] == [created.id]
        assert holdings.error == "Holding not found"

    @pytest.mark.asyncio
    async def test_should_restore_session_from_cache(self, holdings, holdings_remote, cache):
        """Test that a fresh session shows cached data before fetching."""
        await holdings.create(
            {"name": "Tesla", "quantity": 2, "purchase_price": 200, "current_price": 250}
        )
        await holdings.fetch()
        holdings.select(holdings.items[0].id)
        holdings.save_selected()

        fresh = create_holdings_store(holdings_remote, cache)

        assert fresh.hydrate_from_cache(max_age=3600) is True
        assert fresh.load_selected().name == "Tesla"
        assert [h.id for h in fresh.items] == [h.id for h in holdings.items]
