"""
Unit tests for push payload decoding and subscription lifecycle.
"""

import pytest

from foliosync.core.enums import EventType
from foliosync.core.models.holding import Holding
from foliosync.infrastructure.memory import InMemoryPushChannel, InMemoryRemoteStore
from foliosync.infrastructure.realtime.subscription import (
    RealtimeSubscription,
    subscribe_to_user_data,
)
from foliosync.infrastructure.store import (
    HoldingAdapter,
    HoldingsStore,
    TargetAllocationAdapter,
    create_holdings_store,
    create_target_portfolio_store,
)

OWNER = "user-1"


def holding_row(holding_id: str, quantity: float = 10) -> dict:
    return Holding(
        id=holding_id,
        name=f"Stock {holding_id}",
        quantity=quantity,
        purchase_price=100,
        current_price=110,
        owner_id=OWNER,
    ).to_dict()


@pytest.fixture
def channel() -> InMemoryPushChannel:
    return InMemoryPushChannel()


@pytest.fixture
def store() -> HoldingsStore:
    return create_holdings_store(InMemoryRemoteStore(HoldingAdapter(), OWNER))


@pytest.fixture
def subscription(store: HoldingsStore, channel: InMemoryPushChannel) -> RealtimeSubscription:
    return RealtimeSubscription(store, channel, OWNER)


class TestPayloadParsing:
    """Test suite for RealtimeSubscription.parse()."""

    def test_should_parse_insert(self, subscription: RealtimeSubscription) -> None:
        event = subscription.parse({"type": "INSERT", "new": holding_row("a"), "old": None})

        assert event.type == EventType.INSERT
        assert event.new.id == "a"

    def test_should_accept_event_type_key(self, subscription: RealtimeSubscription) -> None:
        event = subscription.parse({"eventType": "UPDATE", "new": holding_row("a", 5)})

        assert event.type == EventType.UPDATE
        assert event.new.quantity == 5

    def test_should_parse_delete_from_old_id(self, subscription: RealtimeSubscription) -> None:
        event = subscription.parse({"type": "DELETE", "new": None, "old": {"id": "a"}})

        assert event.type == EventType.DELETE
        assert event.item_id == "a"

    @pytest.mark.parametrize(
        "payload",
        [
            {"type": "TRUNCATE"},
            {"new": {"id": "a"}},
            {"type": "DELETE", "old": {}},
            {"type": "DELETE", "old": "a"},
            {"type": "INSERT", "new": None},
            {"type": "UPDATE", "new": {"id": "a", "name": "No prices"}},
        ],
    )
    def test_should_drop_malformed_payloads(
        self, subscription: RealtimeSubscription, payload: dict
    ) -> None:
        assert subscription.parse(payload) is None


class TestSubscriptionLifecycle:
    """Test suite for start/stop and delivery."""

    def test_should_apply_published_events(
        self,
        subscription: RealtimeSubscription,
        store: HoldingsStore,
        channel: InMemoryPushChannel,
    ) -> None:
        subscription.start()

        channel.publish(OWNER, {"type": "INSERT", "new": holding_row("a")})
        channel.publish(OWNER, {"type": "INSERT", "new": holding_row("b")})
        channel.publish(OWNER, {"type": "DELETE", "old": {"id": "a"}})

        assert [h.id for h in store.items] == ["b"]

    def test_should_ignore_other_owners(
        self,
        subscription: RealtimeSubscription,
        store: HoldingsStore,
        channel: InMemoryPushChannel,
    ) -> None:
        subscription.start()

        channel.publish("someone-else", {"type": "INSERT", "new": holding_row("a")})

        assert store.items == ()

    def test_should_survive_malformed_payload(
        self,
        subscription: RealtimeSubscription,
        store: HoldingsStore,
        channel: InMemoryPushChannel,
    ) -> None:
        subscription.start()

        channel.publish(OWNER, {"type": "INSERT"})
        channel.publish(OWNER, {"type": "INSERT", "new": holding_row("a")})

        assert [h.id for h in store.items] == ["a"]

    def test_should_start_once(
        self, subscription: RealtimeSubscription, channel: InMemoryPushChannel
    ) -> None:
        stop = subscription.start()
        subscription.start()

        assert subscription.is_active is True
        assert channel.subscriber_count(OWNER) == 1

        stop()

        assert subscription.is_active is False
        assert channel.subscriber_count(OWNER) == 0

    def test_should_stop_delivery(
        self,
        subscription: RealtimeSubscription,
        store: HoldingsStore,
        channel: InMemoryPushChannel,
    ) -> None:
        subscription.start()
        subscription.stop()
        subscription.stop()

        channel.publish(OWNER, {"type": "INSERT", "new": holding_row("a")})

        assert store.items == ()


class TestSubscribeToUserData:
    def test_should_subscribe_and_unsubscribe_both_collections(
        self, store: HoldingsStore, channel: InMemoryPushChannel
    ) -> None:
        target_channel = InMemoryPushChannel()
        targets = create_target_portfolio_store(
            InMemoryRemoteStore(TargetAllocationAdapter(), OWNER)
        )

        unsubscribe = subscribe_to_user_data(OWNER, store, channel, targets, target_channel)

        assert channel.subscriber_count(OWNER) == 1
        assert target_channel.subscriber_count(OWNER) == 1

        unsubscribe()

        assert channel.subscriber_count(OWNER) == 0
        assert target_channel.subscriber_count(OWNER) == 0
