"""
Bridge from raw push payloads to a store's reconciler.
"""

from typing import TYPE_CHECKING, Any

from loguru import logger

from foliosync.core.enums import EventType
from foliosync.core.exceptions.portfolio import ValidationError
from foliosync.core.interfaces import IPushChannel, Unsubscribe
from foliosync.core.protocols import Identified, ItemRef, Payload

from .reconciler import RealtimeEvent

if TYPE_CHECKING:
    from foliosync.infrastructure.store.optimistic_store import OptimisticStore


class RealtimeSubscription[T: Identified]:
    """Feeds one push channel into one store, in arrival order.

    Payloads look like ``{"type": "INSERT", "new": {...}, "old": {...}}``.
    Malformed payloads are dropped with a warning.
    """

    def __init__(
        self, store: "OptimisticStore[T, Any, Any]", channel: IPushChannel, owner_id: str
    ):
        self.store = store
        self.channel = channel
        self.owner_id = owner_id
        self._unsubscribe: Unsubscribe | None = None

    @property
    def is_active(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> Unsubscribe:
        """Start delivery; starting twice keeps the first subscription."""
        if self._unsubscribe is None:
            self._unsubscribe = self.channel.subscribe(self.owner_id, self.handle)
            logger.debug(f"Subscribed to {self.store.collection} changes for {self.owner_id}")
        return self.stop

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            logger.debug(f"Unsubscribed from {self.store.collection} changes")

    def parse(self, payload: Payload) -> RealtimeEvent[T] | None:
        """Decode a raw payload, or return None when it is unusable."""
        raw_type = payload.get("type") or payload.get("eventType")
        try:
            event_type = EventType.parse(raw_type)
        except ValueError:
            logger.warning(f"Dropping push event with unknown type: {raw_type!r}")
            return None

        if event_type == EventType.DELETE:
            old = payload.get("old")
            if not isinstance(old, dict) or not old.get("id"):
                logger.warning(f"Dropping {event_type} event without an old id")
                return None
            return RealtimeEvent(type=event_type, old=ItemRef(id=str(old["id"])))

        new = payload.get("new")
        if not isinstance(new, dict):
            logger.warning(f"Dropping {event_type} event without a new row")
            return None
        try:
            item = self.store.adapter.from_dict(new)
        except ValidationError as e:
            logger.warning(f"Dropping malformed {event_type} event: {e}")
            return None
        return RealtimeEvent(type=event_type, new=item)

    def handle(self, payload: Payload) -> None:
        """Channel callback: decode and apply one payload."""
        event = self.parse(payload)
        if event is not None:
            self.store.apply_event(event)


def subscribe_to_user_data(
    owner_id: str,
    holdings_store: "OptimisticStore[Any, Any, Any]",
    holdings_channel: IPushChannel,
    target_store: "OptimisticStore[Any, Any, Any]",
    target_channel: IPushChannel,
) -> Unsubscribe:
    """Subscribe both collections of a user.

    Returns:
        Callable that stops both subscriptions
    """
    subscriptions = [
        RealtimeSubscription(holdings_store, holdings_channel, owner_id),
        RealtimeSubscription(target_store, target_channel, owner_id),
    ]
    for subscription in subscriptions:
        subscription.start()

    def unsubscribe_all() -> None:
        for subscription in subscriptions:
            subscription.stop()

    return unsubscribe_all
