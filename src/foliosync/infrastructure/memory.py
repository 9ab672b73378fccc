"""
In-memory remote store and push channel.

Useful for demos and tests: rows live in a dict, mutations publish change
payloads to the channel the way a database change feed would.
"""

import asyncio
import uuid
from collections import defaultdict

from loguru import logger

from foliosync.core.exceptions.portfolio import RemoteStoreError
from foliosync.core.interfaces import EventHandler, IPushChannel, IRemoteStore, Unsubscribe
from foliosync.core.protocols import Payload
from foliosync.infrastructure.store.adapters import ItemAdapter


class InMemoryPushChannel(IPushChannel):
    """Push channel delivering payloads synchronously to owner subscribers."""

    def __init__(self) -> None:
        self._handlers: defaultdict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, owner_id: str, on_event: EventHandler) -> Unsubscribe:
        self._handlers[owner_id].append(on_event)

        def unsubscribe() -> None:
            handlers = self._handlers.get(owner_id, [])
            if on_event in handlers:
                handlers.remove(on_event)

        return unsubscribe

    def subscriber_count(self, owner_id: str) -> int:
        return len(self._handlers.get(owner_id, []))

    def publish(self, owner_id: str, payload: Payload) -> None:
        """Deliver a payload to every subscriber of the owner."""
        for handler in list(self._handlers.get(owner_id, [])):
            handler(payload)


class InMemoryRemoteStore[T, D, P](IRemoteStore[T, D, P]):
    """Remote store keeping one owner's rows in memory."""

    def __init__(
        self,
        adapter: ItemAdapter[T, D, P],
        owner_id: str,
        channel: InMemoryPushChannel | None = None,
        latency: float = 0.0,
    ):
        """Initialize an empty store.

        Args:
            adapter: Builds and serializes items
            owner_id: Owner stamped on created rows and used for publishing
            channel: Receives change payloads after each mutation
            latency: Seconds each call waits before answering
        """
        self.adapter = adapter
        self.owner_id = owner_id
        self.channel = channel
        self.latency = latency
        self._rows: dict[str, Payload] = {}

    async def _respond(self) -> None:
        await asyncio.sleep(self.latency)

    def _publish(
        self, event_type: str, new: Payload | None = None, old: Payload | None = None
    ) -> None:
        if self.channel is not None:
            self.channel.publish(self.owner_id, {"type": event_type, "new": new, "old": old})

    def seed(self, items: list[T]) -> None:
        """Insert rows directly, oldest first, without publishing."""
        for item in items:
            row = self.adapter.to_dict(item)
            self._rows[row["id"]] = row

    async def list(self) -> list[T]:
        await self._respond()
        return [self.adapter.from_dict(row) for row in reversed(self._rows.values())]

    async def create(self, draft: D) -> T:
        await self._respond()
        item = self.adapter.build(draft, str(uuid.uuid4()), self.owner_id)
        row = self.adapter.to_dict(item)
        self._rows[row["id"]] = row
        logger.debug(f"Created {self.adapter.label} {row['id']}")
        self._publish("INSERT", new=row)
        return item

    async def update(self, item_id: str, patch: P) -> T:
        await self._respond()
        row = self._rows.get(item_id)
        if row is None:
            raise RemoteStoreError(f"{self.adapter.label.capitalize()} not found", "update")
        item = self.adapter.apply_patch(self.adapter.from_dict(row), patch)
        new_row = self.adapter.to_dict(item)
        self._rows[item_id] = new_row
        self._publish("UPDATE", new=new_row, old={"id": item_id})
        return item

    async def delete(self, item_id: str) -> None:
        await self._respond()
        if self._rows.pop(item_id, None) is None:
            raise RemoteStoreError(f"{self.adapter.label.capitalize()} not found", "delete")
        self._publish("DELETE", old={"id": item_id})

    def __len__(self) -> int:
        return len(self._rows)
