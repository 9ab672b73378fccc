"""
Collaborator interfaces consumed by the stores.

The remote store, push channel and local cache are owned by the host
application; only their shape is defined here.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from foliosync.core.protocols import Payload

# Push channel callback receiving one raw change payload
EventHandler = Callable[[Payload], None]
Unsubscribe = Callable[[], None]


class IRemoteStore[T, D, P](ABC):
    """Abstract interface for the asynchronous remote store of one collection.

    Failures raise exceptions whose message is fit to show to the user.
    """

    @abstractmethod
    async def list(self) -> list[T]:
        """Fetch the full collection for the current owner."""

    @abstractmethod
    async def create(self, draft: D) -> T:
        """Persist a new item and return the server's version of it."""

    @abstractmethod
    async def update(self, item_id: str, patch: P) -> T:
        """Apply a partial update and return the server's version of the item."""

    @abstractmethod
    async def delete(self, item_id: str) -> None:
        """Delete an item."""


class IPushChannel(ABC):
    """Abstract interface for a change stream on one collection."""

    @abstractmethod
    def subscribe(self, owner_id: str, on_event: EventHandler) -> Unsubscribe:
        """Deliver ``{type, new, old}`` payloads for the owner's rows.

        Returns:
            Callable that stops delivery when invoked
        """


class ILocalCache(ABC):
    """Abstract interface for best-effort local persistence.

    Values are stored in an envelope ``{"timestamp": ..., "data": value}``.
    Implementations never raise on read or write failures.
    """

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """Store a JSON-compatible value."""

    @abstractmethod
    def load(self, key: str) -> Any | None:
        """Return the stored value, or None when missing or unreadable."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove one entry."""

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries."""

    @abstractmethod
    def is_expired(self, key: str, max_age: float) -> bool:
        """Check if an entry is missing or older than ``max_age`` seconds."""
