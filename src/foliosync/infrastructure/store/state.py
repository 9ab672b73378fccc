"""
Immutable store state snapshot.
"""

from dataclasses import dataclass

from foliosync.core.protocols import Identified


@dataclass(frozen=True)
class StoreState[T: Identified]:
    """What observers of a store see at one point in time.

    Items are ordered newest first. A new snapshot is published on every
    change, so holding a reference to one is always safe.
    """

    items: tuple[T, ...] = ()
    selected: T | None = None
    is_loading: bool = False
    error: str | None = None

    def find(self, item_id: str) -> T | None:
        """Return the item with the given id, if present."""
        return next((item for item in self.items if item.id == item_id), None)

    def index_of(self, item_id: str) -> int:
        """Position of an item, or -1 when absent."""
        for index, item in enumerate(self.items):
            if item.id == item_id:
                return index
        return -1

    @property
    def has_error(self) -> bool:
        return self.error is not None
