"""
Pure reducer folding push events into a collection snapshot.

Push events race with the store's own optimistic changes; whichever is
applied last wins. Events that reference ids the collection does not hold
are ignored.
"""

from dataclasses import dataclass

from loguru import logger

from foliosync.core.enums import EventType
from foliosync.core.protocols import Identified


@dataclass(frozen=True)
class RealtimeEvent[T: Identified]:
    """A decoded change event for one collection.

    ``new`` is set for insert and update, ``old`` for delete. ``old`` may be
    a bare ItemRef when the channel only delivers the primary key.
    """

    type: EventType
    new: T | None = None
    old: Identified | None = None

    @property
    def item_id(self) -> str | None:
        source = self.new if self.new is not None else self.old
        return source.id if source is not None else None


def reconcile[T: Identified](
    items: tuple[T, ...], selected: T | None, event: RealtimeEvent[T]
) -> tuple[tuple[T, ...], T | None]:
    """Apply one push event to a collection and its selected item.

    Args:
        items: Current collection, newest first
        selected: Currently selected item, if any
        event: Decoded push event

    Returns:
        New (items, selected) pair; the inputs are never modified
    """
    if event.type == EventType.INSERT:
        if event.new is None:
            return items, selected
        if any(item.id == event.new.id for item in items):
            # Our own create already put the server item in place
            logger.debug(f"Ignoring replayed insert for {event.new.id}")
            return items, selected
        return (event.new, *items), selected

    if event.type == EventType.UPDATE:
        new = event.new
        if new is None:
            return items, selected
        if not any(item.id == new.id for item in items):
            logger.debug(f"Ignoring update for unknown id {new.id}")
            return items, selected
        updated = tuple(new if item.id == new.id else item for item in items)
        if selected is not None and selected.id == new.id:
            selected = new
        return updated, selected

    if event.type == EventType.DELETE:
        if event.old is None:
            return items, selected
        removed_id = event.old.id
        remaining = tuple(item for item in items if item.id != removed_id)
        if len(remaining) == len(items):
            logger.debug(f"Ignoring delete for unknown id {removed_id}")
            return items, selected
        if selected is not None and selected.id == removed_id:
            selected = None
        return remaining, selected

    return items, selected
