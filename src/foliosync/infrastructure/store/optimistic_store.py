"""
Optimistic store for one remote collection.

Mutations are applied to the local collection before the remote store
answers, then committed with the server's version of the item or rolled
back to the snapshot taken before the change. Observers always receive
immutable StoreState snapshots.

Concurrent mutations are not queued. Each one restores only its own
snapshot on failure, so with overlapping operations the last commit or
rollback to land wins. Cancellation propagates without rollback.
"""

from collections.abc import Callable
from dataclasses import replace
from typing import Any

from loguru import logger

from foliosync.core.constants import FALLBACK_ERROR_MESSAGES
from foliosync.core.exceptions.portfolio import ItemNotFoundError, ValidationError
from foliosync.core.interfaces import ILocalCache, IRemoteStore, Unsubscribe
from foliosync.core.protocols import Identified
from foliosync.core.utils.decorators import log_store_operation
from foliosync.infrastructure.realtime.reconciler import RealtimeEvent, reconcile

from .adapters import ItemAdapter, new_temp_id
from .state import StoreState

type StateListener[T: Identified] = Callable[[StoreState[T]], None]


class OptimisticStore[T: Identified, D, P]:
    """Local-first view of a remote collection."""

    def __init__(
        self,
        remote: IRemoteStore[T, D, P],
        adapter: ItemAdapter[T, D, P],
        cache: ILocalCache | None = None,
    ):
        """Initialize an empty store.

        Args:
            remote: Remote store the collection is synchronized with
            adapter: Describes the item type to the store
            cache: Optional best-effort local cache
        """
        self.remote = remote
        self.adapter = adapter
        self.cache = cache
        self._state: StoreState[T] = StoreState()
        self._listeners: list[StateListener[T]] = []

    @property
    def collection(self) -> str:
        return self.adapter.collection

    @property
    def state(self) -> StoreState[T]:
        """Current state snapshot."""
        return self._state

    @property
    def items(self) -> tuple[T, ...]:
        return self._state.items

    @property
    def selected(self) -> T | None:
        return self._state.selected

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def error(self) -> str | None:
        return self._state.error

    # Observers

    def subscribe(self, listener: StateListener[T]) -> Unsubscribe:
        """Register a listener called with every new state snapshot.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)
        logger.debug(f"Added state listener to {self.collection}")

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                logger.error(f"State listener failed for {self.collection}: {e}")

    def _error_message(self, error: BaseException, operation: str) -> str:
        """Reduce a remote failure to the message stored in state."""
        message = str(error).strip()
        if message:
            return message
        label = self.adapter.plural_label if operation == "fetch" else self.adapter.label
        return FALLBACK_ERROR_MESSAGES[operation].format(label=label)

    def _require(self, item_id: str) -> T:
        item = self._state.find(item_id)
        if item is None:
            raise ItemNotFoundError(item_id, self.collection)
        return item

    # Remote operations

    @log_store_operation
    async def fetch(self) -> tuple[T, ...]:
        """Replace the collection with the remote one.

        A failure leaves the items untouched and is reported through
        ``error`` only; it is not raised.
        """
        self._set_state(is_loading=True, error=None)
        try:
            fetched = await self.remote.list()
        except Exception as e:
            message = self._error_message(e, "fetch")
            logger.warning(f"Failed to fetch {self.adapter.plural_label}: {message}")
            self._set_state(error=message, is_loading=False)
            return self._state.items

        self._set_state(items=tuple(fetched), is_loading=False)
        self._save_collection()
        return self._state.items

    @log_store_operation
    async def create(self, draft: D | dict[str, Any]) -> T:
        """Create an item, showing a tentative copy until the server answers.

        Raises:
            ValidationError: If the draft is invalid; nothing is changed
            Exception: Whatever the remote store raised, after rollback
        """
        parsed = self.adapter.parse_draft(draft)
        temp_id = new_temp_id()
        tentative = self.adapter.build_tentative(parsed, temp_id)

        self._set_state(items=(tentative, *self._state.items), is_loading=True, error=None)

        try:
            created = await self.remote.create(parsed)
        except Exception as e:
            self._set_state(
                items=tuple(item for item in self._state.items if item.id != temp_id),
                error=self._error_message(e, "create"),
                is_loading=False,
            )
            raise

        if self._state.find(created.id) is not None:
            # A push insert already delivered the server item
            items = tuple(item for item in self._state.items if item.id != temp_id)
        else:
            items = tuple(created if item.id == temp_id else item for item in self._state.items)
        self._set_state(items=items, is_loading=False)
        return created

    @log_store_operation
    async def update(self, item_id: str, patch: P | dict[str, Any]) -> T:
        """Apply a partial update locally, then commit or roll back.

        Raises:
            ValidationError: If the patch is invalid; nothing is changed
            ItemNotFoundError: If the id is not in the collection
            Exception: Whatever the remote store raised, after rollback
        """
        parsed = self.adapter.parse_patch(patch)
        current = self._require(item_id)

        snapshot_items = self._state.items
        snapshot_selected = self._state.selected
        optimistic = self.adapter.apply_patch(current, parsed)

        self._set_state(
            items=tuple(optimistic if item.id == item_id else item for item in snapshot_items),
            selected=self._swap_selected(item_id, optimistic),
            is_loading=True,
            error=None,
        )

        try:
            updated = await self.remote.update(item_id, parsed)
        except Exception as e:
            self._set_state(
                items=snapshot_items,
                selected=snapshot_selected,
                error=self._error_message(e, "update"),
                is_loading=False,
            )
            raise

        self._set_state(
            items=tuple(updated if item.id == updated.id else item for item in self._state.items),
            selected=self._swap_selected(updated.id, updated),
            is_loading=False,
        )
        return updated

    @log_store_operation
    async def delete(self, item_id: str) -> None:
        """Remove an item locally, then confirm or roll back.

        Raises:
            ItemNotFoundError: If the id is not in the collection
            Exception: Whatever the remote store raised, after rollback
        """
        self._require(item_id)

        snapshot_items = self._state.items
        snapshot_selected = self._state.selected
        selected = snapshot_selected
        if selected is not None and selected.id == item_id:
            selected = None

        self._set_state(
            items=tuple(item for item in snapshot_items if item.id != item_id),
            selected=selected,
            is_loading=True,
            error=None,
        )

        try:
            await self.remote.delete(item_id)
        except Exception as e:
            self._set_state(
                items=snapshot_items,
                selected=snapshot_selected,
                error=self._error_message(e, "delete"),
                is_loading=False,
            )
            raise

        self._set_state(is_loading=False)

    def _swap_selected(self, item_id: str, item: T) -> T | None:
        selected = self._state.selected
        if selected is not None and selected.id == item_id:
            return item
        return selected

    # Local operations

    def select(self, item_id: str | None) -> T | None:
        """Select an item by id, or clear the selection with None.

        Raises:
            ItemNotFoundError: If the id is not in the collection
        """
        item = None if item_id is None else self._require(item_id)
        self._set_state(selected=item)
        return item

    def set_selected(self, item: T | None) -> None:
        self._set_state(selected=item)

    def clear_error(self) -> None:
        self._set_state(error=None)

    def apply_event(self, event: RealtimeEvent[T]) -> None:
        """Fold a push event into the collection."""
        items, selected = reconcile(self._state.items, self._state.selected, event)
        if items is self._state.items and selected is self._state.selected:
            return
        logger.debug(f"Applied {event.type} event for {event.item_id} to {self.collection}")
        self._set_state(items=items, selected=selected)

    # Local cache

    def _save_collection(self) -> None:
        if self.cache is None:
            return
        self.cache.save(
            self.adapter.cache_key, [self.adapter.to_dict(item) for item in self._state.items]
        )

    def hydrate_from_cache(self, max_age: float | None = None) -> bool:
        """Seed the collection from the local cache.

        Args:
            max_age: Ignore entries older than this many seconds

        Returns:
            True when cached items were loaded
        """
        if self.cache is None:
            return False
        key = self.adapter.cache_key
        if max_age is not None and self.cache.is_expired(key, max_age):
            return False

        rows = self.cache.load(key)
        if not isinstance(rows, list):
            return False

        try:
            items = tuple(self.adapter.from_dict(row) for row in rows)
        except ValidationError as e:
            logger.warning(f"Discarding cached {self.adapter.plural_label}: {e}")
            self.cache.remove(key)
            return False

        self._set_state(items=items)
        logger.debug(f"Hydrated {len(items)} {self.adapter.plural_label} from cache")
        return True

    def save_selected(self) -> bool:
        """Persist the selected item, if any."""
        selected = self._state.selected
        if self.cache is None or selected is None:
            return False
        self.cache.save(self.adapter.selected_cache_key, self.adapter.to_dict(selected))
        return True

    def load_selected(self) -> T | None:
        """Restore the selected item from the cache; clears it when nothing is cached."""
        if self.cache is None:
            return self._state.selected

        data = self.cache.load(self.adapter.selected_cache_key)
        selected = None
        if isinstance(data, dict):
            try:
                selected = self.adapter.from_dict(data)
            except ValidationError as e:
                logger.warning(f"Discarding cached selected {self.adapter.label}: {e}")

        self._set_state(selected=selected)
        return selected
