"""
Per-collection adapters for the optimistic store.

An adapter is everything the generic store needs to know about one kind of
item: how to validate payloads, build a local item from a draft, apply a
patch and move items to and from plain dicts.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any

from foliosync.core.constants import (
    CACHE_KEY_HOLDINGS,
    CACHE_KEY_SELECTED_HOLDING,
    CACHE_KEY_SELECTED_TARGET_PORTFOLIO,
    CACHE_KEY_TARGET_PORTFOLIOS,
    TEMP_ID_PREFIX,
    TEMP_OWNER_ID,
)
from foliosync.core.models.holding import Holding, utc_now
from foliosync.core.models.target_allocation import TargetAllocation, TargetPosition
from foliosync.core.protocols import Payload
from foliosync.core.schemas import (
    HoldingDraft,
    HoldingPatch,
    TargetAllocationDraft,
    TargetAllocationPatch,
    TargetPositionDraft,
)
from foliosync.core.utils.validation import (
    parse_holding_draft,
    parse_holding_patch,
    parse_target_allocation_draft,
    parse_target_allocation_patch,
)


def new_temp_id() -> str:
    """Temporary id for an item the server has not confirmed yet."""
    return f"{TEMP_ID_PREFIX}{uuid.uuid4().hex[:12]}"


def is_temp_id(item_id: str) -> bool:
    return item_id.startswith(TEMP_ID_PREFIX)


class ItemAdapter[T, D, P](ABC):
    """Abstract interface describing one collection to the generic store."""

    collection: str  # Name used in logs and not-found errors
    label: str  # Singular, for fallback error messages
    plural_label: str
    cache_key: str
    selected_cache_key: str

    @abstractmethod
    def parse_draft(self, data: Any) -> D:
        """Validate a creation payload; raises ValidationError."""

    @abstractmethod
    def parse_patch(self, data: Any) -> P:
        """Validate a partial update; raises ValidationError."""

    @abstractmethod
    def build(self, draft: D, item_id: str, owner_id: str) -> T:
        """Create an item from a validated draft."""

    @abstractmethod
    def apply_patch(self, item: T, patch: P) -> T:
        """Return a copy of item with the patch applied."""

    @abstractmethod
    def to_dict(self, item: T) -> Payload:
        """Serialize an item to a JSON-compatible dict."""

    @abstractmethod
    def from_dict(self, data: Payload) -> T:
        """Deserialize an item; raises ValidationError."""

    def build_tentative(self, draft: D, temp_id: str | None = None) -> T:
        """Local placeholder shown until the server confirms the create."""
        return self.build(draft, temp_id or new_temp_id(), TEMP_OWNER_ID)


class HoldingAdapter(ItemAdapter[Holding, HoldingDraft, HoldingPatch]):
    collection = "holdings"
    label = "holding"
    plural_label = "holdings"
    cache_key = CACHE_KEY_HOLDINGS
    selected_cache_key = CACHE_KEY_SELECTED_HOLDING

    def parse_draft(self, data: Any) -> HoldingDraft:
        return parse_holding_draft(data)

    def parse_patch(self, data: Any) -> HoldingPatch:
        return parse_holding_patch(data)

    def build(self, draft: HoldingDraft, item_id: str, owner_id: str) -> Holding:
        now = utc_now()
        return Holding(
            id=item_id,
            name=draft.name,
            ticker=draft.ticker,
            quantity=draft.quantity,
            purchase_price=draft.purchase_price,
            current_price=draft.current_price,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )

    def apply_patch(self, item: Holding, patch: HoldingPatch) -> Holding:
        # Only the ticker may be cleared by an explicit None
        changes = {k: v for k, v in patch.changes().items() if v is not None or k == "ticker"}
        return replace(item, **changes, updated_at=utc_now())

    def to_dict(self, item: Holding) -> Payload:
        return item.to_dict()

    def from_dict(self, data: Payload) -> Holding:
        return Holding.from_dict(data)


def _positions(drafts: list[TargetPositionDraft]) -> tuple[TargetPosition, ...]:
    return tuple(
        TargetPosition(name=d.name, ticker=d.ticker, target_weight=d.target_weight) for d in drafts
    )


class TargetAllocationAdapter(
    ItemAdapter[TargetAllocation, TargetAllocationDraft, TargetAllocationPatch]
):
    collection = "target_portfolios"
    label = "target portfolio"
    plural_label = "target portfolios"
    cache_key = CACHE_KEY_TARGET_PORTFOLIOS
    selected_cache_key = CACHE_KEY_SELECTED_TARGET_PORTFOLIO

    def parse_draft(self, data: Any) -> TargetAllocationDraft:
        return parse_target_allocation_draft(data)

    def parse_patch(self, data: Any) -> TargetAllocationPatch:
        return parse_target_allocation_patch(data)

    def build(
        self, draft: TargetAllocationDraft, item_id: str, owner_id: str
    ) -> TargetAllocation:
        now = utc_now()
        return TargetAllocation(
            id=item_id,
            name=draft.name,
            owner_id=owner_id,
            positions=_positions(draft.positions),
            description=draft.description,
            created_at=now,
            updated_at=now,
        )

    def apply_patch(
        self, item: TargetAllocation, patch: TargetAllocationPatch
    ) -> TargetAllocation:
        changes: dict[str, Any] = {}
        fields_set = patch.model_fields_set
        if "name" in fields_set and patch.name is not None:
            changes["name"] = patch.name
        if "description" in fields_set:
            changes["description"] = patch.description
        if "positions" in fields_set and patch.positions is not None:
            changes["positions"] = _positions(patch.positions)
        return replace(item, **changes, updated_at=utc_now())

    def to_dict(self, item: TargetAllocation) -> Payload:
        return item.to_dict()

    def from_dict(self, data: Payload) -> TargetAllocation:
        return TargetAllocation.from_dict(data)
