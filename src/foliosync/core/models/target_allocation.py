"""
Target allocation domain models.

A target allocation is an explicit, tagged structure: a named, ordered list
of positions with the weight each should carry. The weight invariants are
enforced by the validation boundary (see ``foliosync.core.utils.validation``),
not by these models, because rows coming back from storage or the push
channel are accepted as-is.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from foliosync.core.exceptions.portfolio import ValidationError
from foliosync.core.models.holding import parse_timestamp, utc_now
from foliosync.core.types.financial import ZERO


@dataclass(frozen=True)
class TargetPosition:
    """One line of a target allocation."""

    name: str
    target_weight: float
    ticker: str | None = None

    @property
    def matching_key(self) -> str:
        return self.ticker or self.name

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "ticker": self.ticker, "target_weight": self.target_weight}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TargetPosition":
        return cls(
            name=str(data.get("name") or data["stock_name"]),
            ticker=data.get("ticker") or None,
            target_weight=float(data["target_weight"]),
        )


@dataclass(frozen=True)
class TargetAllocation:
    """A named target portfolio."""

    id: str
    name: str
    owner_id: str
    positions: tuple[TargetPosition, ...] = field(default_factory=tuple)
    description: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def total_weight(self) -> float:
        """Sum of the target weights."""
        return sum((p.target_weight for p in self.positions), ZERO)

    @property
    def is_empty(self) -> bool:
        return len(self.positions) == 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict.

        Positions are nested under ``allocations`` the way they are stored.
        """
        return {
            "id": self.id,
            "name": self.name,
            "owner_id": self.owner_id,
            "allocations": {
                "description": self.description,
                "stocks": [p.to_dict() for p in self.positions],
                "total_weight": self.total_weight,
            },
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TargetAllocation":
        """Build an allocation from a remote row or cached dict.

        Raises:
            ValidationError: If required fields are missing or malformed
        """
        try:
            allocations = data.get("allocations") or {}
            raw_positions = allocations.get("stocks", data.get("positions", []))
            return cls(
                id=str(data["id"]),
                name=str(data["name"]),
                owner_id=str(data.get("owner_id") or data.get("user_id") or ""),
                positions=tuple(TargetPosition.from_dict(p) for p in raw_positions),
                description=allocations.get("description", data.get("description")),
                created_at=parse_timestamp(data.get("created_at")),
                updated_at=parse_timestamp(data.get("updated_at")),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid target allocation payload: {e}") from e
