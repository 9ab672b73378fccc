"""
Holding and ValuedHolding domain models.
"""

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any

from foliosync.core.exceptions.portfolio import ValidationError
from foliosync.core.utils.validation import validate_non_negative, validate_positive


def utc_now() -> datetime:
    """Current UTC timestamp used for tentative items."""
    return datetime.now(UTC)


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if value is None:
        return utc_now()
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(frozen=True)
class Holding:
    """A recorded stock position.

    Immutable: display code never mutates a holding in place, changes go
    through the holdings store which swaps in new instances.
    """

    id: str
    name: str
    quantity: float
    purchase_price: float
    current_price: float
    owner_id: str
    ticker: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        """Validate holding data after initialization."""
        validate_non_negative(self.quantity, "Quantity")
        validate_positive(self.purchase_price, "Purchase price")
        validate_positive(self.current_price, "Current price")

    @property
    def matching_key(self) -> str:
        """Key used to pair this holding with a target position."""
        return self.ticker or self.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        data["updated_at"] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Holding":
        """Build a holding from a remote row or cached dict.

        Accepts both ``name`` and the storage column name ``stock_name``.

        Raises:
            ValidationError: If required fields are missing or invalid
        """
        try:
            return cls(
                id=str(data["id"]),
                name=str(data.get("name") or data["stock_name"]),
                ticker=data.get("ticker") or None,
                quantity=float(data["quantity"]),
                purchase_price=float(data["purchase_price"]),
                current_price=float(data["current_price"]),
                owner_id=str(data.get("owner_id") or data.get("user_id") or ""),
                created_at=parse_timestamp(data.get("created_at")),
                updated_at=parse_timestamp(data.get("updated_at")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid holding payload: {e}") from e


@dataclass(frozen=True)
class ValuedHolding:
    """Holding enriched with derived valuation fields. Never persisted."""

    holding: Holding
    total_value: float
    cost_basis: float
    profit_loss: float
    profit_loss_percent: float

    @property
    def id(self) -> str:
        return self.holding.id

    @property
    def name(self) -> str:
        return self.holding.name

    @property
    def ticker(self) -> str | None:
        return self.holding.ticker

    @property
    def quantity(self) -> float:
        return self.holding.quantity

    @property
    def current_price(self) -> float:
        return self.holding.current_price

    @property
    def purchase_price(self) -> float:
        return self.holding.purchase_price

    @property
    def matching_key(self) -> str:
        return self.holding.matching_key
