"""
Pydantic schemas for payloads entering the engine.

Drafts and patches are what callers hand to the stores; they are validated
here before any optimistic change is applied. Unknown keys are rejected.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from foliosync.core.constants import (
    MAX_PORTFOLIO_NAME_LENGTH,
    MAX_PRICE,
    MAX_QUANTITY,
    MAX_STOCK_NAME_LENGTH,
    MAX_STOCK_WEIGHT,
    MAX_TICKER_LENGTH,
    MIN_PORTFOLIO_NAME_LENGTH,
    MIN_PRICE,
    MIN_QUANTITY,
    MIN_STOCK_WEIGHT,
)


def _clean_ticker(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip().upper()
    return cleaned or None


class HoldingDraft(BaseModel):
    """Fields needed to create a holding."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=MAX_STOCK_NAME_LENGTH)
    ticker: str | None = Field(default=None, max_length=MAX_TICKER_LENGTH)
    quantity: float = Field(..., ge=MIN_QUANTITY, le=MAX_QUANTITY)
    purchase_price: float = Field(..., ge=MIN_PRICE, le=MAX_PRICE)
    current_price: float = Field(..., ge=MIN_PRICE, le=MAX_PRICE)

    @field_validator("ticker")
    @classmethod
    def normalize_ticker(cls, v: str | None) -> str | None:
        """Tickers are stored upper-case; blank means no ticker."""
        return _clean_ticker(v)


class HoldingPatch(BaseModel):
    """Partial update of a holding. Unset fields are left unchanged."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=MAX_STOCK_NAME_LENGTH)
    ticker: str | None = Field(default=None, max_length=MAX_TICKER_LENGTH)
    quantity: float | None = Field(default=None, ge=MIN_QUANTITY, le=MAX_QUANTITY)
    purchase_price: float | None = Field(default=None, ge=MIN_PRICE, le=MAX_PRICE)
    current_price: float | None = Field(default=None, ge=MIN_PRICE, le=MAX_PRICE)

    @field_validator("ticker")
    @classmethod
    def normalize_ticker(cls, v: str | None) -> str | None:
        return _clean_ticker(v)

    def changes(self) -> dict:
        """Fields explicitly set on this patch."""
        return self.model_dump(exclude_unset=True)


class TargetPositionDraft(BaseModel):
    """One line of a target allocation payload."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=MAX_STOCK_NAME_LENGTH)
    ticker: str | None = Field(default=None, max_length=MAX_TICKER_LENGTH)
    target_weight: float = Field(..., ge=MIN_STOCK_WEIGHT, le=MAX_STOCK_WEIGHT)

    @field_validator("ticker")
    @classmethod
    def normalize_ticker(cls, v: str | None) -> str | None:
        return _clean_ticker(v)


class TargetAllocationDraft(BaseModel):
    """Fields needed to create a target allocation."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    name: str = Field(
        ..., min_length=MIN_PORTFOLIO_NAME_LENGTH, max_length=MAX_PORTFOLIO_NAME_LENGTH
    )
    description: str | None = None
    positions: list[TargetPositionDraft] = Field(default_factory=list)

    @property
    def total_weight(self) -> float:
        return sum(p.target_weight for p in self.positions)


class TargetAllocationPatch(BaseModel):
    """Partial update of a target allocation."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(
        default=None, min_length=MIN_PORTFOLIO_NAME_LENGTH, max_length=MAX_PORTFOLIO_NAME_LENGTH
    )
    description: str | None = None
    positions: list[TargetPositionDraft] | None = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
