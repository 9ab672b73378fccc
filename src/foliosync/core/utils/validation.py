"""
Validation utilities for the engine's input boundary.

Provides consistent validation across the application. Everything here runs
before a store applies an optimistic change, so a failure never needs a
rollback.
"""

from dataclasses import dataclass, field
from typing import Any

import pydantic

from foliosync.core.constants import (
    MAX_STOCK_WEIGHT,
    MIN_STOCK_WEIGHT,
    TOTAL_PORTFOLIO_WEIGHT,
    WEIGHT_TOLERANCE,
)
from foliosync.core.exceptions.portfolio import ValidationError
from foliosync.core.schemas import (
    HoldingDraft,
    HoldingPatch,
    TargetAllocationDraft,
    TargetAllocationPatch,
    TargetPositionDraft,
)
from foliosync.core.types.financial import safe_float_comparison


@dataclass(frozen=True)
class AllocationValidation:
    """Outcome of checking a set of target weights."""

    is_valid: bool
    total_weight: float
    errors: list[str] = field(default_factory=list)


def validate_positive(value: float, param_name: str) -> float:
    """Validate that a numeric value is positive.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return value


def validate_non_negative(value: float, param_name: str) -> float:
    """Validate that a numeric value is zero or positive.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{param_name} must be non-negative, got {value}")
    return value


def validate_total_weight(weights: list[float], tolerance: float = WEIGHT_TOLERANCE) -> bool:
    """Check that weights sum to 100% within tolerance."""
    return safe_float_comparison(sum(weights), TOTAL_PORTFOLIO_WEIGHT, tolerance)


def check_target_weights(
    weights: list[float], tolerance: float = WEIGHT_TOLERANCE
) -> AllocationValidation:
    """Collect every problem with a list of target weights.

    Args:
        weights: Target weights in percent
        tolerance: Allowed deviation of the total from 100

    Returns:
        AllocationValidation listing all errors found
    """
    errors: list[str] = []
    total = sum(weights)

    if not weights:
        errors.append("Portfolio must contain at least one stock")

    for weight in weights:
        if weight < MIN_STOCK_WEIGHT or weight > MAX_STOCK_WEIGHT:
            errors.append(
                f"All weights must be between {MIN_STOCK_WEIGHT:g}% and {MAX_STOCK_WEIGHT:g}%"
            )
            break

    if not validate_total_weight(weights, tolerance):
        errors.append(f"Total portfolio weight must equal 100%, current total: {total:.2f}%")

    return AllocationValidation(is_valid=not errors, total_weight=total, errors=errors)


def validate_target_weights(weights: list[float], tolerance: float = WEIGHT_TOLERANCE) -> float:
    """Validate target weights, raising on the first report with errors.

    Returns:
        The total weight

    Raises:
        ValidationError: If any weight is out of range or the total is not 100%
    """
    report = check_target_weights(weights, tolerance)
    if not report.is_valid:
        raise ValidationError("; ".join(report.errors))
    return report.total_weight


def validate_unique_positions(positions: list[TargetPositionDraft]) -> None:
    """Reject target lines that would pair with the same holding.

    Raises:
        ValidationError: If two lines share a ticker, or a name when neither has a ticker
    """
    seen: set[str] = set()
    for position in positions:
        key = position.ticker or position.name
        if key in seen:
            raise ValidationError(f"Duplicate target position: {key}")
        seen.add(key)


def _parse[M: pydantic.BaseModel](model: type[M], data: Any, label: str) -> M:
    """Coerce a mapping (or an existing model) into a validated schema."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or label}: {err['msg']}" for err in e.errors()
        )
        raise ValidationError(f"Invalid {label}: {details}") from e


def parse_holding_draft(data: Any) -> HoldingDraft:
    """Validate a holding creation payload.

    Raises:
        ValidationError: If any field is missing or out of range
    """
    return _parse(HoldingDraft, data, "holding")


def parse_holding_patch(data: Any) -> HoldingPatch:
    """Validate a partial holding update."""
    return _parse(HoldingPatch, data, "holding update")


def parse_target_allocation_draft(data: Any) -> TargetAllocationDraft:
    """Validate a target allocation payload, including its weight totals.

    Raises:
        ValidationError: If the payload is malformed or weights do not sum to 100%
    """
    draft = _parse(TargetAllocationDraft, data, "target allocation")
    validate_unique_positions(draft.positions)
    validate_target_weights([p.target_weight for p in draft.positions])
    return draft


def parse_target_allocation_patch(data: Any) -> TargetAllocationPatch:
    """Validate a partial target allocation update.

    Weight totals are only checked when the patch replaces the positions.
    """
    patch = _parse(TargetAllocationPatch, data, "target allocation update")
    if patch.positions is not None:
        validate_unique_positions(patch.positions)
        validate_target_weights([p.target_weight for p in patch.positions])
    return patch
