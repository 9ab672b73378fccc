"""
Unit tests for enum types.
Testing all enum methods and properties.
"""

import pytest

from foliosync.core.enums import EventType, Priority, RoundingMode, Severity, TradeAction


class TestTradeActionEnum:
    """Tests for TradeAction enum."""

    def test_should_have_correct_values(self) -> None:
        assert TradeAction.BUY.value == "buy"
        assert TradeAction.SELL.value == "sell"
        assert TradeAction.HOLD.value == "hold"

    def test_should_identify_trades(self) -> None:
        """Test that only buy and sell require an order."""
        assert TradeAction.BUY.is_trade is True
        assert TradeAction.SELL.is_trade is True
        assert TradeAction.HOLD.is_trade is False

    def test_should_classify_differences_against_threshold(self) -> None:
        """Test classification of overweight, underweight and in-band positions."""
        assert TradeAction.from_difference(22.17, 5.0) == TradeAction.SELL
        assert TradeAction.from_difference(-20.0, 5.0) == TradeAction.BUY
        assert TradeAction.from_difference(2.17, 5.0) == TradeAction.HOLD

    def test_should_hold_exactly_at_threshold(self) -> None:
        assert TradeAction.from_difference(5.0, 5.0) == TradeAction.HOLD
        assert TradeAction.from_difference(-5.0, 5.0) == TradeAction.HOLD


class TestSeverityEnum:
    """Tests for Severity enum."""

    def test_should_rank_by_severity(self) -> None:
        assert Severity.HIGH.rank > Severity.MEDIUM.rank > Severity.LOW.rank

    def test_should_sort_descending_by_rank(self) -> None:
        ordered = sorted([Severity.LOW, Severity.HIGH, Severity.MEDIUM], key=lambda s: -s.rank)
        assert ordered == [Severity.HIGH, Severity.MEDIUM, Severity.LOW]


class TestRoundingModeEnum:
    """Tests for RoundingMode and Priority enums."""

    def test_should_have_correct_values(self) -> None:
        assert RoundingMode.FLOOR.value == "floor"
        assert RoundingMode.NEAREST.value == "nearest"
        assert RoundingMode("nearest") == RoundingMode.NEAREST
        assert Priority.HIGH.value == "high"


class TestEventTypeEnum:
    """Tests for EventType enum."""

    def test_should_parse_any_case(self) -> None:
        """Test that channel spellings like INSERT parse."""
        assert EventType.parse("INSERT") == EventType.INSERT
        assert EventType.parse("update") == EventType.UPDATE
        assert EventType.parse("Delete") == EventType.DELETE

    def test_should_raise_error_for_unknown_type(self) -> None:
        with pytest.raises(ValueError):
            EventType.parse("TRUNCATE")

    def test_should_raise_error_for_missing_type(self) -> None:
        with pytest.raises(ValueError):
            EventType.parse(None)  # type: ignore[arg-type]
