"""
Unit tests for the session cache.
"""

import json
from unittest.mock import patch

import pytest

from foliosync.core.exceptions.portfolio import ConfigurationError
from foliosync.infrastructure.cache.session_cache import SessionCache


@pytest.fixture
def cache(tmp_path) -> SessionCache:
    return SessionCache(directory=tmp_path)


class TestSessionCache:
    """Test suite for SessionCache."""

    def test_should_reject_non_positive_size(self) -> None:
        with pytest.raises(ConfigurationError, match="Cache size must be positive, got 0"):
            SessionCache(max_entries=0)

    def test_should_store_and_load_values(self, cache: SessionCache) -> None:
        cache.save("portfolio_data", [{"id": "a"}])

        assert cache.load("portfolio_data") == [{"id": "a"}]
        assert len(cache) == 1

    def test_should_return_none_on_miss(self, cache: SessionCache) -> None:
        assert cache.load("missing") is None

    def test_should_write_timestamped_envelope(self, cache: SessionCache, tmp_path) -> None:
        with patch("foliosync.infrastructure.cache.session_cache.time") as clock:
            clock.time.return_value = 1_700_000_000.0
            cache.save("selected_holding", {"id": "a"})

        envelope = json.loads((tmp_path / "selected_holding.json").read_text())
        assert envelope == {"timestamp": 1_700_000_000.0, "data": {"id": "a"}}

    def test_should_read_back_from_disk(self, cache: SessionCache, tmp_path) -> None:
        """Test that a new cache over the same directory sees saved entries."""
        cache.save("target_portfolios", [{"id": "tp-1"}])

        reopened = SessionCache(directory=tmp_path)

        assert reopened.load("target_portfolios") == [{"id": "tp-1"}]

    def test_should_work_in_memory_only(self) -> None:
        cache = SessionCache()
        cache.save("key", 42)

        assert cache.load("key") == 42
        cache.remove("key")
        assert cache.load("key") is None

    def test_should_evict_least_recently_used(self) -> None:
        cache = SessionCache(max_entries=2)
        cache.save("a", 1)
        cache.save("b", 2)
        cache.load("a")
        cache.save("c", 3)

        assert cache.load("a") == 1
        assert cache.load("b") is None
        assert cache.load("c") == 3

    def test_should_treat_malformed_file_as_miss(self, cache: SessionCache, tmp_path) -> None:
        (tmp_path / "portfolio_data.json").write_text("{not json")

        assert cache.load("portfolio_data") is None
        assert cache.is_expired("portfolio_data", 3600) is True

    def test_should_treat_envelope_without_timestamp_as_miss(
        self, cache: SessionCache, tmp_path
    ) -> None:
        (tmp_path / "portfolio_data.json").write_text(json.dumps({"data": []}))

        assert cache.load("portfolio_data") is None

    def test_should_not_raise_on_unserializable_value(self, cache: SessionCache) -> None:
        cache.save("bad", {"value": object()})

        assert cache.load("bad") is None

    def test_should_remove_entry_and_file(self, cache: SessionCache, tmp_path) -> None:
        cache.save("portfolio_data", [])

        cache.remove("portfolio_data")
        cache.remove("never_saved")

        assert cache.load("portfolio_data") is None
        assert not (tmp_path / "portfolio_data.json").exists()

    def test_should_clear_everything(self, cache: SessionCache, tmp_path) -> None:
        cache.save("a", 1)
        cache.save("b", 2)

        cache.clear()

        assert len(cache) == 0
        assert list(tmp_path.glob("*.json")) == []


class TestExpiry:
    """Test suite for is_expired()."""

    def test_should_report_missing_entry_as_expired(self, cache: SessionCache) -> None:
        assert cache.is_expired("missing", 60) is True

    def test_should_compare_age_with_max_age(self, cache: SessionCache) -> None:
        with patch("foliosync.infrastructure.cache.session_cache.time") as clock:
            clock.time.return_value = 1_000.0
            cache.save("portfolio_data", [])

            clock.time.return_value = 1_030.0
            assert cache.is_expired("portfolio_data", 60) is False

            clock.time.return_value = 1_061.0
            assert cache.is_expired("portfolio_data", 60) is True
