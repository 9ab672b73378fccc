"""
Unit tests for custom exceptions.
Testing all exception classes and their attributes.
"""

from foliosync.core.exceptions.portfolio import (
    CacheError,
    ConfigurationError,
    FolioSyncError,
    ItemNotFoundError,
    RemoteStoreError,
    ValidationError,
)


class TestFolioSyncError:
    """Tests for FolioSyncError base class."""

    def test_should_create_base_exception_with_message(self) -> None:
        exc = FolioSyncError("Test error message")
        assert str(exc) == "Test error message"
        assert isinstance(exc, Exception)

    def test_should_root_every_domain_error(self) -> None:
        for exc_type in (ValidationError, ConfigurationError, CacheError):
            assert issubclass(exc_type, FolioSyncError)
        assert issubclass(RemoteStoreError, FolioSyncError)


class TestValidationError:
    """Tests for ValidationError."""

    def test_should_handle_field_specific_validation(self) -> None:
        exc = ValidationError("Purchase price must be positive, got -100")
        assert "Purchase price" in str(exc)
        assert "-100" in str(exc)
        assert isinstance(exc, FolioSyncError)


class TestItemNotFoundError:
    """Tests for ItemNotFoundError."""

    def test_should_carry_id_and_collection(self) -> None:
        exc = ItemNotFoundError("abc-123", "holdings")
        assert exc.item_id == "abc-123"
        assert exc.collection == "holdings"
        assert str(exc) == "Item not found in holdings: abc-123"

    def test_should_be_a_validation_error(self) -> None:
        """Test that a missing id counts as a pre-flight failure."""
        assert isinstance(ItemNotFoundError("x"), ValidationError)


class TestRemoteStoreError:
    """Tests for RemoteStoreError."""

    def test_should_carry_operation(self) -> None:
        exc = RemoteStoreError("Network down", "update")
        assert str(exc) == "Network down"
        assert exc.operation == "update"

    def test_should_default_operation(self) -> None:
        assert RemoteStoreError("boom").operation == "operation"
