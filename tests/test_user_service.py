# =============================================================================
# tests/test_user_service.py - User Service Tests
# =============================================================================
# Tests UserService against a mocked UserStore, so ordering and error
# mapping can be checked without a database.
# =============================================================================

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from app.exceptions import (
    ConcurrentUpdateError,
    PayloadValidationError,
    UserNotFoundError,
)
from core.models import DeletedState, User
from core.services.user_service import UserService, parse_user_payload
from lib.user_store import StaleRecordError, UserStore


NOW = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def existing_user():
    return User(id=1, name="Ada", email="ada@x.io", created_at=NOW, updated_at=NOW)


@pytest.fixture
def mock_store(existing_user):
    store = MagicMock(spec=UserStore)
    store.find_by_id.return_value = existing_user
    store.save.side_effect = lambda user: user
    return store


@pytest.fixture
def service(mock_store):
    return UserService(mock_store)


# =============================================================================
# Payload Parsing
# =============================================================================

class TestParseUserPayload:
    """Tests for parse_user_payload."""

    def test_valid_body(self):
        payload = parse_user_payload(b'{"name": "Ada"}')

        assert payload.name == "Ada"
        assert payload.email is None

    @pytest.mark.parametrize("body", [
        b"",
        b"not-json",
        b'"not-json"',
        b"[1, 2]",
        b"null",
        b'{"name": 5}',
        b'{"name": "Ada"',
    ])
    def test_invalid_bodies(self, body):
        with pytest.raises(PayloadValidationError) as exc_info:
            parse_user_payload(body)

        assert exc_info.value.status_code == 400
        assert exc_info.value.message

    def test_error_names_the_field(self):
        with pytest.raises(PayloadValidationError) as exc_info:
            parse_user_payload(b'{"email": ["a", "b"]}')

        assert exc_info.value.message.startswith("email:")


# =============================================================================
# Create
# =============================================================================

class TestCreateUser:
    """Tests for UserService.create_user."""

    def test_passes_fields_to_store(self, service, mock_store):
        service.create_user(b'{"name": "Ada", "email": "ada@x.io", "id": 7}')

        mock_store.insert.assert_called_once_with(name="Ada", email="ada@x.io")

    def test_missing_fields_become_empty(self, service, mock_store):
        service.create_user(b"{}")

        mock_store.insert.assert_called_once_with(name="", email="")

    def test_bad_body_never_reaches_store(self, service, mock_store):
        with pytest.raises(PayloadValidationError):
            service.create_user(b"not-json")

        mock_store.insert.assert_not_called()


# =============================================================================
# Get
# =============================================================================

class TestGetUser:
    """Tests for UserService.get_user."""

    def test_found(self, service, existing_user, mock_store):
        assert service.get_user("1") == existing_user
        mock_store.find_by_id.assert_called_once_with("1")

    def test_missing(self, service, mock_store):
        mock_store.find_by_id.return_value = None

        with pytest.raises(UserNotFoundError) as exc_info:
            service.get_user("42")

        assert exc_info.value.to_dict() == {"error": "User not found"}
        assert exc_info.value.details == {"user_id": "42"}


# =============================================================================
# Update
# =============================================================================

class TestUpdateUser:
    """Tests for UserService.update_user."""

    def test_overlays_sent_fields(self, service, mock_store):
        updated = service.update_user("1", b'{"name": "Ada Lovelace"}')

        assert updated.name == "Ada Lovelace"
        assert updated.email == "ada@x.io"
        saved = mock_store.save.call_args.args[0]
        assert saved.id == 1
        assert saved.version == 1

    def test_id_in_body_ignored(self, service, mock_store):
        updated = service.update_user("1", b'{"id": 99, "name": "Grace"}')

        assert updated.id == 1

    def test_missing_user_checked_before_body(self, service, mock_store):
        """An unknown ID wins over a malformed body."""
        mock_store.find_by_id.return_value = None

        with pytest.raises(UserNotFoundError):
            service.update_user("42", b"not-json")

    def test_bad_body_not_saved(self, service, mock_store):
        with pytest.raises(PayloadValidationError):
            service.update_user("1", b"not-json")

        mock_store.save.assert_not_called()

    def test_stale_write_becomes_conflict(self, service, mock_store):
        mock_store.save.side_effect = StaleRecordError(1, 1)

        with pytest.raises(ConcurrentUpdateError) as exc_info:
            service.update_user("1", b'{"name": "Grace"}')

        assert exc_info.value.status_code == 409


# =============================================================================
# Delete
# =============================================================================

class TestDeleteUser:
    """Tests for UserService.delete_user."""

    def test_soft_deletes(self, service, existing_user, mock_store):
        mock_store.soft_delete.return_value = existing_user.model_copy(
            update={"lifecycle": DeletedState(at=NOW)}
        )

        deleted = service.delete_user("1")

        assert deleted.is_deleted
        mock_store.soft_delete.assert_called_once_with(existing_user)

    def test_missing(self, service, mock_store):
        mock_store.find_by_id.return_value = None

        with pytest.raises(UserNotFoundError):
            service.delete_user("1")

        mock_store.soft_delete.assert_not_called()

    def test_deleted_meanwhile(self, service, mock_store):
        """Losing a delete race is reported as not found."""
        mock_store.soft_delete.return_value = None

        with pytest.raises(UserNotFoundError):
            service.delete_user("1")
