# =============================================================================
# core/services/user_service.py - User Business Logic
# =============================================================================
# Handles user CRUD operations on top of the persistence gateway.
# Separates HTTP concerns (app/routers/users.py) from store access
# (lib/user_store.py).
# =============================================================================

import logging

from pydantic import ValidationError

from app.exceptions import (
    ConcurrentUpdateError,
    PayloadValidationError,
    UserNotFoundError,
    format_validation_errors,
)
from core.models.user import User, UserPayload
from lib.user_store import StaleRecordError, UserStore

logger = logging.getLogger(__name__)


def parse_user_payload(body: bytes | str) -> UserPayload:
    """
    Parse a raw JSON request body into a UserPayload.

    Raises:
        PayloadValidationError: If the body is empty, not JSON, not a JSON
            object, or has a field of the wrong type
    """
    try:
        return UserPayload.model_validate_json(body)
    except ValidationError as e:
        raise PayloadValidationError(format_validation_errors(e.errors()))


class UserService:
    """
    Service for user management operations.

    One instance per request, wrapping that request's UserStore.
    """

    def __init__(self, store: UserStore):
        self.store = store

    def create_user(self, body: bytes | str) -> User:
        """
        Create a user from a JSON body.

        Missing name or email are stored as empty strings.

        Raises:
            PayloadValidationError: If the body cannot be parsed
        """
        payload = parse_user_payload(body)
        return self.store.insert(
            name=payload.name if payload.name is not None else "",
            email=payload.email if payload.email is not None else "",
        )

    def list_users(self) -> list[User]:
        """All users that have not been deleted."""
        return self.store.find_all()

    def get_user(self, user_id: str) -> User:
        """
        Get a user by ID.

        Raises:
            UserNotFoundError: If the ID is malformed, unknown, or deleted
        """
        user = self.store.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def update_user(self, user_id: str, body: bytes | str) -> User:
        """
        Overlay the fields present in `body` onto an existing user and save.

        The user is looked up before the body is parsed, so an unknown ID
        is a 404 even when the body is also malformed.

        Raises:
            UserNotFoundError: If the user doesn't exist
            PayloadValidationError: If the body cannot be parsed
            ConcurrentUpdateError: If the user changed since it was loaded
        """
        user = self.get_user(user_id)
        payload = parse_user_payload(body)

        changed = user.model_copy(update=payload.changes())
        try:
            return self.store.save(changed)
        except StaleRecordError as e:
            logger.warning(f"Rejected stale update: {e}")
            raise ConcurrentUpdateError(user.id)

    def delete_user(self, user_id: str) -> User:
        """
        Soft-delete a user.

        Raises:
            UserNotFoundError: If the user doesn't exist or is already deleted
        """
        user = self.get_user(user_id)
        deleted = self.store.soft_delete(user)
        if deleted is None:
            raise UserNotFoundError(user_id)
        return deleted
