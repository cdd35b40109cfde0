# =============================================================================
# lib/user_store.py - User Persistence Gateway
# =============================================================================
# Translates user operations into SQLAlchemy queries against the users table:
# - insert: create a row, assigning id and timestamps
# - find_all / find_by_id: read live (not soft-deleted) rows
# - save: version-checked conditional UPDATE of name/email
# - soft_delete: stamp deleted_at instead of removing the row
#
# A UserStore wraps one SQLAlchemy Session and is built per request by
# app/dependencies.py. It returns core.models.User objects, never ORM rows.
#
# Usage:
#   store = UserStore(session)
#   user = store.insert(name="Ada", email="ada@x.io")
#   same = store.find_by_id(str(user.id))
# =============================================================================

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import Select, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.models.user import ActiveState, DeletedState, User
from lib.database import UserRecord

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"[0-9]+")

# SQLite INTEGER PRIMARY KEY is a signed 64-bit value
_MAX_KEY = 2**63 - 1


class StaleRecordError(Exception):
    """
    Raised when a conditional write matched no row.

    The user was saved or deleted by someone else between the caller's read
    and this write. Reload the user and apply the change again.
    """

    def __init__(self, user_id: int, expected_version: int):
        super().__init__(
            f"User {user_id} is no longer at version {expected_version}"
        )
        self.user_id = user_id
        self.expected_version = expected_version


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything we store is UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def parse_user_key(key: Any) -> int | None:
    """
    Coerce a path parameter into a primary key.

    Only plain base-10 digit strings inside the signed 64-bit range are
    accepted. Anything else returns None, which callers treat exactly like
    a missing user.

    Examples:
        parse_user_key("42")   -> 42
        parse_user_key("abc")  -> None
        parse_user_key("-1")   -> None
        parse_user_key(" 1")   -> None
    """
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        value = key
    else:
        text = str(key)
        if not _KEY_PATTERN.fullmatch(text):
            return None
        value = int(text)

    if value < 1 or value > _MAX_KEY:
        return None
    return value


class UserStore:
    """
    Persistence gateway for users.

    Every read goes through `_live()`, so soft-deleted rows can never leak
    into list or get results. Each write commits on its own; there is no
    transaction spanning several calls.
    """

    def __init__(self, session: Session):
        self.session = session

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _live() -> Select[tuple[UserRecord]]:
        return select(UserRecord).where(UserRecord.deleted_at.is_(None))

    @staticmethod
    def _to_user(record: UserRecord) -> User:
        deleted_at = _as_utc(record.deleted_at)
        lifecycle = DeletedState(at=deleted_at) if deleted_at else ActiveState()
        return User(
            id=record.id,
            name=record.name,
            email=record.email,
            created_at=_as_utc(record.created_at),
            updated_at=_as_utc(record.updated_at),
            version=record.version,
            lifecycle=lifecycle,
        )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert(self, name: str = "", email: str = "") -> User:
        """
        Insert a new user.

        The store assigns the id; created_at and updated_at are both set to
        the same current UTC time.

        Returns:
            The stored user, including generated fields
        """
        now = _utcnow()
        record = UserRecord(
            name=name,
            email=email,
            created_at=now,
            updated_at=now,
            version=1,
        )

        try:
            self.session.add(record)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to insert user: {e}")
            raise

        logger.info(f"Created user: {record.id}")
        return self._to_user(record)

    def save(self, user: User) -> User:
        """
        Persist name and email of an existing user.

        Issues a single UPDATE guarded by id, version and deleted_at, so a
        concurrent save or delete since `user` was loaded is detected rather
        than silently overwritten.

        Returns:
            The user with refreshed updated_at and bumped version

        Raises:
            StaleRecordError: If the row changed or was deleted meanwhile
        """
        updated_at = _utcnow()
        if updated_at <= user.updated_at:
            # Coarse clocks can repeat a timestamp; updated_at must move forward
            updated_at = user.updated_at + timedelta(microseconds=1)

        statement = (
            update(UserRecord)
            .where(
                UserRecord.id == user.id,
                UserRecord.version == user.version,
                UserRecord.deleted_at.is_(None),
            )
            .values(
                name=user.name,
                email=user.email,
                updated_at=updated_at,
                version=UserRecord.version + 1,
            )
            .execution_options(synchronize_session=False)
        )

        try:
            result = self.session.execute(statement)
            if result.rowcount != 1:
                self.session.rollback()
                raise StaleRecordError(user.id, user.version)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to save user {user.id}: {e}")
            raise
        finally:
            # Rows loaded earlier in this session no longer match the table
            self.session.expire_all()

        logger.info(f"Updated user: {user.id} (version {user.version + 1})")
        return user.model_copy(
            update={"updated_at": updated_at, "version": user.version + 1}
        )

    def soft_delete(self, user: User) -> User | None:
        """
        Mark a user as deleted by stamping deleted_at.

        The row stays in the table. updated_at and version are left alone.

        Returns:
            The user in DeletedState, or None if it was already deleted
        """
        deleted_at = _utcnow()
        statement = (
            update(UserRecord)
            .where(UserRecord.id == user.id, UserRecord.deleted_at.is_(None))
            .values(deleted_at=deleted_at)
            .execution_options(synchronize_session=False)
        )

        try:
            result = self.session.execute(statement)
            if result.rowcount != 1:
                self.session.rollback()
                logger.info(f"User {user.id} was already deleted")
                return None
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to delete user {user.id}: {e}")
            raise
        finally:
            self.session.expire_all()

        logger.info(f"Soft-deleted user: {user.id}")
        return user.model_copy(update={"lifecycle": DeletedState(at=deleted_at)})

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def find_all(self) -> list[User]:
        """All live users, in the order the store returns them."""
        records = self.session.scalars(self._live()).all()
        logger.debug(f"Fetched {len(records)} users")
        return [self._to_user(record) for record in records]

    def find_by_id(self, key: Any) -> User | None:
        """
        Look up a live user by primary key.

        Args:
            key: Raw path parameter; coerced with parse_user_key

        Returns:
            The user, or None if the key is malformed, unknown, or deleted
        """
        user_id = parse_user_key(key)
        if user_id is None:
            logger.debug(f"Rejected malformed user key: {key!r}")
            return None

        record = self.session.scalars(
            self._live().where(UserRecord.id == user_id)
        ).first()
        return self._to_user(record) if record else None
