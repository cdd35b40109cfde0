# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The Database lives on app.state (created in the lifespan hook); each
# request gets its own Session and its own UserStore built on top of it.
# =============================================================================

from typing import Annotated, Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.config import Settings
from core.services.user_service import UserService
from lib.database import Database
from lib.user_store import UserStore


def get_app_settings(request: Request) -> Settings:
    """Get the Settings the application was created with."""
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """Get the Database created at application startup."""
    return request.app.state.database


def get_db_session(
    database: Annotated[Database, Depends(get_database)],
) -> Iterator[Session]:
    """
    Open a session for the duration of one request.

    Closed after the response is sent, whatever happened in the handler.
    """
    session = database.session()
    try:
        yield session
    finally:
        session.close()


def get_user_store(
    session: Annotated[Session, Depends(get_db_session)],
) -> UserStore:
    """Build the persistence gateway for this request."""
    return UserStore(session)


def get_user_service(
    store: Annotated[UserStore, Depends(get_user_store)],
) -> UserService:
    """Build the user service for this request."""
    return UserService(store)


async def get_raw_body(request: Request) -> bytes:
    """
    Read the request body without parsing it.

    Handlers parse it themselves so that a missing user is reported before
    a malformed body (update looks the user up first).
    """
    return await request.body()


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
DatabaseDep = Annotated[Database, Depends(get_database)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
RawBody = Annotated[bytes, Depends(get_raw_body)]
