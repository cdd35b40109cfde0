# =============================================================================
# lib/database.py - Relational Store Setup
# =============================================================================
# This module owns everything SQLAlchemy-specific that is not a query:
# - UserRecord: the declarative table mapping for the "users" table
# - Database: engine + session factory built from a DATABASE_URL
#
# The schema is created once at startup (see app/main.py lifespan) and
# sessions are handed out per request by app/dependencies.py.
#
# Usage:
#   from lib.database import Database
#   database = Database("sqlite:///./users.db")
#   database.create_schema()
#   with database.session() as session:
#       ...
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all table mappings."""


class UserRecord(Base):
    """
    Row mapping for the users table.

    Timestamps are written by lib.user_store, never by the database, so
    created_at and updated_at carry exactly the values the gateway chose.
    A non-null deleted_at marks the row as soft-deleted.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    email: Mapped[str] = mapped_column(String, nullable=False, default="")

    # Optimistic concurrency token, bumped on every save
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        return f"<UserRecord(id={self.id}, email={self.email}, deleted_at={self.deleted_at})>"


class Database:
    """
    Engine and session factory for one DATABASE_URL.

    One instance is created per application (not per process) and stored on
    app.state, so tests can run several isolated apps side by side.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        connect_args = {}
        if url.startswith("sqlite"):
            # Requests run on threadpool workers, not the thread that opened
            # the connection
            connect_args["check_same_thread"] = False

        self.engine: Engine = create_engine(url, echo=echo, connect_args=connect_args)
        self._session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

    def create_schema(self) -> None:
        """Create the users table if it does not exist yet."""
        Base.metadata.create_all(self.engine)
        logger.info(f"Database schema ready at {self.engine.url.render_as_string(hide_password=True)}")

    def session(self) -> Session:
        """Open a new session. Callers are responsible for closing it."""
        return self._session_factory()

    def ping(self) -> None:
        """Run a trivial query; raises if the store is unreachable."""
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def dispose(self) -> None:
        """Close all pooled connections."""
        self.engine.dispose()
        logger.info("Database engine disposed")
