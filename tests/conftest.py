# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - Gives every test its own SQLite file under tmp_path
# - Provides an API client, a Database and a UserStore on that file
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# app.main builds a module-level app from the environment at import time

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test-users.db")

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from lib.database import Database
from lib.user_store import UserStore


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def database_url(tmp_path):
    """SQLite URL for a fresh, per-test database file."""
    return f"sqlite:///{tmp_path / 'users.db'}"


@pytest.fixture
def test_settings(database_url):
    """Settings pointing at the per-test database."""
    return Settings(DATABASE_URL=database_url, ENVIRONMENT="development")


@pytest.fixture
def app(test_settings):
    """A fresh application bound to the per-test database."""
    return create_app(test_settings)


@pytest.fixture
def client(app):
    """
    API client with the lifespan running.

    Entering the context manager runs startup, which creates the schema.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def database(database_url):
    """Database with the users table created."""
    db = Database(database_url)
    db.create_schema()
    yield db
    db.dispose()


@pytest.fixture
def store(database):
    """UserStore on a live session."""
    session = database.session()
    yield UserStore(session)
    session.close()


@pytest.fixture
def sample_user_payload():
    """Sample create body."""
    return {"name": "Ada", "email": "ada@x.io"}
