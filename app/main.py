# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the User Directory API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python scripts/start_server.py
#
# Interactive API docs are served at /swagger (Swagger UI) and /redoc.
# =============================================================================

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from app import __version__
from app.config import Settings, get_settings
from app.exceptions import (
    UserApiException,
    unexpected_exception_handler,
    user_api_exception_handler,
    validation_exception_handler,
)
from app.routers import health, users
from lib.database import Database

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Open the database and create the users table if absent
    - Shutdown: Dispose of pooled connections
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(f"Starting User Directory API in {settings.ENVIRONMENT} mode")
    database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    database.create_schema()
    app.state.database = database

    yield

    # Shutdown
    logger.info("Shutting down User Directory API")
    database.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build a FastAPI application.

    Args:
        settings: Configuration to use; defaults to the cached environment
            settings. Tests pass their own to point at a temporary database.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="User Directory API",
        description="""
## User CRUD over a relational store

Create, list, fetch, update and delete users.

- Deleting a user is a **soft delete**: the record is kept with `deleted_at`
  set and no longer appears in any response.
- Updating a user only changes the fields present in the body.
- Every error response has the shape `{"error": "<message>"}`.

### Quick Start

```bash
curl -X POST http://localhost:8080/users \\
  -H "Content-Type: application/json" \\
  -d '{"name": "Ada", "email": "ada@x.io"}'

curl http://localhost:8080/users/1
```
""",
        version=__version__,
        terms_of_service="http://swagger.io/terms/",
        contact={
            "name": "API Support",
            "url": "http://www.swagger.io/support",
            "email": "support@swagger.io",
        },
        license_info={
            "name": "Apache 2.0",
            "url": "http://www.apache.org/licenses/LICENSE-2.0.html",
        },
        docs_url="/swagger",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "Users",
                "description": "Create and manage users",
            },
            {
                "name": "Health",
                "description": "API liveness and health checks",
            },
        ],
    )
    app.state.settings = settings

    # =========================================================================
    # Middleware
    # =========================================================================

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Access log: one line per request with status and duration."""
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {duration_ms:.1f}ms"
        )
        return response

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    app.add_exception_handler(UserApiException, user_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)

    # =========================================================================
    # Routers
    # =========================================================================

    # User CRUD endpoints
    app.include_router(
        users.router,
        prefix="/users",
        tags=["Users"]
    )

    # Ping and health check endpoints
    app.include_router(
        health.router,
        tags=["Health"]
    )

    # =========================================================================
    # Root Endpoint
    # =========================================================================

    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint - returns API info.
        """
        return {
            "name": "User Directory API",
            "version": __version__,
            "docs": "/swagger",
            "health": "/health",
        }

    return app


app = create_app()
