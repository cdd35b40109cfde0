# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app import __version__
from app.dependencies import DatabaseDep, SettingsDep
from core.models.user import PongResponse

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class ChecksResponse(BaseModel):
    """Individual service checks."""
    database: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str
    environment: str
    version: str
    checks: ChecksResponse


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/ping", response_model=PongResponse)
async def ping():
    """
    Liveness check.

    Answers as long as the process is serving requests.
    """
    return PongResponse(message="pong")


@router.get("/health", response_model=HealthResponse)
def health_check(database: DatabaseDep, settings: SettingsDep):
    """
    Health check endpoint.

    Reports "healthy" when the database answers a trivial query,
    "degraded" otherwise.
    """
    checks = ChecksResponse(database="unknown")

    try:
        database.ping()
        checks.database = "healthy"
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        checks.database = f"unhealthy: {str(e)[:50]}"

    return HealthResponse(
        status="healthy" if checks.database == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.ENVIRONMENT,
        version=__version__,
        checks=checks,
    )
