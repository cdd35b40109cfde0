# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - user.py: User domain model, lifecycle states, request/response schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .user import (
    ActiveState,
    DeletedState,
    ErrorResponse,
    PongResponse,
    User,
    UserLifecycle,
    UserPayload,
    UserResponse,
)

__all__ = [
    "ActiveState",
    "DeletedState",
    "ErrorResponse",
    "PongResponse",
    "User",
    "UserLifecycle",
    "UserPayload",
    "UserResponse",
]
