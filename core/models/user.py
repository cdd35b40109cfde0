# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================
# These models define the API contract for user operations:
# - UserPayload: Input body for create and update
# - UserResponse: Output when returning a user to clients
# - User: Domain model passed between the service and the store
# - ActiveState / DeletedState: Lifecycle of a user record
#
# The table keeps a nullable deleted_at column; in Python the lifecycle is
# an explicit tagged state so "is this user deleted?" is never a None check.
# =============================================================================

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class ActiveState(BaseModel):
    """A live user, visible to list and get."""
    state: Literal["active"] = "active"


class DeletedState(BaseModel):
    """A soft-deleted user. The row is kept but hidden from every query."""
    state: Literal["deleted"] = "deleted"
    at: datetime = Field(..., description="When the user was soft-deleted")


UserLifecycle = Annotated[ActiveState | DeletedState, Field(discriminator="state")]


class User(BaseModel):
    """
    A user as the application sees it.

    Built by lib.user_store from a UserRecord row. `version` is the
    optimistic-concurrency token the store checks on save.
    """

    id: int
    name: str = ""
    email: str = ""
    created_at: datetime
    updated_at: datetime
    version: int = 1
    lifecycle: UserLifecycle = Field(default_factory=ActiveState)

    @property
    def is_deleted(self) -> bool:
        return isinstance(self.lifecycle, DeletedState)

    @property
    def deleted_at(self) -> datetime | None:
        if isinstance(self.lifecycle, DeletedState):
            return self.lifecycle.at
        return None

    def to_response(self) -> "UserResponse":
        """Convert to the public JSON shape."""
        return UserResponse(
            id=self.id,
            created_at=self.created_at,
            updated_at=self.updated_at,
            deleted_at=self.deleted_at,
            name=self.name,
            email=self.email,
        )


class UserPayload(BaseModel):
    """
    Request body for POST /users and PUT /users/{id}.

    Both fields are optional. Store-assigned fields (id, created_at,
    updated_at, deleted_at) and any unknown keys are ignored.

    Example:
        {
            "name": "Ada",
            "email": "ada@x.io"
        }
    """

    name: str | None = Field(
        default=None,
        description="Display name",
        examples=["Ada"],
    )
    email: str | None = Field(
        default=None,
        description="Email address (not validated or deduplicated)",
        examples=["ada@x.io"],
    )

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "examples": [
                {"name": "Ada", "email": "ada@x.io"},
                {"email": "ada.lovelace@x.io"},
            ]
        },
    )

    def changes(self) -> dict[str, str]:
        """
        Fields the client actually sent with a non-null value.

        Used by update to overlay the body onto the loaded user; anything
        absent (or null) keeps its stored value.
        """
        return self.model_dump(exclude_unset=True, exclude_none=True)


class UserResponse(BaseModel):
    """
    Schema for returning a user to clients.

    Returned by every /users endpoint except DELETE. deleted_at is omitted
    from the JSON when the user is active.

    Example:
        {
            "id": 1,
            "created_at": "2024-01-15T10:30:00Z",
            "updated_at": "2024-01-15T10:30:00Z",
            "name": "Ada",
            "email": "ada@x.io"
        }
    """

    id: int = Field(..., description="Store-assigned user ID", examples=[1])
    created_at: datetime = Field(..., description="When the user was created")
    updated_at: datetime = Field(..., description="When the user was last saved")
    deleted_at: datetime | None = Field(
        default=None,
        description="When the user was soft-deleted (omitted for active users)",
    )
    name: str = Field(..., examples=["Ada"])
    email: str = Field(..., examples=["ada@x.io"])


class ErrorResponse(BaseModel):
    """Error body for every 4xx/5xx response."""
    error: str = Field(..., examples=["User not found"])


class PongResponse(BaseModel):
    """Response of GET /ping."""
    message: str = Field(default="pong")
