# =============================================================================
# app/routers/users.py - User CRUD Endpoints
# =============================================================================
# Five routes over the User entity, mounted at /users in main.py.
#
# Endpoints are plain `def` functions, so FastAPI runs each request on a
# threadpool worker while the store call blocks.
#
# Request bodies are read raw and parsed by the service rather than
# declared as a pydantic parameter: update must report a missing user
# before it reports a malformed body. The body schema is still published
# in the OpenAPI document through `openapi_extra`.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Response, status

from app.dependencies import RawBody, UserServiceDep
from core.models.user import ErrorResponse, UserPayload, UserResponse

router = APIRouter()


USER_BODY = {
    "requestBody": {
        "required": True,
        "content": {
            "application/json": {
                "schema": UserPayload.model_json_schema(),
            }
        },
    }
}

UserId = Annotated[str, Path(description="User ID", examples=["1"])]

BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Malformed request body"}}
NOT_FOUND = {404: {"model": ErrorResponse, "description": "User not found"}}
CONFLICT = {409: {"model": ErrorResponse, "description": "User was modified concurrently"}}


# =============================================================================
# Endpoints
# =============================================================================

@router.post(
    "",
    response_model=UserResponse,
    response_model_exclude_none=True,
    summary="Create user",
    responses=BAD_REQUEST,
    openapi_extra=USER_BODY,
)
def create_user(body: RawBody, service: UserServiceDep):
    """
    Create a new user.

    The store assigns `id`, `created_at` and `updated_at`; any values the
    client sends for them are ignored.
    """
    return service.create_user(body).to_response()


@router.get(
    "",
    response_model=list[UserResponse],
    response_model_exclude_none=True,
    summary="Get users",
)
def list_users(service: UserServiceDep):
    """
    List all users.

    Deleted users are never included. No pagination.
    """
    return [user.to_response() for user in service.list_users()]


@router.get(
    "/{id}",
    response_model=UserResponse,
    response_model_exclude_none=True,
    summary="Get user by ID",
    responses=NOT_FOUND,
)
def get_user(id: UserId, service: UserServiceDep):
    """Get a user by ID."""
    return service.get_user(id).to_response()


@router.put(
    "/{id}",
    response_model=UserResponse,
    response_model_exclude_none=True,
    summary="Update user",
    responses={**BAD_REQUEST, **NOT_FOUND, **CONFLICT},
    openapi_extra=USER_BODY,
)
def update_user(id: UserId, body: RawBody, service: UserServiceDep):
    """
    Update a user's details by ID.

    Fields missing from the body keep their current values.
    """
    return service.update_user(id, body).to_response()


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete user",
    responses=NOT_FOUND,
)
def delete_user(id: UserId, service: UserServiceDep):
    """
    Delete a user by ID.

    The user is soft-deleted: the row is kept with `deleted_at` set and
    disappears from every other endpoint.
    """
    service.delete_user(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
