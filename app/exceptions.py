# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error response has the same body: {"error": "<message>"}
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

USER_NOT_FOUND_MESSAGE = "User not found"


class UserApiException(Exception):
    """
    Base exception for the User API.

    All custom exceptions inherit from this class. `code` is only used for
    logging; clients see the status code and the message.
    """

    def __init__(
        self,
        message: str,
        code: str = "USER_API_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        return {"error": self.message}


# =============================================================================
# Request Exceptions
# =============================================================================

class PayloadValidationError(UserApiException):
    """Raised when a request body cannot be parsed into a user payload."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
        )


# =============================================================================
# User Exceptions
# =============================================================================

class UserNotFoundError(UserApiException):
    """Raised when a user ID doesn't exist, is malformed, or was deleted."""

    def __init__(self, user_id: str):
        super().__init__(
            message=USER_NOT_FOUND_MESSAGE,
            code="USER_NOT_FOUND",
            status_code=404,
            details={"user_id": user_id},
        )


class ConcurrentUpdateError(UserApiException):
    """Raised when a user changed between being loaded and being saved."""

    def __init__(self, user_id: int | str):
        super().__init__(
            message="User was modified concurrently",
            code="CONCURRENT_UPDATE",
            status_code=409,
            details={"user_id": str(user_id)},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def user_api_exception_handler(
    request: Request,
    exc: UserApiException
) -> JSONResponse:
    """Convert UserApiException to JSON response."""
    logger.info(
        f"{request.method} {request.url.path} -> {exc.status_code} {exc.code} {exc.details}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle FastAPI request validation errors.

    Path and query parameters are declared as plain strings, so this only
    fires for malformed requests FastAPI rejects before our handlers run.
    Rendered as 400 with the same error body as everything else.
    """
    return JSONResponse(
        status_code=400,
        content={"error": format_validation_errors(exc.errors())},
    )


async def unexpected_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions, including store failures."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "An unexpected error occurred"},
    )


def format_validation_errors(errors: list[dict[str, Any]] | Any) -> str:
    """
    Flatten pydantic/FastAPI error dicts into one readable line.

    Example:
        [{"loc": ("name",), "msg": "Input should be a valid string"}]
        -> "name: Input should be a valid string"
    """
    parts = []
    for error in errors:
        location = ".".join(
            str(part) for part in error.get("loc", ()) if part != "body"
        )
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"
