"""Application exception classes and handlers."""

from typing import Any

import structlog
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger()


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Any = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(message)


# --- Validation (400) ---


class InvalidMessageRoleError(AppException):
    """Only user-authored messages may be submitted."""

    def __init__(self) -> None:
        super().__init__(
            message="Only user messages can be sent",
            code="INVALID_MESSAGE_ROLE",
            status_code=400,
        )


# --- Authentication (401) ---


class AuthenticationError(AppException):
    """Base authentication error."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message=message, code="AUTHENTICATION_ERROR", status_code=401)


class TokenExpiredError(AppException):
    """ID token has expired."""

    def __init__(self) -> None:
        super().__init__(
            message="Token has expired",
            code="TOKEN_EXPIRED",
            status_code=401,
        )


class InvalidTokenError(AppException):
    """ID token failed verification."""

    def __init__(self) -> None:
        super().__init__(
            message="Invalid token",
            code="INVALID_TOKEN",
            status_code=401,
        )


# --- Authorization (403) ---


class AuthorizationError(AppException):
    """Caller is acting on another user's data."""

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message=message, code="AUTHORIZATION_ERROR", status_code=403)


# --- Conflict (409) ---


class SessionAlreadyExistsError(AppException):
    """A chat session with this session id already exists."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            message="Chat session already exists",
            code="SESSION_ALREADY_EXISTS",
            status_code=409,
            details={"sessionId": session_id},
        )


class SessionBusyError(AppException):
    """The append lock of a session could not be acquired in time."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            message="Chat session is busy, try again",
            code="SESSION_BUSY",
            status_code=409,
            details={"sessionId": session_id},
        )


# --- Server / upstream (5xx) ---


class AIResponseError(AppException):
    """The language model call timed out, failed, or returned nothing."""

    def __init__(self, details: str) -> None:
        super().__init__(
            message="Failed to get AI response",
            code="AI_RESPONSE_ERROR",
            status_code=500,
            details=details,
        )


class StorageError(AppException):
    """The persistence store could not complete an operation."""

    def __init__(self, details: str | None = None) -> None:
        super().__init__(
            message="Storage unavailable",
            code="STORAGE_ERROR",
            status_code=500,
            details=details,
        )


class IdentityProviderUnavailableError(AppException):
    """Signing keys of the identity provider could not be fetched."""

    def __init__(self) -> None:
        super().__init__(
            message="Identity provider unavailable",
            code="IDENTITY_PROVIDER_UNAVAILABLE",
            status_code=503,
        )


# --- Exception Handlers ---


def error_body(exc: AppException) -> dict[str, Any]:
    """Render the ``{error, code, details}`` payload for an AppException."""
    body: dict[str, Any] = {"error": exc.message, "code": exc.code}
    if exc.details is not None:
        body["details"] = exc.details
    return body


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Central exception handler for AppException."""
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed payloads as a 400 client error."""
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request data",
            "code": "VALIDATION_ERROR",
            "details": jsonable_encoder(exc.errors()),
        },
    )


async def storage_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Map database failures escaping a request to a storage error."""
    logger.error(
        "Storage operation failed",
        path=request.url.path,
        error=str(exc),
    )
    return await app_exception_handler(request, StorageError())
