"""
Custom exceptions and error handlers for UpSkillNow Backend
Provides consistent error responses and logging
"""

import logging
from typing import Any, Dict, Optional

import sentry_sdk
from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from upskillnow.core.config import settings

logger = logging.getLogger(__name__)


class UpSkillException(Exception):
    """Base exception for UpSkillNow application"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(UpSkillException):
    """Missing or malformed request fields"""

    def __init__(self, message: str = "Invalid request", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class AuthenticationError(UpSkillException):
    """Missing, invalid or expired credentials"""

    error_code = "AUTHENTICATION_ERROR"

    def __init__(
        self, message: str = "Not authenticated", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code=self.error_code,
            details=details,
        )


class InvalidSignatureError(AuthenticationError):
    """Token signature does not match"""

    error_code = "INVALID_SIGNATURE"

    def __init__(self, message: str = "Invalid token signature"):
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    """Token is past its expiry"""

    error_code = "TOKEN_EXPIRED"

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class MalformedTokenError(AuthenticationError):
    """Token cannot be parsed or lacks required claims"""

    error_code = "MALFORMED_TOKEN"

    def __init__(self, message: str = "Malformed token"):
        super().__init__(message)


class AuthorizationError(UpSkillException):
    """Valid identity, insufficient role"""

    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="AUTHORIZATION_ERROR",
            details=details,
        )


class NotFoundError(UpSkillException):
    """Resource not found exception"""

    def __init__(self, resource: str = "Resource", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"{resource} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
            details=details,
        )


class ConflictError(UpSkillException):
    """Duplicate unique field"""

    def __init__(self, message: str = "Resource already exists", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="CONFLICT_ERROR",
            details=details,
        )


class InternalError(UpSkillException):
    """Unexpected failure, message stays generic"""

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="INTERNAL_ERROR",
        )


def error_body(message: str, error_code: str, request: Optional[Request] = None) -> Dict[str, Any]:
    body = {"error": message, "code": error_code}
    if request is not None and hasattr(request.state, "request_id"):
        body["request_id"] = request.state.request_id
    return body


def create_error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """
    Create standardized error response

    Args:
        request: FastAPI request object
        status_code: HTTP status code
        error_code: Application error code
        message: Error message
        headers: Optional extra response headers

    Returns:
        JSON response shaped as {"error": message, "code": error_code}
    """
    return JSONResponse(
        status_code=status_code,
        content=error_body(message, error_code, request),
        headers=headers,
    )


async def upskill_exception_handler(request: Request, exc: UpSkillException) -> JSONResponse:
    """Handle application exceptions"""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        f"Application exception: {exc.message}",
        extra={
            "error_code": exc.error_code,
            "status_code": exc.status_code,
            "path": request.url.path,
        },
    )

    if settings.SENTRY_DSN and exc.status_code >= 500:
        sentry_sdk.capture_exception(exc)

    return create_error_response(
        request=request,
        status_code=exc.status_code,
        error_code=exc.error_code,
        message=exc.message,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions"""
    logger.warning(
        f"HTTP exception: {exc.detail}",
        extra={"status_code": exc.status_code, "path": request.url.path},
    )

    return create_error_response(
        request=request,
        status_code=exc.status_code,
        error_code="HTTP_ERROR",
        message=str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


def describe_validation_errors(errors) -> str:
    """Build a message that names every missing or invalid field"""
    missing, invalid = [], []
    for error in errors:
        # Drop the "body"/"query" location prefix
        loc = [str(part) for part in error["loc"][1:]] or [str(error["loc"][0])]
        field = ".".join(loc)
        if error["type"] == "missing":
            missing.append(field)
        elif field not in invalid:
            invalid.append(field)

    parts = []
    if missing:
        parts.append(f"Missing required fields: {', '.join(missing)}")
    if invalid:
        parts.append(f"Invalid fields: {', '.join(invalid)}")
    return "; ".join(parts) or "Request validation failed"


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map request validation errors onto the 400 ValidationError envelope"""
    message = describe_validation_errors(exc.errors())
    logger.info("Validation error", extra={"path": request.url.path, "detail": message})

    return create_error_response(
        request=request,
        status_code=status.HTTP_400_BAD_REQUEST,
        error_code="VALIDATION_ERROR",
        message=message,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions"""
    logger.error(
        f"Unexpected error: {str(exc)}",
        extra={"exception_type": type(exc).__name__, "path": request.url.path},
        exc_info=True,
    )

    if settings.SENTRY_DSN:
        sentry_sdk.capture_exception(exc)

    internal = InternalError()
    return create_error_response(
        request=request,
        status_code=internal.status_code,
        error_code=internal.error_code,
        message=internal.message,
    )


def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI app

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(UpSkillException, upskill_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Catch-all handler for unexpected exceptions
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
