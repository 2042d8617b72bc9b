"""
Centralized error handling utilities
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from typing import Any, Dict, Optional
import traceback

from skillproof import config
from skillproof.utils.logger import logger


class AppException(Exception):
    """Base application exception"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Referenced entity does not exist (or is inactive where activity is required)"""

    def __init__(self, resource: str, identifier: Any, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
            details={"resource": resource, "identifier": identifier, **(details or {})}
        )


class NotAuthorizedError(AppException):
    """Entity exists but does not belong to the caller"""

    def __init__(self, message: str = "Access denied", status_code: int = status.HTTP_403_FORBIDDEN):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code="NOT_AUTHORIZED"
        )


class AlreadyExistsError(AppException):
    """Uniqueness precondition violated"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            error_code="ALREADY_EXISTS",
            details=details or {}
        )


class AlreadyCompletedError(AppException):
    """Exactly-once operation invoked on an entity already in its terminal state"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            error_code="ALREADY_COMPLETED",
            details=details or {}
        )


class InvalidInputError(AppException):
    """Malformed or out-of-range input"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="INVALID_INPUT",
            details=details or {}
        )


class NotVerifiedError(AppException):
    """User skill has not passed verification yet"""

    def __init__(self, user_skill_id: int):
        super().__init__(
            message=f"User skill not found or not verified: {user_skill_id}",
            status_code=status.HTTP_409_CONFLICT,
            error_code="NOT_VERIFIED",
            details={"user_skill_id": user_skill_id}
        )


def create_error_response(
    message: str,
    status_code: int,
    error_code: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """
    Create standardized error response

    Returns:
        JSONResponse with ``{"success": false, "error": {...}}`` body
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {
                "code": error_code,
                "message": message,
                "details": details or {}
            }
        }
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    logger.warning(
        f"Application exception: {exc.message}",
        extra={"error_code": exc.error_code, "path": request.url.path}
    )
    return create_error_response(
        message=exc.message,
        status_code=exc.status_code,
        error_code=exc.error_code,
        details=exc.details,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return create_error_response(
        message=str(exc.detail),
        status_code=exc.status_code,
        error_code="HTTP_ERROR",
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg"),
            "type": error.get("type")
        }
        for error in exc.errors()
    ]

    logger.warning("Validation error", extra={"path": request.url.path})

    return create_error_response(
        message="Validation failed",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        error_code="VALIDATION_ERROR",
        details={"validation_errors": errors},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unhandled exceptions: log the traceback, never leak store errors outside DEBUG"""
    logger.error("Unhandled exception", exc_info=exc, extra={"path": request.url.path})

    error_message = str(exc) if config.DEBUG else "An unexpected error occurred"
    error_details = {"traceback": traceback.format_exc()} if config.DEBUG else {}

    return create_error_response(
        message=error_message,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code="INTERNAL_SERVER_ERROR",
        details=error_details,
    )
