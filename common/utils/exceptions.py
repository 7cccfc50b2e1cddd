"""
Custom HTTP exceptions with error codes.

Extends FastAPI's HTTPException with standardized error codes
for consistent API error responses. Every failure the API reports
maps to exactly one of these kinds; handlers never inspect messages.

Example:
    from common.utils import NotFoundException

    @app.get("/careers/{id}")
    async def get_job(id: str):
        job = await jobs.find_one({"id": id})
        if not job:
            raise NotFoundException("Job not found", code="JOB_NOT_FOUND")
        return job
"""

from typing import Optional, Any, Dict
from fastapi import HTTPException


class APIException(HTTPException):
    """
    Base API exception with error code support.

    Provides consistent error response format across the API.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Create an API exception.

        Args:
            status_code: HTTP status code
            message: Human-readable error message
            code: Machine-readable error code
            details: Additional error details
            headers: Optional response headers
        """
        detail: Dict[str, Any] = {"message": message}

        if code:
            detail["code"] = code

        if details is not None:
            detail["details"] = details

        self.message = message
        self.code = code
        self.details = details

        super().__init__(
            status_code=status_code,
            detail=detail,
            headers=headers,
        )


class BadRequestException(APIException):
    """400 Bad Request - Invalid input or malformed request."""

    def __init__(
        self,
        message: str = "Bad request",
        code: str = "BAD_REQUEST",
        details: Optional[Any] = None,
    ):
        super().__init__(400, message, code, details)


class ValidationException(APIException):
    """400 Validation Error - Request validation failed before reaching storage."""

    def __init__(
        self,
        message: str = "Validation failed",
        code: str = "VALIDATION_ERROR",
        details: Optional[Any] = None,
        errors: Optional[Dict[str, str]] = None,
    ):
        detail_info = details
        if errors:
            detail_info = {"errors": errors, **(details or {})}
        self.errors = errors or {}
        super().__init__(400, message, code, detail_info)


class UnauthorizedException(APIException):
    """401 Unauthorized - Missing or invalid authentication."""

    def __init__(
        self,
        message: str = "Access denied",
        code: str = "UNAUTHORIZED",
        details: Optional[Any] = None,
    ):
        super().__init__(
            401,
            message,
            code,
            details,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidCredentialsException(APIException):
    """401 Invalid credentials - one message for every login failure cause."""

    def __init__(self):
        super().__init__(401, "Invalid credentials", "INVALID_CREDENTIALS")


class ForbiddenException(APIException):
    """403 Forbidden - Valid auth but insufficient permissions."""

    def __init__(
        self,
        message: str = "Forbidden",
        code: str = "FORBIDDEN",
        details: Optional[Any] = None,
    ):
        super().__init__(403, message, code, details)


class NotFoundException(APIException):
    """404 Not Found - Resource doesn't exist."""

    def __init__(
        self,
        message: str = "Not found",
        code: str = "NOT_FOUND",
        details: Optional[Any] = None,
    ):
        super().__init__(404, message, code, details)


class ConflictException(APIException):
    """409 Conflict - Resource already exists or state conflict."""

    def __init__(
        self,
        message: str = "Conflict",
        code: str = "CONFLICT",
        details: Optional[Any] = None,
    ):
        super().__init__(409, message, code, details)


class InternalServerException(APIException):
    """500 Internal Server Error - Unexpected server error."""

    def __init__(
        self,
        message: str = "Internal server error",
        code: str = "INTERNAL_ERROR",
        details: Optional[Any] = None,
    ):
        super().__init__(500, message, code, details)


# Alias for InternalServerException
ServerException = InternalServerException


class ServiceUnavailableException(APIException):
    """503 Service Unavailable - Storage backend unreachable or timed out."""

    def __init__(
        self,
        message: str = "Service unavailable",
        code: str = "SERVICE_UNAVAILABLE",
        retry_after: Optional[int] = None,
    ):
        headers = {}
        if retry_after:
            headers["Retry-After"] = str(retry_after)

        super().__init__(
            status_code=503,
            message=message,
            code=code,
            details={"retryAfter": retry_after} if retry_after else None,
            headers=headers if headers else None,
        )
