"""
Utilities module - Common helpers for API responses, exceptions, and validation.
"""

from common.utils.responses import success_response, error_response, paginated_response
from common.utils.exceptions import (
    APIException,
    BadRequestException,
    ValidationException,
    UnauthorizedException,
    InvalidCredentialsException,
    ForbiddenException,
    NotFoundException,
    ConflictException,
    ServerException,
    InternalServerException,
    ServiceUnavailableException,
)
from common.utils.validation import (
    is_blank,
    validate_email,
    validate_password,
    require_fields,
)
from common.utils.handlers import register_exception_handlers
from common.utils.logging import configure_logging, mask_uri

__all__ = [
    "success_response",
    "error_response",
    "paginated_response",
    "APIException",
    "BadRequestException",
    "ValidationException",
    "UnauthorizedException",
    "InvalidCredentialsException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "ServerException",
    "InternalServerException",
    "ServiceUnavailableException",
    "is_blank",
    "validate_email",
    "validate_password",
    "require_fields",
    "register_exception_handlers",
    "configure_logging",
    "mask_uri",
]
