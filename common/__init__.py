"""
Common library for reusable infrastructure components.

This package provides generic modules that carry no knowledge of the
PowerShield collections:

- database: Async MongoDB connection manager and the shared list-query contract
- auth: bcrypt password hashing, JWT bearer tokens, header parsing
- utils: Standard responses, typed exceptions, exception handlers, validation, logging
- config: Base settings class
"""

from common.database import MongoDB, build_list_query, execute_list_query
from common.auth import PasswordHasher, TokenService, InvalidTokenError
from common.utils import (
    success_response,
    error_response,
    paginated_response,
    APIException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ConflictException,
    ValidationException,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    "build_list_query",
    "execute_list_query",
    # Auth
    "PasswordHasher",
    "TokenService",
    "InvalidTokenError",
    # Utils
    "success_response",
    "error_response",
    "paginated_response",
    "APIException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "ValidationException",
    # Config
    "BaseAppSettings",
]
