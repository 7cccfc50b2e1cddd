"""
Authentication module - password hashing, bearer tokens, header parsing.
"""

from common.auth.password import PasswordHasher
from common.auth.tokens import TOKEN_TTL, InvalidTokenError, TokenClaims, TokenService
from common.auth.bearer import extract_bearer_token

__all__ = [
    "PasswordHasher",
    "TOKEN_TTL",
    "InvalidTokenError",
    "TokenClaims",
    "TokenService",
    "extract_bearer_token",
]
