"""
Bearer token extraction from the Authorization header.
"""

from typing import Optional


def extract_bearer_token(authorization: Optional[str], scheme: str = "Bearer") -> Optional[str]:
    """
    Pull the token out of an Authorization header value.

    Args:
        authorization: Raw header value, e.g. "Bearer <token>"
        scheme: Expected auth scheme (case-insensitive)

    Returns:
        Token string if present and well-formed, None otherwise

    Expected format: "Authorization: Bearer <token>"
    """
    if not authorization:
        return None

    parts = authorization.split()

    if len(parts) != 2:
        return None

    found_scheme, token = parts

    if found_scheme.lower() != scheme.lower():
        return None

    return token
