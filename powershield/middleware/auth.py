"""
Authentication and authorization gates for admin routes.

require_auth() verifies the bearer token and then re-reads the identity,
so an admin deactivated after their token was issued is locked out on the
very next request. Every authentication failure produces the same 401
response. require_role() runs afterwards on the claims already attached
to the request and never looks at the token again.
"""

import logging

from fastapi import Request

from common.auth import InvalidTokenError, TokenService, extract_bearer_token
from common.utils.exceptions import ForbiddenException, UnauthorizedException
from powershield.models import AdminClaims, AdminRole
from powershield.services.admin.credential_store import CredentialStore

logger = logging.getLogger(__name__)


class AuthMiddleware:
    """
    Validates admin bearer tokens and attaches claims to the request.
    """

    def __init__(self, token_service: TokenService, credential_store: CredentialStore):
        """
        Initialize AuthMiddleware.

        Args:
            token_service: Verifies token signature and expiry
            credential_store: Confirms the identity still exists and is active
        """
        self._tokens = token_service
        self._store = credential_store

    async def require_auth(self, request: Request) -> AdminClaims:
        """
        Validate request is authenticated.

        Args:
            request: HTTP request object

        Returns:
            AdminClaims attached to request.state.admin

        Raises:
            UnauthorizedException: No token, invalid/expired token,
                unknown or inactive identity

        Side Effects:
            - One identity read; no writes
            - Attaches claims to request.state.admin
        """
        token = extract_bearer_token(request.headers.get("Authorization"))

        if not token:
            logger.debug(f"No bearer token on {request.url.path}")
            raise UnauthorizedException()

        try:
            claims = AdminClaims.from_token(self._tokens.verify(token))
        except InvalidTokenError:
            logger.warning(f"Invalid token presented on {request.url.path}")
            raise UnauthorizedException() from None

        identity = await self._store.find_by_id(claims.admin_id)

        if not identity or not identity.get("isActive", False):
            logger.warning(f"Token for missing or inactive admin {claims.admin_id} rejected")
            raise UnauthorizedException()

        request.state.admin = claims
        return claims


def require_role(claims: AdminClaims, role: AdminRole) -> None:
    """
    Authorization gate on already-authenticated claims.

    Raises:
        ForbiddenException: The claims' role does not grant ``role``
    """
    if not claims.role.satisfies(role):
        logger.warning(f"Admin {claims.admin_id} ({claims.role.value}) denied {role.value} route")
        raise ForbiddenException(
            message="Access denied. Super admin privileges required."
            if role is AdminRole.SUPER_ADMIN
            else "Access denied. Insufficient privileges.",
            code="FORBIDDEN",
        )
