"""
Admin identity domain types.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from common.auth import InvalidTokenError, TokenClaims


class AdminRole(str, Enum):
    """Closed set of admin roles."""
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    def satisfies(self, required: "AdminRole") -> bool:
        """Whether an identity holding this role may act as ``required``."""
        return required in ROLE_GRANTS[self]


# Every role must appear here; super_admin holds every grant
ROLE_GRANTS = {
    AdminRole.ADMIN: frozenset({AdminRole.ADMIN}),
    AdminRole.SUPER_ADMIN: frozenset(AdminRole),
}


@dataclass(frozen=True)
class AdminClaims:
    """Trusted identity attached to a request after authentication."""
    admin_id: str
    username: str
    role: AdminRole
    issued_at: datetime
    expires_at: datetime

    @classmethod
    def from_token(cls, claims: TokenClaims) -> "AdminClaims":
        """
        Raises:
            InvalidTokenError: If the token names a role outside AdminRole
        """
        try:
            role = AdminRole(claims.role)
        except ValueError:
            raise InvalidTokenError() from None

        return cls(
            admin_id=claims.subject,
            username=claims.username,
            role=role,
            issued_at=claims.issued_at,
            expires_at=claims.expires_at,
        )
