"""
Signed, time-limited bearer tokens.

Tokens are HS256 JWTs carrying the identity's id (``sub``), username and
role plus issue/expiry timestamps. Validity is fixed at 24 hours. There is
no server-side session or revocation list: a token dies by expiry, and the
request gate separately re-checks that its identity is still active.

Example:
    tokens = TokenService(secret=settings.JWT_SECRET)
    token = tokens.issue({"id": "admin_1a2b3c4d", "username": "ops", "role": "admin"})
    claims = tokens.verify(token)
    claims.subject  # "admin_1a2b3c4d"
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

from jose import jwt, JWTError

logger = logging.getLogger(__name__)

TOKEN_TTL = timedelta(hours=24)


class InvalidTokenError(Exception):
    """
    The token cannot be trusted.

    Raised identically for expired, tampered and malformed tokens so callers
    cannot tell the causes apart.
    """

    def __init__(self):
        super().__init__("Invalid token")


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims decoded from a token."""
    subject: str
    username: str
    role: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Issues and verifies identity tokens with a process-wide secret."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        """
        Args:
            secret: Signing secret, read once at startup
            algorithm: JWT HMAC algorithm
        """
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm

    def issue(self, identity: Mapping[str, Any], now: Optional[datetime] = None) -> str:
        """
        Create a token for an identity.

        Args:
            identity: Mapping with ``id``, ``username`` and ``role``
            now: Issue time (defaults to the current UTC time)

        Returns:
            Encoded JWT string valid for TOKEN_TTL
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(identity["id"]),
            "username": identity["username"],
            "role": str(identity["role"]),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + TOKEN_TTL).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Check signature and expiry, then decode the claims.

        Raises:
            InvalidTokenError: For any signature, structure, claim or expiry failure
        """
        try:
            payload: Dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require_exp": True, "require_iat": True, "require_sub": True},
            )
            return TokenClaims(
                subject=str(payload["sub"]),
                username=str(payload["username"]),
                role=str(payload["role"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
            )
        except (JWTError, KeyError, TypeError, ValueError) as e:
            logger.debug(f"Token rejected: {type(e).__name__}")
            raise InvalidTokenError() from None
