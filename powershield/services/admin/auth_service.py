"""
Admin login.

Composes the credential store, password hasher and token service into
the login operation. Every rejection after structural validation raises
the same InvalidCredentialsException, so a caller cannot learn whether the
username exists, the account is deactivated or the password is wrong.
"""

import logging
from typing import Any, Dict, Optional

from common.auth import PasswordHasher, TokenService
from common.utils.exceptions import (
    InvalidCredentialsException,
    InternalServerException,
    ValidationException,
    APIException,
)
from common.utils.handlers import STORAGE_UNAVAILABLE_ERRORS
from common.utils.validation import is_blank
from powershield.services.admin.credential_store import CredentialStore, PASSWORD_HASH_FIELD

logger = logging.getLogger(__name__)


def validate_login_data(username: Optional[str], password: Optional[str]) -> None:
    """
    Raises:
        ValidationException: username or password missing
    """
    errors = {}
    if is_blank(username):
        errors["username"] = "Username is required"
    if not password:
        errors["password"] = "Password is required"
    if errors:
        raise ValidationException(errors=errors)


class AdminAuthService:
    """Admin login operation."""

    def __init__(
        self,
        credential_store: CredentialStore,
        hasher: PasswordHasher,
        token_service: TokenService,
    ):
        self._store = credential_store
        self._hasher = hasher
        self._tokens = token_service
        self._dummy_hash: Optional[str] = None

    async def login(self, username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """
        Authenticate by username (or email) and password.

        Returns:
            {"user": identity without hash, "token": bearer token}

        Raises:
            ValidationException: Missing username or password
            InvalidCredentialsException: Unknown, inactive, or wrong password
            InternalServerException: Anything unexpected (detail logged only)
        """
        validate_login_data(username, password)

        try:
            identity = await self._store.find_by_username_or_email(username)

            if identity is None:
                # Spend the same bcrypt work as a wrong password would
                await self._hasher.verify_async(password, await self._get_dummy_hash())
                logger.warning("Admin login failed: unknown identifier")
                raise InvalidCredentialsException()

            password_ok = await self._hasher.verify_async(password, identity.get(PASSWORD_HASH_FIELD, ""))

            if not identity.get("isActive", False) or not password_ok:
                logger.warning(f"Admin login failed for {identity['id']}")
                raise InvalidCredentialsException()

            last_login = await self._store.record_login(identity["id"])
            token = self._tokens.issue(identity)

        except (APIException, *STORAGE_UNAVAILABLE_ERRORS):
            raise
        except Exception:
            logger.exception("Admin login failed unexpectedly")
            raise InternalServerException("Login failed") from None

        user = {k: v for k, v in identity.items() if k != PASSWORD_HASH_FIELD}
        user["lastLoginAt"] = last_login

        logger.info(f"Admin {user['id']} logged in")
        return {"user": user, "token": token}

    async def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = await self._hasher.hash_async("dummy-password-for-timing")
        return self._dummy_hash
