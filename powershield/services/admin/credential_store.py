"""
Admin credential store.

Persists admin identities in the admin_users collection. Username and
email uniqueness is enforced by unique indexes; a DuplicateKeyError from
an insert or update is reported as a conflict, so two racing requests
cannot both succeed.

Every read that leaves this class strips the password hash, with the
single exception of find_by_username_or_email(), which the login
operation needs in order to verify the password.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from common.auth import PasswordHasher
from common.utils.exceptions import ConflictException, NotFoundException
from powershield.database import collections
from powershield.models import AdminRole

logger = logging.getLogger(__name__)

PASSWORD_HASH_FIELD = "hashedPassword"

# Never returned from the store
_PUBLIC_PROJECTION = {"_id": 0, PASSWORD_HASH_FIELD: 0}

# Fields a patch may not touch
_IMMUTABLE_FIELDS = {"_id", "id", "createdAt", "lastLoginAt", PASSWORD_HASH_FIELD}


def new_admin_id() -> str:
    return f"admin_{uuid.uuid4().hex[:8]}"


def _duplicate_identity() -> ConflictException:
    return ConflictException(
        message="Username or email already exists",
        code="DUPLICATE_IDENTITY",
    )


class CredentialStore:
    """Admin identity persistence with hashed credentials."""

    def __init__(self, db: AsyncIOMotorDatabase, hasher: PasswordHasher):
        """
        Initialize CredentialStore.

        Args:
            db: MongoDB database connection
            hasher: Password hasher used on create and password change
        """
        self._collection = db[collections.ADMIN_USERS]
        self._hasher = hasher

    async def create_identity(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Provision a new admin.

        Args:
            data: username, email, password and optional role/isActive

        Returns:
            Stored identity without the password hash

        Raises:
            ConflictException: username or email already taken
        """
        now = datetime.now(timezone.utc)
        role = AdminRole(data.get("role") or AdminRole.ADMIN)

        doc = {
            "id": new_admin_id(),
            "username": data["username"].strip(),
            "email": data["email"].strip().lower(),
            PASSWORD_HASH_FIELD: await self._hasher.hash_async(data["password"]),
            "role": role.value,
            "isActive": bool(data.get("isActive", True)),
            "createdAt": now,
            "updatedAt": now,
            "lastLoginAt": None,
        }

        try:
            await self._collection.insert_one(doc)
        except DuplicateKeyError:
            logger.info(f"Rejected duplicate admin: {doc['username']} / {doc['email']}")
            raise _duplicate_identity() from None

        logger.info(f"Created admin {doc['id']} ({doc['username']}, role={role.value})")
        return self._public(doc)

    async def find_by_id(self, admin_id: str) -> Optional[Dict[str, Any]]:
        """Get an identity by id, without the password hash."""
        return await self._collection.find_one({"id": admin_id}, _PUBLIC_PROJECTION)

    async def find_by_username_or_email(self, identifier: str) -> Optional[Dict[str, Any]]:
        """
        Look up an identity for login.

        Matches the username exactly or the email case-insensitively.
        The returned record INCLUDES the password hash.
        """
        identifier = identifier.strip()
        return await self._collection.find_one(
            {"$or": [{"username": identifier}, {"email": identifier.lower()}]},
            {"_id": 0},
        )

    async def update_identity(self, admin_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        """
        Overwrite fields of an identity.

        A plaintext ``password`` in the patch is hashed before the merge.

        Raises:
            NotFoundException: Unknown id
            ConflictException: New username or email already taken
        """
        updates = {k: v for k, v in patch.items() if k not in _IMMUTABLE_FIELDS and v is not None}

        password = updates.pop("password", None)
        if password:
            updates[PASSWORD_HASH_FIELD] = await self._hasher.hash_async(password)
        if "email" in updates:
            updates["email"] = updates["email"].strip().lower()
        if "username" in updates:
            updates["username"] = updates["username"].strip()
        if "role" in updates:
            updates["role"] = AdminRole(updates["role"]).value

        updates["updatedAt"] = datetime.now(timezone.utc)

        try:
            result = await self._collection.find_one_and_update(
                {"id": admin_id},
                {"$set": updates},
                projection=_PUBLIC_PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise _duplicate_identity() from None

        if not result:
            raise NotFoundException("Admin user not found", code="ADMIN_NOT_FOUND")

        logger.info(f"Updated admin {admin_id}: {sorted(k for k in updates if k != PASSWORD_HASH_FIELD)}")
        return result

    async def update_status(self, admin_id: str, is_active: bool) -> Dict[str, Any]:
        """
        Activate or deactivate an identity.

        Raises:
            NotFoundException: Unknown id
        """
        result = await self._collection.find_one_and_update(
            {"id": admin_id},
            {"$set": {"isActive": is_active, "updatedAt": datetime.now(timezone.utc)}},
            projection=_PUBLIC_PROJECTION,
            return_document=ReturnDocument.AFTER,
        )

        if not result:
            raise NotFoundException("Admin user not found", code="ADMIN_NOT_FOUND")

        logger.info(f"Admin {admin_id} {'activated' if is_active else 'deactivated'}")
        return result

    async def delete_identity(self, admin_id: str) -> None:
        """
        Permanently remove an identity.

        Raises:
            NotFoundException: Unknown id
        """
        result = await self._collection.delete_one({"id": admin_id})
        if result.deleted_count == 0:
            raise NotFoundException("Admin user not found", code="ADMIN_NOT_FOUND")
        logger.info(f"Deleted admin {admin_id}")

    async def list_identities(self, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """List identities newest first, without password hashes."""
        cursor = self._collection.find(filter or {}, _PUBLIC_PROJECTION).sort("createdAt", DESCENDING)
        return await cursor.to_list(length=None)

    async def record_login(self, admin_id: str) -> datetime:
        """Stamp lastLoginAt; returns the recorded time."""
        now = datetime.now(timezone.utc)
        await self._collection.update_one(
            {"id": admin_id},
            {"$set": {"lastLoginAt": now, "updatedAt": now}},
        )
        return now

    async def count_identities(self) -> int:
        return await self._collection.count_documents({})

    @staticmethod
    def _public(doc: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in doc.items() if k not in _PUBLIC_PROJECTION}
