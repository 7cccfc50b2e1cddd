"""
User CRUD service.

Public user records keyed by Mongo ObjectId. The email is stored
lower-cased and is unique; a password field, if a client ever sends one,
is never returned.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from common.database import (
    ListDefaults,
    ListResult,
    build_list_query,
    execute_list_query,
    parse_object_id,
    serialize_document,
)
from common.utils.exceptions import ConflictException, NotFoundException, ValidationException
from common.utils.validation import is_blank, validate_email
from powershield.database import collections

logger = logging.getLogger(__name__)

SENSITIVE_FIELDS = ("password",)
SEARCH_FIELDS = ("name", "email")

# Never settable through create or update
_PROTECTED_FIELDS = {"_id", "id", "password", "createdAt", "updatedAt"}


def _serialize(doc: Dict[str, Any]) -> Dict[str, Any]:
    return serialize_document(doc, exclude=SENSITIVE_FIELDS)


def _duplicate_email() -> ConflictException:
    return ConflictException("User with this email already exists", code="DUPLICATE_EMAIL")


class UserService:
    """Manages the users collection."""

    def __init__(self, db: AsyncIOMotorDatabase, page_size: int = 50, max_page_size: int = 100):
        self._collection = db[collections.USERS]
        self._defaults = ListDefaults(limit=page_size)
        self._max_page_size = max_page_size

    async def create_user(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a user.

        Raises:
            ValidationException: Missing or malformed email
            ConflictException: Email already registered
        """
        email = data.get("email")
        if is_blank(email):
            raise ValidationException(errors={"email": "Email is required"})
        if not validate_email(email):
            raise ValidationException(errors={"email": "Please provide a valid email address"})

        now = datetime.now(timezone.utc)
        doc = {k: v for k, v in data.items() if k not in _PROTECTED_FIELDS}
        doc.update({"email": email.strip().lower(), "createdAt": now, "updatedAt": now})

        try:
            result = await self._collection.insert_one(doc)
        except DuplicateKeyError:
            raise _duplicate_email() from None

        doc["_id"] = result.inserted_id
        logger.info(f"New user created: {doc['email']}")
        return _serialize(doc)

    async def list_users(self, params: Mapping[str, Any]) -> ListResult:
        query = build_list_query(params, self._defaults, max_limit=self._max_page_size)
        return await execute_list_query(
            query,
            self._collection,
            search_fields=SEARCH_FIELDS,
            projection={field: 0 for field in SENSITIVE_FIELDS},
            transform=_serialize,
        )

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        """
        Raises:
            NotFoundException: Unknown or malformed id
        """
        oid = parse_object_id(user_id)
        user = await self._collection.find_one({"_id": oid}) if oid else None
        if not user:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        return _serialize(user)

    async def update_user(self, user_id: str, data: Dict[str, Any]) -> None:
        """
        Overwrite the given fields; password and identifiers are ignored.

        Raises:
            NotFoundException: Unknown or malformed id
            ValidationException: Malformed email
            ConflictException: Email taken by another user
        """
        updates = {k: v for k, v in data.items() if k not in _PROTECTED_FIELDS}
        if "email" in updates:
            if not validate_email(updates["email"]):
                raise ValidationException(errors={"email": "Please provide a valid email address"})
            updates["email"] = updates["email"].strip().lower()
        updates["updatedAt"] = datetime.now(timezone.utc)

        oid = parse_object_id(user_id)
        if oid is None:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")

        try:
            result = await self._collection.update_one({"_id": oid}, {"$set": updates})
        except DuplicateKeyError:
            raise _duplicate_email() from None

        if result.matched_count == 0:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        logger.info(f"Updated user {user_id}")

    async def delete_user(self, user_id: str) -> None:
        oid = parse_object_id(user_id)
        result = await self._collection.delete_one({"_id": oid}) if oid else None
        if result is None or result.deleted_count == 0:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        logger.info(f"Deleted user {user_id}")

    async def email_exists(self, email: str) -> bool:
        """
        Raises:
            ValidationException: Malformed email
        """
        if not validate_email(email):
            raise ValidationException("Invalid email format", errors={"email": "Invalid email format"})
        doc = await self._collection.find_one({"email": email.strip().lower()}, {"_id": 1})
        return doc is not None

    async def get_stats(self) -> Dict[str, Any]:
        total_count = await self._collection.count_documents({})
        return {
            "totalCount": total_count,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
