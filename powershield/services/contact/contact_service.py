"""
Contact message service.

Messages arrive from the public site as ``unread`` and move through
read/replied/archived as admins handle them. Opening an unread message
marks it read.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.database import (
    ListDefaults,
    ListResult,
    build_list_query,
    execute_list_query,
    parse_object_id,
    serialize_document,
)
from common.utils.exceptions import NotFoundException, ValidationException
from common.utils.validation import validate_email
from powershield.database import collections
from powershield.models import ContactStatus, status_values

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("name", "email", "message")
RECENT_WINDOW = timedelta(days=7)


def _not_found() -> NotFoundException:
    return NotFoundException("Contact not found", code="CONTACT_NOT_FOUND")


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def parse_contact_status(value: Any) -> ContactStatus:
    """
    Raises:
        ValidationException: Not one of the contact statuses
    """
    try:
        return ContactStatus(value)
    except (ValueError, TypeError):
        message = f"Invalid status. Must be one of: {status_values(ContactStatus)}"
        raise ValidationException(message, errors={"status": message}) from None


class ContactService:
    """Manages the contacts collection."""

    def __init__(self, db: AsyncIOMotorDatabase, page_size: int = 50, max_page_size: int = 100):
        self._collection = db[collections.CONTACTS]
        self._defaults = ListDefaults(limit=page_size)
        self._max_page_size = max_page_size

    async def create_contact(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a message from the public contact form.

        Returns:
            Acknowledgement fields only (id, name, email, createdAt)

        Raises:
            ValidationException: Missing or malformed email
        """
        if not validate_email(data.get("email")):
            raise ValidationException(errors={"email": "Valid email address is required"})

        now = datetime.now(timezone.utc)
        doc = {
            "name": _strip(data.get("name")),
            "email": data["email"].strip().lower(),
            "message": _strip(data.get("message")),
            "status": ContactStatus.UNREAD.value,
            "createdAt": now,
            "updatedAt": now,
        }

        result = await self._collection.insert_one(doc)
        logger.info(f"New contact message {result.inserted_id} from {doc['email']}")

        return {
            "id": str(result.inserted_id),
            "name": doc["name"],
            "email": doc["email"],
            "createdAt": now,
        }

    async def list_contacts(self, params: Mapping[str, Any], **overrides: Any) -> ListResult:
        merged = {**params, **overrides}
        status = merged.get("status")
        if status:
            parse_contact_status(status)

        query = build_list_query(
            merged,
            self._defaults,
            filter_fields=("status",),
            max_limit=self._max_page_size,
        )
        return await execute_list_query(
            query,
            self._collection,
            search_fields=SEARCH_FIELDS,
            transform=serialize_document,
        )

    async def get_contact(self, contact_id: str) -> Dict[str, Any]:
        """
        Fetch a message; an unread one is marked read in the same step.

        Raises:
            NotFoundException: Unknown or malformed id
        """
        oid = parse_object_id(contact_id)
        if oid is None:
            raise _not_found()

        contact = await self._collection.find_one_and_update(
            {"_id": oid, "status": ContactStatus.UNREAD.value},
            {"$set": {"status": ContactStatus.READ.value, "updatedAt": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )
        if contact is None:
            contact = await self._collection.find_one({"_id": oid})
        if contact is None:
            raise _not_found()
        return serialize_document(contact)

    async def update_status(self, contact_id: str, status: Any) -> ContactStatus:
        """
        Raises:
            ValidationException: Unknown status
            NotFoundException: Unknown or malformed id
        """
        new_status = parse_contact_status(status)

        oid = parse_object_id(contact_id)
        result = await self._collection.update_one(
            {"_id": oid},
            {"$set": {"status": new_status.value, "updatedAt": datetime.now(timezone.utc)}},
        ) if oid else None

        if result is None or result.matched_count == 0:
            raise _not_found()

        logger.info(f"Contact {contact_id} status -> {new_status.value}")
        return new_status

    async def mark_replied(self, contact_id: str) -> None:
        await self.update_status(contact_id, ContactStatus.REPLIED)

    async def archive(self, contact_id: str) -> None:
        await self.update_status(contact_id, ContactStatus.ARCHIVED)

    async def delete_contact(self, contact_id: str) -> None:
        oid = parse_object_id(contact_id)
        result = await self._collection.delete_one({"_id": oid}) if oid else None
        if result is None or result.deleted_count == 0:
            raise _not_found()
        logger.info(f"Deleted contact {contact_id}")

    async def get_unread_count(self) -> int:
        return await self._collection.count_documents({"status": ContactStatus.UNREAD.value})

    async def get_stats(self) -> Dict[str, Any]:
        """Total, last-7-days count and a per-status breakdown."""
        total_count = await self._collection.count_documents({})

        by_status = await self._collection.aggregate([
            {"$group": {"_id": "$status", "count": {"$sum": 1}}}
        ]).to_list(length=None)

        recent = await self._collection.count_documents(
            {"createdAt": {"$gte": datetime.now(timezone.utc) - RECENT_WINDOW}}
        )

        breakdown = {s.value: 0 for s in ContactStatus}
        for row in by_status:
            breakdown[str(row["_id"])] = row["count"]

        return {
            "totalCount": total_count,
            "recentContacts": recent,
            "statusBreakdown": breakdown,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
