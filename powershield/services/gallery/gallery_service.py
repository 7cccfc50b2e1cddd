"""
Gallery CRUD service.

Gallery items are public content; listing defaults to active items and
search goes through the collection's text index on title/description.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from common.database import (
    ListDefaults,
    ListResult,
    build_list_query,
    execute_list_query,
    parse_object_id,
    serialize_document,
)
from common.utils.exceptions import NotFoundException, ValidationException
from common.utils.validation import is_blank
from powershield.database import collections

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "active"
DEFAULT_CATEGORY = "uncategorized"

# Counters and timestamps are owned by the service
_SYSTEM_FIELDS = {"_id", "id", "views", "likes", "createdAt", "updatedAt"}


def _not_found() -> NotFoundException:
    return NotFoundException("Gallery item not found", code="GALLERY_ITEM_NOT_FOUND")


class GalleryService:
    """Manages the gallery collection."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        page_size: int = 20,
        max_page_size: int = 100,
        featured_limit: int = 5,
    ):
        self._collection = db[collections.GALLERY]
        self._defaults = ListDefaults(limit=page_size, filters={"status": DEFAULT_STATUS})
        self._max_page_size = max_page_size
        self._featured_limit = featured_limit

    async def create_item(self, data: Dict[str, Any], uploaded_by: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a gallery item.

        Raises:
            ValidationException: Missing title or image URL
        """
        if is_blank(data.get("title")) or is_blank(data.get("imageUrl")):
            errors = {}
            if is_blank(data.get("title")):
                errors["title"] = "Title is required"
            if is_blank(data.get("imageUrl")):
                errors["imageUrl"] = "Image URL is required"
            raise ValidationException("Title and image URL are required", errors=errors)

        now = datetime.now(timezone.utc)
        description = data.get("description")
        category = data.get("category")

        doc = {
            "title": data["title"].strip(),
            "description": description.strip() if isinstance(description, str) else "",
            "imageUrl": data["imageUrl"],
            "category": category.strip() if isinstance(category, str) and category.strip() else DEFAULT_CATEGORY,
            "featured": bool(data.get("featured", False)),
            "status": data.get("status") or DEFAULT_STATUS,
            "uploadedBy": uploaded_by,
            "views": 0,
            "likes": 0,
            "createdAt": now,
            "updatedAt": now,
        }

        result = await self._collection.insert_one(doc)
        doc["_id"] = result.inserted_id

        logger.info(f"New gallery item created: {doc['title']} ({result.inserted_id})")
        return serialize_document(doc)

    async def list_items(self, params: Mapping[str, Any], **overrides: Any) -> ListResult:
        """
        Paginated listing.

        ``overrides`` replace query-string parameters (category route,
        search route) before normalization.
        """
        merged = {**params, **overrides}
        query = build_list_query(
            merged,
            self._defaults,
            filter_fields=("status", "category"),
            max_limit=self._max_page_size,
        )
        return await execute_list_query(
            query,
            self._collection,
            text_index=True,
            transform=serialize_document,
        )

    async def get_item(self, item_id: str) -> Dict[str, Any]:
        """
        Fetch an item and count the view.

        Raises:
            NotFoundException: Unknown or malformed id
        """
        oid = parse_object_id(item_id)
        if oid is None:
            raise _not_found()

        item = await self._collection.find_one_and_update(
            {"_id": oid},
            {"$inc": {"views": 1}, "$set": {"updatedAt": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )
        if not item:
            raise _not_found()
        return serialize_document(item)

    async def update_item(self, item_id: str, data: Dict[str, Any]) -> None:
        updates = {k: v for k, v in data.items() if k not in _SYSTEM_FIELDS}
        updates["updatedAt"] = datetime.now(timezone.utc)
        await self._update(item_id, {"$set": updates})
        logger.info(f"Updated gallery item {item_id}")

    async def delete_item(self, item_id: str) -> None:
        oid = parse_object_id(item_id)
        result = await self._collection.delete_one({"_id": oid}) if oid else None
        if result is None or result.deleted_count == 0:
            raise _not_found()
        logger.info(f"Deleted gallery item {item_id}")

    async def toggle_like(self, item_id: str, increment: bool = True) -> None:
        """Add or remove one like; the count never drops below zero."""
        update = {
            "$inc": {"likes": 1 if increment else -1},
            "$set": {"updatedAt": datetime.now(timezone.utc)},
        }
        if increment:
            await self._update(item_id, update)
            return

        oid = parse_object_id(item_id)
        if not oid:
            raise _not_found()
        result = await self._collection.update_one({"_id": oid, "likes": {"$gt": 0}}, update)
        if result.matched_count == 0 and not await self._collection.find_one({"_id": oid}, {"_id": 1}):
            raise _not_found()

    async def get_featured(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        if not limit or limit <= 0:
            limit = self._featured_limit
        limit = min(limit, self._max_page_size)

        cursor = (
            self._collection.find({"status": DEFAULT_STATUS, "featured": True})
            .sort("createdAt", DESCENDING)
            .limit(limit)
        )
        return [serialize_document(doc) for doc in await cursor.to_list(length=limit)]

    async def get_stats(self) -> Dict[str, Any]:
        """Overall totals/averages plus item count per category."""
        overall = await self._collection.aggregate([
            {
                "$group": {
                    "_id": None,
                    "totalItems": {"$sum": 1},
                    "totalViews": {"$sum": "$views"},
                    "totalLikes": {"$sum": "$likes"},
                    "avgViews": {"$avg": "$views"},
                    "avgLikes": {"$avg": "$likes"},
                }
            }
        ]).to_list(length=1)

        categories = await self._collection.aggregate([
            {"$group": {"_id": "$category", "count": {"$sum": 1}}}
        ]).to_list(length=None)

        if overall:
            totals = {k: v for k, v in overall[0].items() if k != "_id"}
        else:
            totals = {"totalItems": 0, "totalViews": 0, "totalLikes": 0, "avgViews": 0, "avgLikes": 0}

        return {
            "overall": totals,
            "categories": {str(c["_id"]): c["count"] for c in categories},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    async def _update(self, item_id: str, update: Dict[str, Any]) -> None:
        oid = parse_object_id(item_id)
        result = await self._collection.update_one({"_id": oid}, update) if oid else None
        if result is None or result.matched_count == 0:
            raise _not_found()
