"""
Index bootstrap for PowerShield collections.

The unique indexes on admin_users, users and job_applications are what
turn concurrent duplicate inserts into DuplicateKeyError, so they must
exist before the API accepts traffic.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, TEXT
from pymongo.errors import PyMongoError

from powershield.database import collections

logger = logging.getLogger(__name__)

INDEXES = {
    collections.USERS: [
        ([("email", ASCENDING)], {"unique": True}),
    ],
    collections.GALLERY: [
        ([("createdAt", DESCENDING)], {}),
        ([("title", TEXT), ("description", TEXT)], {}),
        ([("category", ASCENDING)], {}),
    ],
    collections.CONTACTS: [
        ([("createdAt", DESCENDING)], {}),
        ([("status", ASCENDING)], {}),
        ([("email", ASCENDING)], {}),
    ],
    collections.JOBS: [
        ([("id", ASCENDING)], {"unique": True}),
        ([("status", ASCENDING)], {}),
        ([("createdAt", DESCENDING)], {}),
        ([("title", TEXT), ("description", TEXT)], {}),
    ],
    collections.JOB_APPLICATIONS: [
        ([("id", ASCENDING)], {"unique": True}),
        ([("jobId", ASCENDING)], {}),
        ([("jobId", ASCENDING), ("email", ASCENDING)], {"unique": True}),
        ([("email", ASCENDING)], {}),
        ([("status", ASCENDING)], {}),
        ([("createdAt", DESCENDING)], {}),
    ],
    collections.ADMIN_USERS: [
        ([("id", ASCENDING)], {"unique": True}),
        ([("username", ASCENDING)], {"unique": True}),
        ([("email", ASCENDING)], {"unique": True}),
        ([("role", ASCENDING)], {}),
        ([("isActive", ASCENDING)], {}),
    ],
}


async def ensure_indexes(db: AsyncIOMotorDatabase) -> int:
    """
    Create every index the API relies on.

    Failures are logged per index and do not abort startup.

    Returns:
        Number of indexes that failed to build
    """
    failures = 0
    for collection_name, specs in INDEXES.items():
        for keys, options in specs:
            try:
                await db[collection_name].create_index(keys, **options)
            except PyMongoError as e:
                failures += 1
                logger.warning(f"Index creation on {collection_name} {keys} failed: {e}")

    if failures:
        logger.warning(f"{failures} index(es) could not be created")
    else:
        logger.info("Database indexes ensured")
    return failures
