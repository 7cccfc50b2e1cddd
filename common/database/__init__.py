"""
Database module - Generic async MongoDB connection and list queries.

Provides reusable MongoDB connectivity for any project.

Usage:
    from common.database import MongoDB, build_list_query, execute_list_query

    db = MongoDB()
    await db.connect(uri, database_name)
    contacts = db.get_collection("contacts")

    query = build_list_query(params, ListDefaults(limit=50), ["status"])
    result = await execute_list_query(query, contacts, ["name", "email"])
"""

from common.database.mongodb import MongoDB, connect_with_fallback
from common.database.list_query import (
    MAX_LIMIT,
    ListDefaults,
    ListQuery,
    ListResult,
    Pagination,
    build_list_query,
    execute_list_query,
)
from common.database.serialization import parse_object_id, serialize_document

__all__ = [
    "MongoDB",
    "connect_with_fallback",
    # List queries
    "MAX_LIMIT",
    "ListDefaults",
    "ListQuery",
    "ListResult",
    "Pagination",
    "build_list_query",
    "execute_list_query",
    # Serialization
    "parse_object_id",
    "serialize_document",
]
