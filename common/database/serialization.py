"""
Helpers for turning raw Motor documents into JSON-safe dicts.
"""

from typing import Any, Dict, Iterable, Optional

from bson import ObjectId
from bson.errors import InvalidId


def parse_object_id(value: str) -> Optional[ObjectId]:
    """Parse a hex ObjectId string; None when it is not one."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def _convert(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _convert(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_convert(v) for v in value]
    return value


def serialize_document(
    doc: Optional[Dict[str, Any]],
    exclude: Iterable[str] = (),
) -> Optional[Dict[str, Any]]:
    """
    Convert ObjectIds to strings and expose ``_id`` as ``id``.

    Documents that already carry their own string ``id`` keep it and
    drop ``_id``. Fields named in ``exclude`` are removed.
    """
    if doc is None:
        return None

    excluded = set(exclude)
    result = {k: _convert(v) for k, v in doc.items() if k not in excluded and k != "_id"}

    if "id" not in result and "_id" in doc:
        result["id"] = str(doc["_id"])

    return result
