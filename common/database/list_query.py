"""
Generic list-query contract shared by every list endpoint.

Raw query-string parameters (page, limit, sortBy, sortOrder, equality
filters, search) are normalized into a ListQuery, which is then executed
against a Motor collection as a count plus one bounded, sorted fetch.

Example:
    query = build_list_query(
        request.query_params,
        ListDefaults(limit=50),
        filter_fields=["status"],
    )
    result = await execute_list_query(
        query,
        db["contacts"],
        search_fields=["name", "email", "message"],
    )
    return paginated_response(result)
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from pymongo import ASCENDING, DESCENDING

logger = logging.getLogger(__name__)

MAX_LIMIT = 100
SORT_ASC = "asc"
SORT_DESC = "desc"


@dataclass(frozen=True)
class ListDefaults:
    """Per-endpoint defaults applied when the client omits a parameter."""
    limit: int = 20
    sort_field: str = "createdAt"
    sort_direction: str = SORT_DESC
    filters: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ListQuery:
    """Normalized pagination/sort/filter/search request."""
    page: int = 1
    limit: int = 20
    sort_field: str = "createdAt"
    sort_direction: str = SORT_DESC
    filters: Mapping[str, Any] = field(default_factory=dict)
    search_term: Optional[str] = None

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def mongo_sort_direction(self) -> int:
        return ASCENDING if self.sort_direction == SORT_ASC else DESCENDING

    def to_mongo_filter(
        self,
        search_fields: Sequence[str] = (),
        text_index: bool = False,
    ) -> Dict[str, Any]:
        """
        Build the MongoDB filter document.

        Equality filters and the search clause are always combined with AND.
        With ``text_index`` the search uses the collection's $text index,
        otherwise a case-insensitive substring match over ``search_fields``.
        """
        mongo_filter: Dict[str, Any] = dict(self.filters)

        if not self.search_term:
            return mongo_filter

        if text_index:
            mongo_filter["$text"] = {"$search": self.search_term}
            return mongo_filter

        if not search_fields:
            return mongo_filter

        pattern = re.escape(self.search_term)
        search_clause = {
            "$or": [{name: {"$regex": pattern, "$options": "i"}} for name in search_fields]
        }
        if not mongo_filter:
            return search_clause
        return {"$and": [mongo_filter, search_clause]}


@dataclass(frozen=True)
class Pagination:
    current_page: int
    total_pages: int
    total_count: int
    limit: int

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.current_page > 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalCount": self.total_count,
            "hasNextPage": self.has_next_page,
            "hasPrevPage": self.has_prev_page,
            "limit": self.limit,
        }


@dataclass(frozen=True)
class ListResult:
    items: List[Any]
    pagination: Pagination

    def to_dict(self) -> Dict[str, Any]:
        return {"items": self.items, "pagination": self.pagination.to_dict()}


def _parse_int(value: Any) -> Optional[int]:
    """Lenient integer parse: '3' -> 3, '3.7' -> 3, 'abc'/None -> None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def build_list_query(
    params: Mapping[str, Any],
    defaults: ListDefaults = ListDefaults(),
    filter_fields: Sequence[str] = (),
    max_limit: int = MAX_LIMIT,
) -> ListQuery:
    """
    Normalize raw list parameters.

    Args:
        params: Query-string style mapping (page, limit, sortBy, sortOrder,
            search and any of ``filter_fields``)
        defaults: Endpoint defaults for limit, sort and filters
        filter_fields: Parameter names accepted as equality filters
        max_limit: Hard ceiling on page size

    Returns:
        ListQuery with page >= 1 and 1 <= limit <= max_limit
    """
    page = _parse_int(params.get("page"))
    if page is None or page < 1:
        page = 1

    default_limit = max(1, min(defaults.limit, max_limit))
    limit = _parse_int(params.get("limit"))
    if limit is None or limit <= 0:
        limit = default_limit
    limit = min(limit, max_limit)

    sort_field = params.get("sortBy") or defaults.sort_field
    sort_order = params.get("sortOrder")
    if sort_order in (SORT_ASC, SORT_DESC):
        sort_direction = sort_order
    elif sort_order:
        sort_direction = SORT_DESC
    else:
        sort_direction = defaults.sort_direction

    filters: Dict[str, Any] = dict(defaults.filters)
    for name in filter_fields:
        value = params.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        filters[name] = value.strip() if isinstance(value, str) else value

    search = params.get("search")
    search_term = search.strip() if isinstance(search, str) and search.strip() else None

    return ListQuery(
        page=page,
        limit=limit,
        sort_field=str(sort_field),
        sort_direction=sort_direction,
        filters=filters,
        search_term=search_term,
    )


async def execute_list_query(
    query: ListQuery,
    collection,
    search_fields: Sequence[str] = (),
    text_index: bool = False,
    projection: Optional[Dict[str, Any]] = None,
    transform: Optional[Callable[[Dict[str, Any]], Any]] = None,
    lookup_stages: Optional[List[Dict[str, Any]]] = None,
) -> ListResult:
    """
    Count matching documents, then fetch one sorted, bounded page.

    Args:
        query: Normalized list query
        collection: Motor collection
        search_fields: Fields matched by substring search
        text_index: Use the collection's $text index for search instead
        projection: Fields to include/exclude on each returned document
        transform: Applied to every fetched document (serialization)
        lookup_stages: Aggregation stages ($lookup/$addFields) run on the
            page after skip/limit; switches the fetch to an aggregation

    Returns:
        ListResult; a page past the end yields no items but full metadata
    """
    mongo_filter = query.to_mongo_filter(search_fields, text_index)
    logger.debug(
        f"List query on {getattr(collection, 'name', '?')}: filter={mongo_filter} "
        f"page={query.page} limit={query.limit} sort={query.sort_field}:{query.sort_direction}"
    )

    total_count = await collection.count_documents(mongo_filter)
    total_pages = math.ceil(total_count / query.limit) if total_count else 0

    if query.skip >= total_count:
        # Past the last page; an unbounded skip would overflow the driver's int64
        documents: List[Dict[str, Any]] = []
    elif lookup_stages:
        pipeline: List[Dict[str, Any]] = [
            {"$match": mongo_filter},
            {"$sort": {query.sort_field: query.mongo_sort_direction}},
            {"$skip": query.skip},
            {"$limit": query.limit},
            *lookup_stages,
        ]
        if projection:
            pipeline.append({"$project": projection})
        documents = await collection.aggregate(pipeline).to_list(length=query.limit)
    else:
        cursor = (
            collection.find(mongo_filter, projection)
            .sort(query.sort_field, query.mongo_sort_direction)
            .skip(query.skip)
            .limit(query.limit)
        )
        documents = await cursor.to_list(length=query.limit)

    items = [transform(doc) for doc in documents] if transform else list(documents)

    return ListResult(
        items=items,
        pagination=Pagination(
            current_page=query.page,
            total_pages=total_pages,
            total_count=total_count,
            limit=query.limit,
        ),
    )
