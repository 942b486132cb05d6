"""
Query filter parsing.

Splits an incoming query dict into the control filters ($sort, $limit,
$skip, $select) and the remaining field query, coercing string values
the way they arrive from URL query strings.

Dependencies: pydantic, crud_adapter.core.exceptions
System role: Front half of query translation
"""

from typing import Any

from pydantic import BaseModel, Field

from crud_adapter.core.exceptions import BadRequest
from crud_adapter.service.params import Pagination

CONTROL_KEYS = ("$sort", "$limit", "$skip", "$select")

_DIRECTIONS = {
    1: 1,
    -1: -1,
    "1": 1,
    "-1": -1,
    "asc": 1,
    "desc": -1,
    "ascending": 1,
    "descending": -1,
}


class QueryFilters(BaseModel):
    """Control filters extracted from a query."""

    sort: dict[str, int] = Field(default_factory=dict)
    limit: int | None = None
    skip: int | None = None
    select: list[str] | None = None


def _parse_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise BadRequest(f"Invalid value for {key}: {value!r}", field=key)
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise BadRequest(f"Invalid value for {key}: {value!r}", field=key) from e
    if number < 0:
        raise BadRequest(f"{key} cannot be negative", field=key)
    return number


def parse_sort(sort: Any) -> dict[str, int]:
    """
    Normalize a $sort value to {field: 1 | -1}.

    Args:
        sort: Mapping of field name to direction

    Returns:
        dict: Field to direction, insertion order preserved

    Raises:
        BadRequest: If the value is not a mapping or a direction is unknown
    """
    if sort is None:
        return {}
    if not isinstance(sort, dict):
        raise BadRequest("$sort must be a mapping of field to direction", field="$sort")

    parsed = {}
    for field, direction in sort.items():
        key = direction.lower() if isinstance(direction, str) else direction
        if isinstance(key, bool) or key not in _DIRECTIONS:
            raise BadRequest(
                f"Invalid sort direction for '{field}': {direction!r}", field="$sort"
            )
        parsed[field] = _DIRECTIONS[key]
    return parsed


def parse_limit(limit: Any, paginate: Pagination | None = None) -> int | None:
    """
    Resolve the effective limit.

    Pagination only takes part when it is enabled (a default is set): the
    default fills in a missing $limit and max caps the result. A max on its
    own leaves $limit untouched.

    Args:
        limit: Raw $limit value (None when absent)
        paginate: Pagination settings in effect

    Returns:
        int | None: Effective limit, None for unlimited
    """
    result = _parse_int("$limit", limit) if limit is not None else None
    if paginate is None or not paginate.enabled:
        return result

    if result is None:
        result = paginate.default
    if paginate.max is not None and result > paginate.max:
        result = paginate.max
    return result


def parse_select(select: Any) -> list[str] | None:
    """Normalize $select to a list of field names."""
    if select is None:
        return None
    if isinstance(select, str):
        return [select]
    if isinstance(select, (list, tuple)) and all(isinstance(f, str) for f in select):
        return list(select)
    raise BadRequest("$select must be a list of field names", field="$select")


def filter_query(
    query: dict[str, Any] | None,
    paginate: Pagination | None = None,
) -> tuple[QueryFilters, dict[str, Any]]:
    """
    Split a query into control filters and the field query.

    Args:
        query: Incoming query dict
        paginate: Pagination settings applied to $limit

    Returns:
        tuple: (QueryFilters, field query without control keys)

    Raises:
        BadRequest: If a control value cannot be parsed

    Usage:
        filters, where = filter_query({"$limit": "10", "name": "Alice"})
        # filters.limit == 10, where == {"name": "Alice"}
    """
    query = query or {}

    filters = QueryFilters(
        sort=parse_sort(query.get("$sort")),
        limit=parse_limit(query.get("$limit"), paginate),
        skip=_parse_int("$skip", query["$skip"]) if query.get("$skip") is not None else None,
        select=parse_select(query.get("$select")),
    )
    field_query = {key: value for key, value in query.items() if key not in CONTROL_KEYS}
    return filters, field_query
