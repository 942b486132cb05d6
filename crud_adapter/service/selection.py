"""
Field selection for service results.

Dependencies: None
System role: Applies $select to records leaving the service
"""

from typing import Any


def pick(record: dict[str, Any], fields: list[str], id_field: str) -> dict[str, Any]:
    """Return only the selected fields of a record, always keeping the id."""
    keep = [id_field, *fields]
    return {key: record[key] for key in keep if key in record}


def select_fields(result: Any, select: list[str] | None, id_field: str) -> Any:
    """
    Apply a $select list to a record or list of records.

    Results that are not plain dicts (ORM instances in non-raw mode) are
    returned untouched, as is everything when no selection was asked for.

    Args:
        result: Record, list of records, or None
        select: Field names to keep
        id_field: Id field, always kept

    Returns:
        Selected record(s)
    """
    if not select or result is None:
        return result
    if isinstance(result, list):
        return [select_fields(item, select, id_field) for item in result]
    if isinstance(result, dict):
        return pick(result, select, id_field)
    return result
