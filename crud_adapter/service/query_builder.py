"""
Query builder: field queries to SQLAlchemy clauses.

Dependencies: sqlalchemy, crud_adapter.core.exceptions
System role: Back half of query translation (WHERE / ORDER BY)
"""

from typing import Any, Callable

from sqlalchemy import and_, inspect, or_, true
from sqlalchemy.sql.elements import ColumnElement

from crud_adapter.core.exceptions import BadRequest

Operator = Callable[[Any, Any], ColumnElement[bool]]


def _as_list(op: str, value: Any) -> list[Any]:
    if not isinstance(value, (list, tuple, set)):
        raise BadRequest(f"{op} expects a list of values", field=op)
    return list(value)


OPERATORS: dict[str, Operator] = {
    "$in": lambda column, value: column.in_(_as_list("$in", value)),
    "$nin": lambda column, value: column.not_in(_as_list("$nin", value)),
    "$lt": lambda column, value: column < value,
    "$lte": lambda column, value: column <= value,
    "$gt": lambda column, value: column > value,
    "$gte": lambda column, value: column >= value,
    "$ne": lambda column, value: column.is_not(None) if value is None else column != value,
    "$like": lambda column, value: column.like(value),
    "$notlike": lambda column, value: column.not_like(value),
    "$ilike": lambda column, value: column.ilike(value),
}


def column_keys(model: type) -> list[str]:
    """Return the mapped column attribute names of a model, in mapper order."""
    return [attr.key for attr in inspect(model).column_attrs]


def get_column(model: type, field: str) -> Any:
    """
    Resolve a field name to the model's column attribute.

    Raises:
        BadRequest: If the model maps no column with that name
    """
    if field not in inspect(model).column_attrs:
        raise BadRequest(f"Unknown field '{field}'", field=field)
    return getattr(model, field)


def _field_clauses(model: type, field: str, value: Any) -> list[ColumnElement[bool]]:
    column = get_column(model, field)

    if not isinstance(value, dict):
        return [column.is_(None) if value is None else column == value]

    clauses = []
    for op, operand in value.items():
        operator = OPERATORS.get(op)
        if operator is None:
            raise BadRequest(f"Unsupported operator '{op}' for '{field}'", field=field)
        clauses.append(operator(column, operand))
    return clauses


def _nested(model: type, key: str, value: Any) -> list[ColumnElement[bool]]:
    if not isinstance(value, (list, tuple)) or not value:
        raise BadRequest(f"{key} expects a non-empty list of queries", field=key)
    nested = []
    for sub in value:
        if not isinstance(sub, dict):
            raise BadRequest(f"{key} entries must be queries", field=key)
        clauses = build_where(model, sub)
        nested.append(and_(*clauses) if clauses else true())
    return nested


def build_where(model: type, query: dict[str, Any]) -> list[ColumnElement[bool]]:
    """
    Translate a field query into WHERE clauses.

    Plain values compare for equality (None becomes IS NULL); dict values
    hold operators such as $in, $gt or $like. $or and $and take lists of
    nested queries.

    Args:
        model: Mapped model class
        query: Field query without control keys

    Returns:
        list: Clauses to AND together in a WHERE

    Raises:
        BadRequest: For unknown fields or operators

    Usage:
        clauses = build_where(User, {"age": {"$gte": 18}, "$or": [{"name": "a"}, {"name": "b"}]})
        stmt = select(User).where(*clauses)
    """
    clauses: list[ColumnElement[bool]] = []
    for key, value in query.items():
        if key == "$or":
            clauses.append(or_(*_nested(model, key, value)))
        elif key == "$and":
            clauses.extend(_nested(model, key, value))
        elif key.startswith("$"):
            raise BadRequest(f"Unsupported operator '{key}'", field=key)
        else:
            clauses.extend(_field_clauses(model, key, value))
    return clauses


def build_order(model: type, sort: dict[str, int]) -> list[ColumnElement[Any]]:
    """
    Translate a normalized $sort mapping into ORDER BY clauses.

    Args:
        model: Mapped model class
        sort: Field to direction (1 ascending, -1 descending)

    Returns:
        list: ORDER BY clauses in the given order
    """
    return [
        get_column(model, field).asc() if direction > 0 else get_column(model, field).desc()
        for field, direction in sort.items()
    ]
