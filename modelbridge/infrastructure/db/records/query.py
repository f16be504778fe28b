"""SQL fragment builders shared by :mod:`record` and :mod:`manager`.

Only column names declared on the record class are ever interpolated into
SQL; values always travel as bound parameters.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence

from .errors import RecordError

if TYPE_CHECKING:
    from .record import Record

_SORT_DIRECTIONS = ("ASC", "DESC")


def _check_column(record_class: type["Record"], column: str) -> str:
    if column not in record_class.columns:
        raise RecordError(f"{record_class.__name__} has no column named '{column}'")
    return column


def merge_filters(
    query: Mapping[str, Any] | Sequence[tuple[str, Any]] | None,
    filters: Mapping[str, Any],
) -> dict[str, Any]:
    """Combine a ``query`` argument with keyword filters (keywords win)."""

    merged: dict[str, Any] = {}
    if query is not None:
        try:
            merged.update(dict(query.items() if isinstance(query, Mapping) else query))
        except (TypeError, ValueError) as exc:
            raise RecordError(
                f"query must be a mapping or key/value pairs, got {query!r}"
            ) from exc
    merged.update(filters)
    return merged


def where_clause(
    record_class: type["Record"], filters: Mapping[str, Any]
) -> tuple[str, list[Any]]:
    clauses: list[str] = []
    params: list[Any] = []
    for column, value in filters.items():
        _check_column(record_class, column)
        if value is None:
            clauses.append(f"{column} IS NULL")
        elif isinstance(value, (list, tuple, set, frozenset)):
            values = list(value)
            if not values:
                # IN () never matches
                clauses.append("0 = 1")
                continue
            placeholders = ", ".join("?" for _ in values)
            clauses.append(f"{column} IN ({placeholders})")
            params.extend(values)
        else:
            clauses.append(f"{column} = ?")
            params.append(value)
    if not clauses:
        return "", params
    return " WHERE " + " AND ".join(clauses), params


def order_clause(
    record_class: type["Record"], sort_by: str | Iterable[str] | None
) -> str:
    if sort_by is None:
        return f" ORDER BY {record_class.primary_key}"
    terms = [sort_by] if isinstance(sort_by, str) else list(sort_by)
    rendered: list[str] = []
    for term in terms:
        parts = term.split()
        if not parts or len(parts) > 2:
            raise RecordError(f"invalid sort_by term '{term}'")
        column = _check_column(record_class, parts[0])
        direction = parts[1].upper() if len(parts) == 2 else "ASC"
        if direction not in _SORT_DIRECTIONS:
            raise RecordError(f"invalid sort direction in '{term}'")
        rendered.append(f"{column} {direction}")
    if not rendered:
        return ""
    return " ORDER BY " + ", ".join(rendered)


def limit_clause(limit: int | None, offset: int | None) -> tuple[str, list[Any]]:
    if limit is None and offset is None:
        return "", []
    if offset is not None and limit is None:
        # SQLite needs a LIMIT before OFFSET; -1 means unbounded
        return " LIMIT -1 OFFSET ?", [int(offset)]
    if offset is None:
        return " LIMIT ?", [int(limit)]
    return " LIMIT ? OFFSET ?", [int(limit), int(offset)]


def select_sql(
    record_class: type["Record"],
    filters: Mapping[str, Any],
    *,
    sort_by: str | Iterable[str] | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> tuple[str, list[Any]]:
    where, params = where_clause(record_class, filters)
    paging, paging_params = limit_clause(limit, offset)
    sql = (
        f"SELECT {', '.join(record_class.columns)} FROM {record_class.table_name()}"
        f"{where}{order_clause(record_class, sort_by)}{paging}"
    )
    return sql, params + paging_params


def count_sql(
    record_class: type["Record"], filters: Mapping[str, Any]
) -> tuple[str, list[Any]]:
    where, params = where_clause(record_class, filters)
    return f"SELECT COUNT(*) FROM {record_class.table_name()}{where}", params
