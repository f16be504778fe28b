"""Class-level query manager for :class:`Record` subclasses.

``Manager`` is usable as-is by passing ``object_class``; record-specific
managers subclass it and set ``object_class`` so callers can omit it::

    class ItemManager(Manager):
        object_class = Item

    ItemManager.get_objects(status="active", sort_by="title", limit=10)
"""

from __future__ import annotations

import sqlite3
from typing import Any, ClassVar, Iterable, Iterator, Mapping, Sequence

from modelbridge.infrastructure.observability import get_logger

from .base import BaseRepository
from .errors import RecordError
from .query import count_sql, merge_filters, select_sql
from .record import Record, load_related

_logger = get_logger(__name__)

QueryArg = Mapping[str, Any] | Sequence[tuple[str, Any]] | None


class Manager:
    object_class: ClassVar[type[Record] | None] = None

    @classmethod
    def _resolve_class(cls, object_class: type[Record] | None) -> type[Record]:
        record_class = object_class if object_class is not None else cls.object_class
        if record_class is None:
            raise RecordError(f"{cls.__name__} needs an object_class to query")
        return record_class

    @classmethod
    def _check_with_objects(
        cls,
        record_class: type[Record],
        with_objects: Iterable[str] | None,
        multi_many_ok: bool,
    ) -> list[str]:
        names = list(with_objects or ())
        if len(names) > 1 and not multi_many_ok:
            _logger.warning(
                "Fetching %d one-to-many relationships (%s) for %s; "
                "pass multi_many_ok=True to silence this warning",
                len(names),
                ", ".join(names),
                record_class.__name__,
            )
        return names

    @classmethod
    def get_objects(
        cls,
        object_class: type[Record] | None = None,
        *,
        query: QueryArg = None,
        sort_by: str | Iterable[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
        with_objects: Iterable[str] | None = None,
        multi_many_ok: bool = False,
        **filters: Any,
    ) -> list[Record]:
        """Return all records matching the filters."""
        record_class = cls._resolve_class(object_class)
        names = cls._check_with_objects(record_class, with_objects, multi_many_ok)
        sql, params = select_sql(
            record_class,
            merge_filters(query, filters),
            sort_by=sort_by,
            limit=limit,
            offset=offset,
        )
        try:
            rows = BaseRepository(record_class.connection())._fetch_all_as_dicts(
                sql, params
            )
        except sqlite3.Error as exc:
            raise RecordError(f"get_objects() - {exc}") from exc
        records = [record_class.from_row(row) for row in rows]
        if names:
            load_related(records, names)
        _logger.debug("Fetched %d %s records", len(records), record_class.__name__)
        return records

    @classmethod
    def get_objects_count(
        cls,
        object_class: type[Record] | None = None,
        *,
        query: QueryArg = None,
        with_objects: Iterable[str] | None = None,
        multi_many_ok: bool = False,
        **filters: Any,
    ) -> int:
        """Return the number of matching records.

        ``with_objects`` is accepted for call compatibility with
        :meth:`get_objects`; relations never change the parent count.
        """
        record_class = cls._resolve_class(object_class)
        filters.pop("sort_by", None)
        filters.pop("limit", None)
        filters.pop("offset", None)
        sql, params = count_sql(record_class, merge_filters(query, filters))
        try:
            value = BaseRepository(record_class.connection())._fetch_scalar(
                sql, params
            )
        except sqlite3.Error as exc:
            raise RecordError(f"get_objects_count() - {exc}") from exc
        return int(value or 0)

    @classmethod
    def get_objects_iterator(
        cls,
        object_class: type[Record] | None = None,
        *,
        query: QueryArg = None,
        sort_by: str | Iterable[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
        with_objects: Iterable[str] | None = None,
        multi_many_ok: bool = False,
        **filters: Any,
    ) -> Iterator[Record]:
        """Return a lazy, single-pass iterator over matching records.

        The SQL is built (and validated) immediately; rows are read from the
        cursor only as the iterator is consumed.
        """
        record_class = cls._resolve_class(object_class)
        names = cls._check_with_objects(record_class, with_objects, multi_many_ok)
        sql, params = select_sql(
            record_class,
            merge_filters(query, filters),
            sort_by=sort_by,
            limit=limit,
            offset=offset,
        )
        repo = BaseRepository(record_class.connection())

        def _iterate() -> Iterator[Record]:
            try:
                for row in repo._iter_as_dicts(sql, params):
                    record = record_class.from_row(row)
                    if names:
                        load_related([record], names)
                    yield record
            except sqlite3.Error as exc:
                raise RecordError(f"get_objects_iterator() - {exc}") from exc

        return _iterate()
