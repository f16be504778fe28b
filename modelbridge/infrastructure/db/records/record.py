"""Active-record style base class for rows of a single SQLite table.

A record class declares its table and columns as class attributes::

    class Item(Record):
        table = "items"
        columns = ("id", "code", "title", "status")
        unique_keys = (("code",),)
        relationships = {"tags": Relationship("shop.records.Tag", "item_id")}

Instances are created with column values as keyword arguments and filled
from the database with :meth:`Record.load`.
"""

from __future__ import annotations

import importlib
import sqlite3
from dataclasses import dataclass
from typing import Any, ClassVar, Iterable, Mapping

from .base import BaseRepository
from .database import Database, default_database
from .errors import RecordError, RecordNotFoundError
from .query import select_sql


@dataclass(frozen=True)
class Relationship:
    """One-to-many link from a parent record to rows of ``record_class``.

    ``record_class`` may be given as a dotted path so that modules can refer
    to classes defined later.
    """

    record_class: type["Record"] | str
    foreign_key: str

    def resolve(self) -> type["Record"]:
        if not isinstance(self.record_class, str):
            return self.record_class
        module_name, _, attr = self.record_class.rpartition(".")
        try:
            return getattr(importlib.import_module(module_name), attr)
        except (ImportError, AttributeError, ValueError) as exc:
            raise RecordError(
                f"cannot resolve related class '{self.record_class}': {exc}"
            ) from exc


class Record:
    table: ClassVar[str] = ""
    columns: ClassVar[tuple[str, ...]] = ()
    primary_key: ClassVar[str] = "id"
    unique_keys: ClassVar[tuple[tuple[str, ...], ...]] = ()
    relationships: ClassVar[Mapping[str, Relationship]] = {}
    database: ClassVar[Database | None] = None

    def __init__(self, **fields: Any) -> None:
        cls = type(self)
        unknown = sorted(set(fields) - set(cls.columns))
        if unknown:
            raise RecordError(
                f"unknown column(s) for {cls.__name__}: {', '.join(unknown)}"
            )
        object.__setattr__(self, "_values", {column: None for column in cls.columns})
        object.__setattr__(self, "_related", {})
        self._values.update(fields)
        self.error: str | None = None
        self.not_found = False

    # -- attribute access -------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        values = self.__dict__.get("_values", {})
        if name in values:
            return values[name]
        related = self.__dict__.get("_related", {})
        if name in related:
            return related[name]
        raise AttributeError(f"{type(self).__name__!s} has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if name in type(self).columns:
            self._values[name] = value
        else:
            object.__setattr__(self, name, value)

    @property
    def id(self) -> Any:
        """Primary key value of this record."""
        return self._values.get(type(self).primary_key)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {type(self).primary_key}={self.id!r}>"

    # -- class-level plumbing ---------------------------------------------

    @classmethod
    def table_name(cls) -> str:
        if not cls.table:
            raise RecordError(f"{cls.__name__} does not declare a table")
        return cls.table

    @classmethod
    def connection(cls) -> sqlite3.Connection:
        database = cls.database if cls.database is not None else default_database()
        return database.connection()

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Record":
        return cls(**row)

    # -- persistence ------------------------------------------------------

    def _lookup_key(self) -> dict[str, Any]:
        cls = type(self)
        if self.id is not None:
            return {cls.primary_key: self.id}
        for key in cls.unique_keys:
            if all(self._values.get(column) is not None for column in key):
                return {column: self._values[column] for column in key}
        raise RecordError(
            f"cannot load {cls.__name__} without a primary or unique key value"
        )

    def load(
        self,
        *,
        speculative: bool = False,
        with_objects: Iterable[str] | None = None,
    ) -> bool:
        """Fill this record from its row.

        With ``speculative=True`` a missing row is not an error: the method
        sets ``not_found`` and returns False instead of raising.
        """
        cls = type(self)
        key = self._lookup_key()
        sql, params = select_sql(cls, key, sort_by=())
        try:
            row = BaseRepository(cls.connection())._fetch_one_as_dict(sql, params)
        except sqlite3.Error as exc:
            self.error = f"load() - {exc}"
            raise RecordError(self.error) from exc

        if row is None:
            self.not_found = True
            if speculative:
                return False
            described = ", ".join(f"{k} = {v!r}" for k, v in key.items())
            self.error = f"No such {cls.__name__} where {described}"
            raise RecordNotFoundError(self.error)

        self._values.update(row)
        self.not_found = False
        if with_objects:
            load_related([self], with_objects)
        return True

    def save(self) -> "Record":
        """Insert the record, or update it when its primary key row exists."""
        cls = type(self)
        repo = BaseRepository(cls.connection())
        pk = cls.primary_key
        try:
            exists = self.id is not None and repo._fetch_scalar(
                f"SELECT 1 FROM {cls.table_name()} WHERE {pk} = ?", (self.id,)
            )
            if exists:
                assignments = [c for c in cls.columns if c != pk]
                repo._execute(
                    f"UPDATE {cls.table_name()} SET "
                    + ", ".join(f"{c} = ?" for c in assignments)
                    + f" WHERE {pk} = ?",
                    [self._values[c] for c in assignments] + [self.id],
                )
            else:
                present = [
                    c for c in cls.columns if c != pk or self._values[c] is not None
                ]
                cur = repo._execute(
                    f"INSERT INTO {cls.table_name()} ({', '.join(present)}) "
                    f"VALUES ({', '.join('?' for _ in present)})",
                    [self._values[c] for c in present],
                )
                if self.id is None:
                    self._values[pk] = cur.lastrowid
            repo.conn.commit()
        except sqlite3.Error as exc:
            repo.conn.rollback()
            self.error = f"save() - {exc}"
            raise RecordError(self.error) from exc
        return self

    def delete(self) -> bool:
        """Delete the row for this record; returns False when nothing matched."""
        cls = type(self)
        if self.id is None:
            raise RecordError(f"cannot delete {cls.__name__} without a primary key")
        repo = BaseRepository(cls.connection())
        try:
            cur = repo._execute(
                f"DELETE FROM {cls.table_name()} WHERE {cls.primary_key} = ?",
                (self.id,),
            )
            repo.conn.commit()
        except sqlite3.Error as exc:
            repo.conn.rollback()
            self.error = f"delete() - {exc}"
            raise RecordError(self.error) from exc
        return cur.rowcount > 0


def load_related(records: list[Record], names: Iterable[str]) -> None:
    """Attach one-to-many relations to ``records`` with one query per relation."""

    if not records:
        return
    owner = type(records[0])
    for name in names:
        relationship = owner.relationships.get(name)
        if relationship is None:
            raise RecordError(f"{owner.__name__} has no relationship named '{name}'")
        related_class = relationship.resolve()
        parent_ids = [record.id for record in records if record.id is not None]
        grouped: dict[Any, list[Record]] = {}
        if parent_ids:
            sql, params = select_sql(
                related_class, {relationship.foreign_key: parent_ids}
            )
            try:
                rows = BaseRepository(related_class.connection())._fetch_all_as_dicts(
                    sql, params
                )
            except sqlite3.Error as exc:
                raise RecordError(f"loading '{name}' failed: {exc}") from exc
            for row in rows:
                grouped.setdefault(row[relationship.foreign_key], []).append(
                    related_class.from_row(row)
                )
        for record in records:
            record._related[name] = grouped.get(record.id, [])


__all__ = ["Record", "Relationship", "load_related"]
