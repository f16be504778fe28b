"""Base repository class with shared database query helpers.

Record classes and managers both read rows through these helpers so the
cursor to dict conversion lives in one place.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Iterator, Sequence

Params = Sequence[Any]


class BaseRepository:
    """Thin wrapper around a connection that returns rows as dictionaries."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def _fetch_all_as_dicts(
        self, query: str, params: Params | None = None
    ) -> list[dict[str, Any]]:
        """Execute query and return all rows as dictionaries.

        Example:
            >>> rows = self._fetch_all_as_dicts(
            ...     "SELECT id, title FROM items WHERE status = ?", ("active",)
            ... )
            >>> rows[0]["title"]
            'Lamp'
        """
        cur = self.conn.execute(query, tuple(params or ()))
        columns = [c[0] for c in cur.description]
        return [dict(zip(columns, row)) for row in cur.fetchall()]

    def _fetch_one_as_dict(
        self, query: str, params: Params | None = None
    ) -> dict[str, Any] | None:
        """Execute query and return the first row as a dictionary, or None."""
        cur = self.conn.execute(query, tuple(params or ()))
        row = cur.fetchone()
        if not row:
            return None
        columns = [c[0] for c in cur.description]
        return dict(zip(columns, row))

    def _iter_as_dicts(
        self, query: str, params: Params | None = None
    ) -> Iterator[dict[str, Any]]:
        """Execute query and yield rows one at a time straight off the cursor."""
        cur = self.conn.execute(query, tuple(params or ()))
        columns = [c[0] for c in cur.description]
        for row in cur:
            yield dict(zip(columns, row))

    def _fetch_scalar(self, query: str, params: Params | None = None) -> Any:
        """Execute query and return first column of first row, or None."""
        cur = self.conn.execute(query, tuple(params or ()))
        row = cur.fetchone()
        return row[0] if row else None

    def _execute(self, query: str, params: Params | None = None) -> sqlite3.Cursor:
        """Execute query and return the cursor for custom processing."""
        return self.conn.execute(query, tuple(params or ()))
