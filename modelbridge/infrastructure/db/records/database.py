from __future__ import annotations

import sqlite3
import threading
from functools import lru_cache
from pathlib import Path

from ..config import get_db_options, get_default_timeout, get_path_config
from ..connection import open_connection


class Database:
    """A SQLite database shared by one or more record classes.

    Connections are opened lazily and kept per thread, so FastAPI's worker
    threads never share a connection. :meth:`close` closes every connection
    the handle has opened, whichever thread opened it.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        timeout: float | None = None,
        enable_wal: bool | None = None,
        foreign_keys: bool | None = None,
    ) -> None:
        self.path = Path(path)
        self.timeout = timeout
        self.enable_wal = enable_wal
        self.foreign_keys = foreign_keys
        self._local = threading.local()
        self._lock = threading.Lock()
        self._open: list[sqlite3.Connection] = []

    @classmethod
    def from_config(cls, config_path: Path | str | None = None) -> "Database":
        """Build a database handle from the ``paths`` and ``db`` sections of
        ``config.json``."""

        options = get_db_options(config_path)
        return cls(
            get_path_config(config_path)["db_path"],
            timeout=get_default_timeout(config_path),
            enable_wal=options["enable_wal"],
            foreign_keys=options["foreign_keys"],
        )

    def connection(self) -> sqlite3.Connection:
        conn = getattr(self._local, "conn", None)
        if conn is None:
            # Owned by one thread, but closable from any thread by close().
            conn = open_connection(
                self.path,
                timeout=self.timeout,
                enable_wal=self.enable_wal,
                foreign_keys=self.foreign_keys,
                check_same_thread=False,
            )
            with self._lock:
                self._open.append(conn)
            self._local.conn = conn
        return conn

    def executescript(self, script: str) -> None:
        conn = self.connection()
        conn.executescript(script)
        conn.commit()

    def close(self) -> None:
        """Close all connections opened through this handle."""

        with self._lock:
            connections, self._open = self._open, []
        for conn in connections:
            conn.close()
        # Every thread opens a fresh connection on its next call.
        self._local = threading.local()

    def __repr__(self) -> str:
        return f"Database({str(self.path)!r})"


@lru_cache(maxsize=1)
def default_database() -> Database:
    """Database used by record classes that do not declare their own."""

    return Database.from_config()
