from __future__ import annotations

import sqlite3
from pathlib import Path

from .config import get_db_options, get_default_timeout, get_path_config


class DatabaseError(Exception):
    """Custom exception for database connection errors."""


def apply_pragmas(
    conn: sqlite3.Connection,
    *,
    enable_wal: bool = True,
    foreign_keys: bool = True,
    busy_timeout_ms: int | None = None,
) -> None:
    """Apply the SQLite PRAGMAs every record connection runs with."""

    try:
        if enable_wal:
            conn.execute("PRAGMA journal_mode=WAL;")
        if foreign_keys:
            conn.execute("PRAGMA foreign_keys=ON;")
        if busy_timeout_ms is not None:
            conn.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)};")
    except sqlite3.Error as exc:
        raise DatabaseError(f"Failed to apply PRAGMAs: {exc}") from exc


def open_connection(
    db_path: str | Path | None = None,
    *,
    timeout: float | None = None,
    enable_wal: bool | None = None,
    foreign_keys: bool | None = None,
    check_same_thread: bool = True,
) -> sqlite3.Connection:
    """Open a SQLite connection with the configured PRAGMAs applied.

    The caller owns the returned connection and must close it.
    """

    resolved_db_path = (
        Path(db_path) if db_path is not None else get_path_config()["db_path"]
    )
    resolved_db_path.parent.mkdir(parents=True, exist_ok=True)
    timeout_value = timeout if timeout is not None else get_default_timeout()
    try:
        conn = sqlite3.connect(
            resolved_db_path, timeout=timeout_value, check_same_thread=check_same_thread
        )
    except sqlite3.Error as exc:
        raise DatabaseError(f"Failed to connect to database: {exc}") from exc
    if enable_wal is None or foreign_keys is None:
        options = get_db_options()
        enable_wal = options["enable_wal"] if enable_wal is None else enable_wal
        foreign_keys = options["foreign_keys"] if foreign_keys is None else foreign_keys
    try:
        apply_pragmas(
            conn,
            enable_wal=enable_wal,
            foreign_keys=foreign_keys,
            busy_timeout_ms=int(timeout_value * 1000),
        )
    except DatabaseError:
        conn.close()
        raise
    return conn

