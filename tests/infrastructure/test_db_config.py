from __future__ import annotations

import json
import sqlite3
import threading
from pathlib import Path

import pytest

from modelbridge.infrastructure.db import (DEFAULT_DB_TIMEOUT, get_db_options,
                                           get_default_timeout,
                                           get_models_config, get_path_config,
                                           load_config)
from modelbridge.infrastructure.db.records import Database


def _write_config(tmp_path: Path, payload: dict) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_missing_config_file_yields_defaults(tmp_path: Path) -> None:
    missing = tmp_path / "absent.json"

    assert load_config(missing) == {}
    assert get_default_timeout(missing) == DEFAULT_DB_TIMEOUT
    assert get_db_options(missing) == {"enable_wal": True, "foreign_keys": True}
    assert get_path_config(missing)["db_path"] == tmp_path / "modelbridge.db"


def test_relative_db_path_is_resolved_against_config_dir(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path,
        {"paths": {"db_path": "data/shop.db"}, "db_timeout_seconds": "2.5"},
    )

    assert get_path_config(path)["db_path"] == (tmp_path / "data" / "shop.db").resolve()
    assert get_default_timeout(path) == 2.5

    database = Database.from_config(path)
    assert database.path == (tmp_path / "data" / "shop.db").resolve()
    assert database.timeout == 2.5


def test_invalid_timeout_falls_back_to_default(tmp_path: Path) -> None:
    path = _write_config(tmp_path, {"db_timeout_seconds": "soon"})

    assert get_default_timeout(path) == DEFAULT_DB_TIMEOUT


def test_models_section_skips_non_object_entries(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path,
        {
            "models": {
                "Item": {"name": "shop_records.Item", "load_with": ["tags"]},
                "Broken": "shop_records.Tag",
            }
        },
    )

    assert get_models_config(path) == {
        "Item": {"name": "shop_records.Item", "load_with": ["tags"]}
    }


def test_non_mapping_models_section_is_ignored(tmp_path: Path) -> None:
    path = _write_config(tmp_path, {"models": ["Item"]})

    assert get_models_config(path) == {}


def test_from_config_applies_db_section_pragmas(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path,
        {"db": {"enable_wal": False, "foreign_keys": False}},
    )

    database = Database.from_config(path)
    try:
        conn = database.connection()
        journal_mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        foreign_keys = conn.execute("PRAGMA foreign_keys").fetchone()[0]
    finally:
        database.close()

    assert journal_mode.lower() != "wal"
    assert foreign_keys == 0


def test_from_config_defaults_to_wal_and_foreign_keys(tmp_path: Path) -> None:
    database = Database.from_config(_write_config(tmp_path, {}))
    try:
        conn = database.connection()
        journal_mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        foreign_keys = conn.execute("PRAGMA foreign_keys").fetchone()[0]
    finally:
        database.close()

    assert journal_mode.lower() == "wal"
    assert foreign_keys == 1


def test_close_closes_connections_opened_by_other_threads(tmp_path: Path) -> None:
    database = Database(tmp_path / "shared.db")
    opened: list[sqlite3.Connection] = []

    worker = threading.Thread(target=lambda: opened.append(database.connection()))
    worker.start()
    worker.join()
    opened.append(database.connection())

    assert opened[0] is not opened[1]

    database.close()

    for conn in opened:
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")
    # The handle stays usable after close().
    assert database.connection().execute("SELECT 1").fetchone() == (1,)
    database.close()
