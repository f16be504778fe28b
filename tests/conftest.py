from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from modelbridge.infrastructure.db.records import Database

import shop_records


@pytest.fixture
def shop_db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Database]:
    """A fresh SQLite database bound to the ``shop_records`` classes."""

    db = Database(tmp_path / "shop.db")
    db.executescript(shop_records.SCHEMA)
    for record_class in (shop_records.Item, shop_records.Tag, shop_records.Note):
        monkeypatch.setattr(record_class, "database", db)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def seeded_shop(shop_db: Database) -> Database:
    conn = shop_db.connection()
    conn.executemany(
        "INSERT INTO items (id, code, title, status) VALUES (?, ?, ?, ?)",
        [
            (1, "LAMP", "Desk lamp", "active"),
            (2, "CHAIR", "Office chair", "active"),
            (3, "TABLE", "Oak table", "sold"),
        ],
    )
    conn.executemany(
        "INSERT INTO tags (item_id, label) VALUES (?, ?)",
        [(1, "lighting"), (1, "office"), (2, "office")],
    )
    conn.execute("INSERT INTO notes (item_id, body) VALUES (1, 'bulb missing')")
    conn.commit()
    return shop_db
