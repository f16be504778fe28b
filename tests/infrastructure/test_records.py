from __future__ import annotations

import logging

import pytest

from modelbridge.infrastructure.db.records import (Manager, RecordError,
                                                   RecordNotFoundError)
from shop_records import Item, ItemManager, Tag


def test_save_assigns_primary_key_and_load_round_trips(shop_db) -> None:
    item = Item(code="LAMP", title="Desk lamp", status="active").save()

    assert item.id is not None
    fresh = Item(id=item.id)
    assert fresh.load() is True
    assert fresh.as_dict() == {
        "id": item.id,
        "code": "LAMP",
        "title": "Desk lamp",
        "status": "active",
    }


def test_load_by_unique_key(seeded_shop) -> None:
    item = Item(code="CHAIR")

    assert item.load() is True
    assert item.id == 2
    assert item.title == "Office chair"


def test_speculative_load_of_missing_row_returns_false(shop_db) -> None:
    item = Item(id=99)

    assert item.load(speculative=True) is False
    assert item.not_found is True
    assert item.error is None


def test_plain_load_of_missing_row_raises(shop_db) -> None:
    item = Item(code="GHOST")

    with pytest.raises(RecordNotFoundError):
        item.load()
    assert "GHOST" in item.error


def test_load_without_key_values_raises(shop_db) -> None:
    with pytest.raises(RecordError):
        Item(title="No key").load(speculative=True)


def test_unknown_column_is_rejected() -> None:
    with pytest.raises(RecordError):
        Item(colour="red")


def test_save_updates_existing_row_and_delete_removes_it(seeded_shop) -> None:
    item = Item(id=3)
    item.load()
    item.status = "archived"
    item.save()

    reloaded = Item(id=3)
    reloaded.load()
    assert reloaded.status == "archived"
    assert reloaded.delete() is True
    assert Item(id=3).load(speculative=True) is False


def test_load_with_attaches_relations(seeded_shop) -> None:
    item = Item(id=1)
    item.load(with_objects=["tags"])

    assert sorted(tag.label for tag in item.tags) == ["lighting", "office"]


def test_get_objects_filters_and_sorts(seeded_shop) -> None:
    active = Manager.get_objects(object_class=Item, status="active", sort_by="code")

    assert [item.code for item in active] == ["CHAIR", "LAMP"]


def test_get_objects_list_values_become_in(seeded_shop) -> None:
    rows = ItemManager.get_objects(code=["LAMP", "TABLE"], sort_by="id DESC")

    assert [item.id for item in rows] == [3, 1]


def test_get_objects_query_pairs_limit_and_offset(seeded_shop) -> None:
    rows = ItemManager.get_objects(
        query=[("status", "active")], sort_by=["id"], limit=1, offset=1
    )

    assert [item.code for item in rows] == ["CHAIR"]


def test_get_objects_rejects_unknown_column_and_sort(seeded_shop) -> None:
    with pytest.raises(RecordError):
        ItemManager.get_objects(colour="red")
    with pytest.raises(RecordError):
        ItemManager.get_objects(sort_by="title SIDEWAYS")


def test_get_objects_with_objects_loads_each_relation(seeded_shop) -> None:
    rows = ItemManager.get_objects(
        with_objects=["tags", "notes"], multi_many_ok=True, sort_by="id"
    )

    assert [len(item.tags) for item in rows] == [2, 1, 0]
    assert [len(item.notes) for item in rows] == [1, 0, 0]
    assert rows[1].tags[0].label == "office"


def test_multiple_relations_without_multi_many_ok_warns(seeded_shop, caplog) -> None:
    with caplog.at_level(logging.WARNING):
        ItemManager.get_objects(with_objects=["tags", "notes"])

    assert "multi_many_ok" in caplog.text


def test_unknown_relation_is_rejected(seeded_shop) -> None:
    with pytest.raises(RecordError):
        ItemManager.get_objects(with_objects=["owners"])


def test_get_objects_count(seeded_shop) -> None:
    assert ItemManager.get_objects_count(status="active") == 2
    assert ItemManager.get_objects_count(status=[]) == 0
    assert Manager.get_objects_count(object_class=Tag, item_id=1, sort_by="id") == 2


def test_get_objects_iterator_is_lazy_and_single_pass(seeded_shop) -> None:
    iterator = ItemManager.get_objects_iterator(sort_by="id", with_objects=["tags"])

    first = next(iterator)
    assert first.code == "LAMP"
    assert len(first.tags) == 2
    assert [item.code for item in iterator] == ["CHAIR", "TABLE"]
    assert list(iterator) == []


def test_generic_manager_needs_object_class(shop_db) -> None:
    with pytest.raises(RecordError):
        Manager.get_objects()
