"""Tests for CatalogStore: manual records with a unique display order."""

import pytest

from oe_manuals.errors.manual import (
    DuplicateManualOrderError, UnknownManualError)
from oe_manuals.models import Manual

from conftest import manual_fields


@pytest.fixture
def store(catalog):
    return catalog.records


def insert(store, **overrides):
    return store.insert(Manual(**manual_fields(**overrides)))


class TestInsert:
    """Tests for CatalogStore.insert."""

    def test_assigns_id(self, store):
        manual = insert(store)
        assert isinstance(manual.id, int)
        assert manual.to_dict() == {
            'id': manual.id,
            'video_link': 'https://videos.example.com/v1',
            'title': 'T1',
            'description': 'D1',
            'order': 1,
            'thumbnail': None,
        }

    def test_ignores_supplied_id(self, store):
        manual = store.insert(Manual(id=1000, **manual_fields()))
        assert manual.id != 1000

    def test_duplicate_order(self, store):
        insert(store, order=5)
        with pytest.raises(DuplicateManualOrderError) as excinfo:
            insert(store, order=5, title='Other')
        assert excinfo.value.meta == {'order': 5}
        assert len(store.list_all()) == 1

    def test_stores_thumbnail_ref(self, store):
        manual = insert(store, thumbnail='abc.png')
        assert store.find_by_id(manual.id).thumbnail == 'abc.png'
        assert store.thumbnails() == {'abc.png'}


class TestFind:
    """Tests for CatalogStore.find_by_id and CatalogStore.find_by_order."""

    def test_find_by_id(self, store):
        manual = insert(store)
        assert store.find_by_id(manual.id).to_dict() == manual.to_dict()
        assert store.find_by_id(manual.id + 1) is None

    def test_find_by_order(self, store):
        manual = insert(store, order=3)
        assert store.find_by_order(3).id == manual.id
        assert store.find_by_order(4) is None


class TestUpdate:
    """Tests for CatalogStore.update."""

    def test_update_fields(self, store):
        manual = insert(store)
        updated = store.update(
            manual.id, Manual(title='T2', description='D2', order=2))
        assert updated.id == manual.id
        assert (updated.title, updated.description, updated.order) == \
            ('T2', 'D2', 2)
        assert updated.video_link == manual.video_link
        assert store.find_by_order(1) is None

    def test_keep_own_order(self, store):
        manual = insert(store, order=7)
        assert store.update(manual.id, Manual(order=7, title='T2')).order == 7

    def test_order_taken_by_other(self, store):
        insert(store, order=1)
        manual = insert(store, order=2)
        with pytest.raises(DuplicateManualOrderError):
            store.update(manual.id, Manual(order=1))
        assert store.find_by_id(manual.id).order == 2

    def test_unknown(self, store):
        with pytest.raises(UnknownManualError):
            store.update(1, Manual(title='T2'))

    def test_id_cannot_change(self, store):
        manual = insert(store)
        assert store.update(manual.id, Manual(id=999, title='T2')).id == \
            manual.id


class TestDelete:
    """Tests for CatalogStore.delete and CatalogStore.list_all."""

    def test_delete(self, store):
        manual = insert(store, thumbnail='abc.png')
        removed = store.delete(manual.id)
        assert removed.to_dict() == manual.to_dict()
        assert store.find_by_id(manual.id) is None
        assert store.delete(manual.id) is None
        assert store.thumbnails() == set()

    def test_ids_not_reused(self, store):
        first = insert(store, order=1)
        second = insert(store, order=2)
        store.delete(second.id)
        third = insert(store, order=2)
        assert third.id not in (first.id, second.id)

    def test_list_in_insertion_order(self, store):
        ids = [insert(store, order=order).id for order in (3, 1, 2)]
        assert [m.id for m in store.list_all()] == ids
        assert [m.order for m in store.list_all()] == [3, 1, 2]
