# tests/test_sql_store.py
"""Tests for the SQLAlchemy document store (in-memory SQLite)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from logitrack.errors import DocumentNotFoundError, DuplicateKeyError
from logitrack.store.base import SERVER_TIMESTAMP, TRUCKS, WAITLIST
from logitrack.store.timestamps import EpochSeconds, normalize_timestamp


class TestReadsAndWrites:
    def test_create_and_get(self, store):
        doc_id = store.create(WAITLIST, {"email": "a@b.co", "createdAt": SERVER_TIMESTAMP})
        doc = store.get(WAITLIST, doc_id)
        assert doc.id == doc_id
        assert doc.data["email"] == "a@b.co"
        assert isinstance(doc.data["createdAt"], EpochSeconds)

    def test_get_missing_returns_none(self, store):
        assert store.get(WAITLIST, "nope") is None

    def test_list_orders_filters_and_limits(self, store):
        for email in ["first@x.co", "second@x.co", "third@x.co"]:
            store.create(WAITLIST, {"email": email, "createdAt": SERVER_TIMESTAMP})
        store.create(WAITLIST, {"email": "undated@x.co"})

        newest_first = store.list(WAITLIST, order_by="createdAt", descending=True)
        assert [d.data["email"] for d in newest_first] == ["third@x.co", "second@x.co", "first@x.co"]
        assert len(store.list(WAITLIST)) == 4
        assert len(store.list(WAITLIST, order_by="createdAt", limit=2)) == 2
        assert [d.data["email"] for d in store.list(WAITLIST, where={"email": "second@x.co"})] == ["second@x.co"]

    def test_update_merges_and_refreshes_timestamp(self, store):
        doc_id = store.create(TRUCKS, {"brand": "Isuzu", "createdAt": SERVER_TIMESTAMP, "updatedAt": SERVER_TIMESTAMP})
        store.update(TRUCKS, doc_id, {"model": "FRR", "updatedAt": SERVER_TIMESTAMP})
        data = store.get(TRUCKS, doc_id).data
        assert data["brand"] == "Isuzu" and data["model"] == "FRR"
        assert normalize_timestamp(data["updatedAt"]) > normalize_timestamp(data["createdAt"])

    def test_update_missing_document(self, store):
        with pytest.raises(DocumentNotFoundError):
            store.update(TRUCKS, "ghost", {"brand": "Hino"})

    def test_set_merge_and_replace(self, store):
        store.set("users", "u1", {"email": "a@b.co", "role": "user"})
        store.set("users", "u1", {"role": "admin"}, merge=True)
        assert store.get("users", "u1").data == {"email": "a@b.co", "role": "admin"}
        store.set("users", "u1", {"role": "partner"})
        assert store.get("users", "u1").data == {"role": "partner"}

    def test_set_many(self, store):
        assert store.set_many("users", {"u1": {"role": "user"}, "u2": {"role": "admin"}}) == 2
        assert {d.id for d in store.list("users")} == {"u1", "u2"}

    def test_delete(self, store):
        doc_id = store.create(WAITLIST, {"email": "gone@x.co"})
        store.delete(WAITLIST, doc_id)
        assert store.get(WAITLIST, doc_id) is None


class TestUniqueKeys:
    def test_second_claim_is_rejected_and_nothing_written(self, store):
        store.create(TRUCKS, {"licensePlate": "กก-1234"}, unique=("licensePlate",))
        with pytest.raises(DuplicateKeyError) as exc_info:
            store.create(TRUCKS, {"licensePlate": "กก-1234", "brand": "Hino"}, unique=("licensePlate",))
        assert exc_info.value.field == "licensePlate"
        assert exc_info.value.value == "กก-1234"
        assert len(store.list(TRUCKS)) == 1

    def test_update_moves_the_claim(self, store):
        doc_id = store.create(TRUCKS, {"licensePlate": "กก-1"}, unique=("licensePlate",))
        store.update(TRUCKS, doc_id, {"licensePlate": "กก-2"}, unique=("licensePlate",))
        # the old plate is free again
        store.create(TRUCKS, {"licensePlate": "กก-1"}, unique=("licensePlate",))

    def test_update_to_a_taken_value_rolls_back(self, store):
        store.create(TRUCKS, {"licensePlate": "กก-1"}, unique=("licensePlate",))
        doc_id = store.create(TRUCKS, {"licensePlate": "กก-2"}, unique=("licensePlate",))
        with pytest.raises(DuplicateKeyError):
            store.update(TRUCKS, doc_id, {"licensePlate": "กก-1", "brand": "Hino"}, unique=("licensePlate",))
        assert store.get(TRUCKS, doc_id).data == {"licensePlate": "กก-2"}
        # and its own claim survived
        with pytest.raises(DuplicateKeyError):
            store.create(TRUCKS, {"licensePlate": "กก-2"}, unique=("licensePlate",))

    def test_update_keeping_the_same_value(self, store):
        doc_id = store.create(TRUCKS, {"licensePlate": "กก-1"}, unique=("licensePlate",))
        store.update(TRUCKS, doc_id, {"licensePlate": "กก-1", "brand": "Hino"}, unique=("licensePlate",))
        assert store.get(TRUCKS, doc_id).data["brand"] == "Hino"

    def test_delete_releases_the_claim(self, store):
        doc_id = store.create(TRUCKS, {"licensePlate": "กก-1"}, unique=("licensePlate",))
        store.delete(TRUCKS, doc_id)
        store.create(TRUCKS, {"licensePlate": "กก-1"}, unique=("licensePlate",))


class TestWatch:
    def test_initial_push_then_every_write_until_unsubscribed(self, store):
        pushes = []
        subscription = store.watch(WAITLIST, lambda docs: pushes.append([d.data["email"] for d in docs]),
                                   order_by="createdAt", descending=True)
        assert pushes == [[]]

        store.create(WAITLIST, {"email": "one@x.co", "createdAt": SERVER_TIMESTAMP})
        store.create(WAITLIST, {"email": "two@x.co", "createdAt": SERVER_TIMESTAMP})
        assert pushes[-1] == ["two@x.co", "one@x.co"]

        subscription.unsubscribe()
        subscription.unsubscribe()
        store.create(WAITLIST, {"email": "three@x.co", "createdAt": SERVER_TIMESTAMP})
        assert len(pushes) == 3
        assert subscription.active is False

    def test_other_collections_do_not_notify(self, store):
        pushes = []
        store.watch(WAITLIST, pushes.append)
        store.create(TRUCKS, {"brand": "Isuzu"})
        assert len(pushes) == 1

    def test_failing_callback_does_not_break_writes(self, store):
        def boom(docs):
            raise RuntimeError("listener crashed")

        store.watch(WAITLIST, boom)
        doc_id = store.create(WAITLIST, {"email": "ok@x.co"})
        assert store.get(WAITLIST, doc_id) is not None
