# logitrack/store/firestore_store.py
"""
Document store on Cloud Firestore (firebase-admin).

Timestamps come back from the client library as DatetimeWithNanoseconds and
are tagged NativeDate here. Unique values are claimed by creating a marker
document in `_unique_keys` inside the same transaction as the write:
Firestore's create() fails when the marker already exists, so a duplicate
plate can never commit. The same transaction also queries the collection for
the value, which catches documents that predate the markers.
"""

from datetime import datetime
from typing import Any, Iterable

from firebase_admin import firestore
from google.api_core.exceptions import AlreadyExists, Conflict, NotFound
from google.cloud.firestore_v1.base_query import FieldFilter

from logitrack.errors import DocumentNotFoundError, DuplicateKeyError
from logitrack.store.base import (
    SERVER_TIMESTAMP,
    DocumentSnapshot,
    DocumentStore,
    Subscription,
)
from logitrack.store.timestamps import EpochSeconds, MillisAccessor, NativeDate, to_datetime
from logitrack.utils.logger import get_logger

logger = get_logger(__name__)

UNIQUE_KEYS = "_unique_keys"
_BATCH_LIMIT = 500


def _to_firestore(value: Any) -> Any:
    if value is SERVER_TIMESTAMP:
        return firestore.SERVER_TIMESTAMP
    if isinstance(value, (NativeDate, EpochSeconds, MillisAccessor)):
        return to_datetime(value)
    if isinstance(value, dict):
        return {k: _to_firestore(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_firestore(v) for v in value]
    return value


def _tag(value: Any) -> Any:
    if isinstance(value, datetime):
        return NativeDate(value)
    if isinstance(value, dict):
        return {k: _tag(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_tag(v) for v in value]
    return value


def _snapshot(doc) -> DocumentSnapshot:
    return DocumentSnapshot(id=doc.id, data=_tag(doc.to_dict() or {}))


def _claim_id(collection: str, field: str, value: Any) -> str:
    return f"{collection}:{field}:{value}".replace("/", "_")


def _claims(data: dict, unique: Iterable[str]) -> dict[str, str]:
    return {f: str(data[f]) for f in unique if data.get(f) not in (None, "")}


class FirestoreDocumentStore(DocumentStore):
    def __init__(self, client):
        self._db = client

    def _query(self, collection, order_by=None, descending=False, where=None, limit=None):
        query = self._db.collection(collection)
        for field, value in (where or {}).items():
            query = query.where(filter=FieldFilter(field, "==", value))
        if order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        if limit is not None:
            query = query.limit(limit)
        return query

    # ── Reads ─────────────────────────────────────────────────────────────
    def get(self, collection, doc_id):
        doc = self._db.collection(collection).document(doc_id).get()
        if not doc.exists:
            return None
        return _snapshot(doc)

    def list(self, collection, order_by=None, descending=False, where=None, limit=None):
        query = self._query(collection, order_by, descending, where, limit)
        return [_snapshot(doc) for doc in query.stream()]

    # ── Writes ────────────────────────────────────────────────────────────
    def create(self, collection, data, unique: Iterable[str] = ()):
        doc_ref = self._db.collection(collection).document()
        payload = _to_firestore(data)
        claims = _claims(data, unique)

        if not claims:
            doc_ref.set(payload)
            return doc_ref.id

        @firestore.transactional
        def txn_create(txn) -> None:
            # Transaction reads must come before any write
            for field, value in claims.items():
                self._check_unmarked(txn, collection, field, value)
            for field, value in claims.items():
                marker = self._db.collection(UNIQUE_KEYS).document(_claim_id(collection, field, value))
                txn.create(marker, {"collection": collection, "field": field,
                                    "value": value, "documentId": doc_ref.id})
            txn.create(doc_ref, payload)

        try:
            txn_create(self._db.transaction())
        except (AlreadyExists, Conflict):
            field, value = self._taken(collection, claims)
            raise DuplicateKeyError(collection, field, value)
        return doc_ref.id

    def update(self, collection, doc_id, data, unique: Iterable[str] = ()):
        doc_ref = self._db.collection(collection).document(doc_id)
        payload = _to_firestore(data)
        changed = [f for f in unique if f in data]

        if not changed:
            try:
                doc_ref.update(payload)
            except NotFound:
                raise DocumentNotFoundError(collection, doc_id)
            return

        claims = _claims(data, changed)

        @firestore.transactional
        def txn_update(txn) -> None:
            current = doc_ref.get(transaction=txn)
            if not current.exists:
                raise DocumentNotFoundError(collection, doc_id)
            existing = current.to_dict() or {}
            for field, value in claims.items():
                old = existing.get(field)
                if old in (None, "") or str(old) != value:
                    self._check_unmarked(txn, collection, field, value, exclude=doc_id)
            for field in changed:
                old, new = existing.get(field), claims.get(field)
                if old not in (None, "") and str(old) == new:
                    continue
                if old not in (None, ""):
                    txn.delete(self._db.collection(UNIQUE_KEYS).document(_claim_id(collection, field, old)))
                if new is not None:
                    marker = self._db.collection(UNIQUE_KEYS).document(_claim_id(collection, field, new))
                    txn.create(marker, {"collection": collection, "field": field,
                                        "value": new, "documentId": doc_id})
            txn.update(doc_ref, payload)

        try:
            txn_update(self._db.transaction())
        except (AlreadyExists, Conflict):
            field, value = self._taken(collection, claims)
            raise DuplicateKeyError(collection, field, value)

    def set(self, collection, doc_id, data, merge=False):
        self._db.collection(collection).document(doc_id).set(_to_firestore(data), merge=merge)

    def set_many(self, collection, docs, merge=True):
        items = list(docs.items())
        for start in range(0, len(items), _BATCH_LIMIT):
            batch = self._db.batch()
            for doc_id, data in items[start:start + _BATCH_LIMIT]:
                batch.set(self._db.collection(collection).document(doc_id), _to_firestore(data), merge=merge)
            batch.commit()
        return len(items)

    def delete(self, collection, doc_id):
        self._db.collection(collection).document(doc_id).delete()

    def _check_unmarked(self, txn, collection, field, value, exclude=None) -> None:
        """Documents written before `_unique_keys` existed hold the value without a marker."""
        query = (self._db.collection(collection)
                 .where(filter=FieldFilter(field, "==", value))
                 .limit(2))
        for doc in txn.get(query):
            if doc.id != exclude:
                raise DuplicateKeyError(collection, field, value)

    def _taken(self, collection, claims: dict[str, str]) -> tuple[str, str]:
        for field, value in claims.items():
            if self._db.collection(UNIQUE_KEYS).document(_claim_id(collection, field, value)).get().exists:
                return field, value
        return next(iter(claims.items()))

    # ── Live queries ──────────────────────────────────────────────────────
    def watch(self, collection, callback, order_by=None, descending=False, limit=None):
        query = self._query(collection, order_by, descending, None, limit)

        def on_snapshot(docs, changes, read_time):
            try:
                callback([_snapshot(doc) for doc in docs])
            except Exception as e:
                logger.error(f"[STORE] Watcher on {collection} failed: {e}", exc_info=True)

        watch = query.on_snapshot(on_snapshot)
        return Subscription(watch.unsubscribe)
