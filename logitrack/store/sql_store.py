# logitrack/store/sql_store.py
"""
Document store on SQLAlchemy.

Every collection lives in the `documents` table as a JSON field-bag.
Timestamps are persisted as {"__type__": "timestamp", "seconds", "nanoseconds"}
and handed back tagged as EpochSeconds, so mappers always see a known shape.
Uniqueness is a real constraint on `unique_keys`, claimed in the same
transaction as the document write.

Live queries are in-process: watchers registered on this store instance are
re-run after every committed write to their collection.
"""

import threading
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

from sqlalchemy.exc import IntegrityError

from logitrack.database import SessionLocal
from logitrack.errors import DocumentNotFoundError, DuplicateKeyError, TimestampShapeError
from logitrack.models.document import Document
from logitrack.models.unique_key import UniqueKey
from logitrack.store.base import (
    SERVER_TIMESTAMP,
    DocumentSnapshot,
    DocumentStore,
    SnapshotCallback,
    Subscription,
)
from logitrack.store.timestamps import (
    EpochSeconds,
    MillisAccessor,
    NativeDate,
    normalize_timestamp,
    to_datetime,
    to_epoch_seconds,
)
from logitrack.utils.logger import get_logger

logger = get_logger(__name__)

_TIMESTAMP_TYPE = "timestamp"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _encode_timestamp(value: datetime) -> dict:
    ts = to_epoch_seconds(value)
    return {"__type__": _TIMESTAMP_TYPE, "seconds": ts.seconds, "nanoseconds": ts.nanoseconds}


def _encode(value: Any, now: datetime) -> Any:
    if value is SERVER_TIMESTAMP:
        return _encode_timestamp(now)
    if isinstance(value, datetime):
        return _encode_timestamp(value)
    if isinstance(value, (NativeDate, EpochSeconds, MillisAccessor)):
        return _encode_timestamp(to_datetime(value))
    if isinstance(value, dict):
        return {k: _encode(v, now) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(v, now) for v in value]
    return value


def _decode(value: Any) -> Any:
    if isinstance(value, dict):
        if value.get("__type__") == _TIMESTAMP_TYPE:
            return EpochSeconds(value["seconds"], value.get("nanoseconds", 0))
        return {k: _decode(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_decode(v) for v in value]
    return value


def _order_key(value: Any) -> tuple:
    """Firestore-like cross-type ordering: null < bool < number < timestamp < string < other."""
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (1, value)
    if isinstance(value, (int, float)):
        return (2, value)
    if isinstance(value, str):
        return (4, value)
    try:
        return (3, normalize_timestamp(value))
    except TimestampShapeError:
        return (5, repr(value))


def _claim_value(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


class _Watcher:
    def __init__(self, callback: SnapshotCallback, order_by, descending, limit):
        self.callback = callback
        self.order_by = order_by
        self.descending = descending
        self.limit = limit


class SqlDocumentStore(DocumentStore):
    def __init__(self, session_factory=SessionLocal, clock=None):
        self._session_factory = session_factory
        self._clock = clock or _utcnow
        self._last_now: Optional[datetime] = None
        self._lock = threading.Lock()
        self._watchers: dict[str, list[_Watcher]] = defaultdict(list)

    # ── Clock ─────────────────────────────────────────────────────────────
    def _now(self) -> datetime:
        """Server time, strictly increasing per store so updatedAt > createdAt."""
        now = normalize_timestamp(self._clock())
        with self._lock:
            if self._last_now is not None and now <= self._last_now:
                now = self._last_now + timedelta(microseconds=1)
            self._last_now = now
        return now

    # ── Reads ─────────────────────────────────────────────────────────────
    def get(self, collection, doc_id):
        with self._session_factory() as db:
            doc = db.get(Document, (collection, doc_id))
            if doc is None:
                return None
            return DocumentSnapshot(id=doc.id, data=_decode(doc.data))

    def list(self, collection, order_by=None, descending=False, where=None, limit=None):
        with self._session_factory() as db:
            rows = db.query(Document).filter(Document.collection == collection).all()
            snapshots = [DocumentSnapshot(id=row.id, data=_decode(row.data)) for row in rows]

        for field, expected in (where or {}).items():
            snapshots = [s for s in snapshots if s.data.get(field) == expected]

        if order_by:
            snapshots = [s for s in snapshots if order_by in s.data]
            snapshots.sort(key=lambda s: _order_key(s.data[order_by]), reverse=descending)

        if limit is not None:
            snapshots = snapshots[:limit]
        return snapshots

    # ── Writes ────────────────────────────────────────────────────────────
    def create(self, collection, data, unique: Iterable[str] = ()):
        doc_id = uuid.uuid4().hex[:20]
        now = self._now()
        claims = {f: _claim_value(data.get(f)) for f in unique}
        claims = {f: v for f, v in claims.items() if v is not None}

        with self._session_factory() as db:
            db.add(Document(collection=collection, id=doc_id, data=_encode(data, now),
                            created_at=now, updated_at=now))
            for field, value in claims.items():
                db.add(UniqueKey(collection=collection, field=field, value=value, document_id=doc_id))
            self._commit(db, collection, claims)

        logger.debug(f"[STORE] Created {collection}/{doc_id}")
        self._notify(collection)
        return doc_id

    def update(self, collection, doc_id, data, unique: Iterable[str] = ()):
        now = self._now()
        claims = {}
        with self._session_factory() as db:
            doc = db.get(Document, (collection, doc_id))
            if doc is None:
                raise DocumentNotFoundError(collection, doc_id)

            for field in unique:
                if field not in data:
                    continue
                value = _claim_value(data.get(field))
                existing = db.query(UniqueKey).filter(
                    UniqueKey.collection == collection,
                    UniqueKey.field == field,
                    UniqueKey.document_id == doc_id,
                ).first()
                if existing is not None and existing.value == value:
                    continue
                if existing is not None:
                    db.delete(existing)
                    db.flush()
                if value is not None:
                    db.add(UniqueKey(collection=collection, field=field, value=value, document_id=doc_id))
                    claims[field] = value

            merged = dict(doc.data)
            merged.update(_encode(data, now))
            doc.data = merged
            doc.updated_at = now
            self._commit(db, collection, claims)

        self._notify(collection)

    def set(self, collection, doc_id, data, merge=False):
        now = self._now()
        with self._session_factory() as db:
            self._write(db, collection, doc_id, data, merge, now)
            db.commit()
        self._notify(collection)

    def set_many(self, collection, docs, merge=True):
        now = self._now()
        with self._session_factory() as db:
            for doc_id, data in docs.items():
                self._write(db, collection, doc_id, data, merge, now)
            db.commit()
        self._notify(collection)
        return len(docs)

    def delete(self, collection, doc_id):
        with self._session_factory() as db:
            doc = db.get(Document, (collection, doc_id))
            if doc is not None:
                db.delete(doc)
            db.query(UniqueKey).filter(
                UniqueKey.collection == collection,
                UniqueKey.document_id == doc_id,
            ).delete()
            db.commit()
        self._notify(collection)

    def _write(self, db, collection, doc_id, data, merge, now):
        payload = _encode(data, now)
        doc = db.get(Document, (collection, doc_id))
        if doc is None:
            db.add(Document(collection=collection, id=doc_id, data=payload,
                            created_at=now, updated_at=now))
            return
        if merge:
            merged = dict(doc.data)
            merged.update(payload)
            payload = merged
        doc.data = payload
        doc.updated_at = now

    def _commit(self, db, collection, claims: dict[str, str]):
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            field, value = self._find_taken_claim(db, collection, claims)
            raise DuplicateKeyError(collection, field, value)

    @staticmethod
    def _find_taken_claim(db, collection, claims):
        for field, value in claims.items():
            taken = db.query(UniqueKey).filter(
                UniqueKey.collection == collection,
                UniqueKey.field == field,
                UniqueKey.value == value,
            ).first()
            if taken is not None:
                return field, value
        return next(iter(claims.items()), ("id", None))

    # ── Live queries ──────────────────────────────────────────────────────
    def watch(self, collection, callback, order_by=None, descending=False, limit=None):
        watcher = _Watcher(callback, order_by, descending, limit)
        with self._lock:
            self._watchers[collection].append(watcher)

        def cancel():
            with self._lock:
                if watcher in self._watchers[collection]:
                    self._watchers[collection].remove(watcher)

        self._deliver(collection, watcher)
        return Subscription(cancel)

    def _notify(self, collection: str):
        with self._lock:
            watchers = list(self._watchers.get(collection, ()))
        for watcher in watchers:
            self._deliver(collection, watcher)

    def _deliver(self, collection: str, watcher: _Watcher):
        snapshots = self.list(collection, order_by=watcher.order_by,
                              descending=watcher.descending, limit=watcher.limit)
        try:
            watcher.callback(snapshots)
        except Exception as e:
            logger.error(f"[STORE] Watcher on {collection} failed: {e}", exc_info=True)
