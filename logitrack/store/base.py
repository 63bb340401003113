# logitrack/store/base.py
"""
Document store interface.

A store is a set of collections, each a mapping from an opaque string id to
a field-bag. No schema is enforced here; record shapes come from the
mappers and validation schemas. Two backends implement it:
SqlDocumentStore (SQLAlchemy) and FirestoreDocumentStore (firebase-admin).
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

# Collection names
TRUCKS = "trucks"
SUBCONTRACTORS = "subcontractors"
USERS = "users"
WAITLIST = "waitlist"


class _ServerTimestamp:
    """Sentinel resolved to the store's clock at write time."""

    def __repr__(self):
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass
class DocumentSnapshot:
    id: str
    data: dict[str, Any] = field(default_factory=dict)


SnapshotCallback = Callable[[list[DocumentSnapshot]], None]


class Subscription:
    """Handle for a live query. unsubscribe() is idempotent."""

    def __init__(self, cancel: Callable[[], None]):
        self._cancel = cancel
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._cancel()


class DocumentStore:
    def get(self, collection: str, doc_id: str) -> Optional[DocumentSnapshot]:
        raise NotImplementedError

    def list(
        self,
        collection: str,
        order_by: Optional[str] = None,
        descending: bool = False,
        where: Optional[dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> list[DocumentSnapshot]:
        """
        Equality filters from `where`, then ordering, then limit.
        Documents missing the `order_by` field are left out.
        """
        raise NotImplementedError

    def create(self, collection: str, data: dict[str, Any], unique: Iterable[str] = ()) -> str:
        """
        Insert a new document and return its id.
        Every field named in `unique` is claimed atomically with the insert;
        an existing claim raises DuplicateKeyError and nothing is written.
        """
        raise NotImplementedError

    def update(self, collection: str, doc_id: str, data: dict[str, Any], unique: Iterable[str] = ()) -> None:
        """Merge `data` into an existing document (DocumentNotFoundError otherwise)."""
        raise NotImplementedError

    def set(self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False) -> None:
        raise NotImplementedError

    def set_many(self, collection: str, docs: dict[str, dict[str, Any]], merge: bool = True) -> int:
        """Write several documents in one batch. Returns the number written."""
        raise NotImplementedError

    def delete(self, collection: str, doc_id: str) -> None:
        raise NotImplementedError

    def watch(
        self,
        collection: str,
        callback: SnapshotCallback,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> Subscription:
        """
        Live query. `callback` receives the full, recomputed result list once
        on subscribe and again after every change to the collection.
        """
        raise NotImplementedError
