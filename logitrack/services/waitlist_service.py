# logitrack/services/waitlist_service.py

from typing import Callable

from logitrack.services.mappers import WaitlistEntry, map_waitlist_entry
from logitrack.store.base import SERVER_TIMESTAMP, WAITLIST, DocumentStore, Subscription
from logitrack.utils.logger import get_logger

logger = get_logger(__name__)


async def list_waitlist(store: DocumentStore) -> list[WaitlistEntry]:
    try:
        docs = store.list(WAITLIST, order_by="createdAt", descending=True)
    except Exception as e:
        logger.error(f"[WAITLIST] Failed to list waitlist: {e}", exc_info=True)
        raise
    return [map_waitlist_entry(doc.id, doc.data) for doc in docs]


async def join_waitlist(store: DocumentStore, email: str) -> str:
    try:
        entry_id = store.create(WAITLIST, {"email": email, "createdAt": SERVER_TIMESTAMP})
    except Exception as e:
        logger.error(f"[WAITLIST] Failed to add {email}: {e}", exc_info=True)
        raise
    logger.info(f"[WAITLIST] {email} joined ({entry_id})")
    return entry_id


async def delete_waitlist_entry(store: DocumentStore, entry_id: str) -> None:
    try:
        store.delete(WAITLIST, entry_id)
    except Exception as e:
        logger.error(f"[WAITLIST] Failed to delete {entry_id}: {e}", exc_info=True)
        raise
    logger.info(f"[WAITLIST] Deleted {entry_id}")


def watch_waitlist(store: DocumentStore, on_change: Callable[[list[WaitlistEntry]], None]) -> Subscription:
    def deliver(docs):
        on_change([map_waitlist_entry(doc.id, doc.data) for doc in docs])

    try:
        return store.watch(WAITLIST, deliver, order_by="createdAt", descending=True)
    except Exception as e:
        logger.error(f"[WAITLIST] Failed to subscribe to waitlist: {e}", exc_info=True)
        raise
