# logitrack/services/user_service.py
"""
Reads of the `users` collection, the store-side mirror of auth accounts.
Writes to it happen in user_admin_service.
"""

from typing import Callable

from logitrack.config import settings
from logitrack.services.mappers import UserRecord, map_user
from logitrack.store.base import USERS, DocumentStore, Subscription
from logitrack.utils.logger import get_logger

logger = get_logger(__name__)


async def list_users(store: DocumentStore, limit: int = settings.USERS_PAGE_LIMIT) -> list[UserRecord]:
    """Most recently signed-in users first. Users that never signed in (lastLogin None) come last."""
    try:
        docs = store.list(USERS, order_by="lastLogin", descending=True, limit=limit)
    except Exception as e:
        logger.error(f"[USERS] Failed to list users: {e}", exc_info=True)
        raise
    return [map_user(doc.id, doc.data) for doc in docs]


def watch_users(store: DocumentStore, on_change: Callable[[list[UserRecord]], None],
                limit: int = settings.USERS_PAGE_LIMIT) -> Subscription:
    def deliver(docs):
        on_change([map_user(doc.id, doc.data) for doc in docs])

    try:
        return store.watch(USERS, deliver, order_by="lastLogin", descending=True, limit=limit)
    except Exception as e:
        logger.error(f"[USERS] Failed to subscribe to users: {e}", exc_info=True)
        raise
