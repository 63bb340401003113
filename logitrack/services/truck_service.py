# logitrack/services/truck_service.py
"""
Truck records: list / get / create / update, the live list and file uploads.

License plates are unique. The store claims `licensePlate` atomically with
the insert, so check_license_plate_exists() is only an early hint for forms.
"""

from typing import Callable, Optional

from logitrack.schemas.truck import TruckForm
from logitrack.services.mappers import Truck, map_truck
from logitrack.storage.provider import StorageProvider, build_path
from logitrack.store.base import SERVER_TIMESTAMP, TRUCKS, DocumentStore, Subscription
from logitrack.utils.logger import get_logger
from logitrack.utils.plates import format_license_plate

logger = get_logger(__name__)

UNIQUE_FIELDS = ("licensePlate",)


def _strip_none(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}


async def list_trucks(store: DocumentStore) -> list[Truck]:
    try:
        docs = store.list(TRUCKS, order_by="createdAt", descending=True)
    except Exception as e:
        logger.error(f"[TRUCKS] Failed to list trucks: {e}", exc_info=True)
        raise
    return [map_truck(doc.id, doc.data) for doc in docs]


async def get_truck(store: DocumentStore, truck_id: str) -> Optional[Truck]:
    try:
        doc = store.get(TRUCKS, truck_id)
    except Exception as e:
        logger.error(f"[TRUCKS] Failed to fetch truck {truck_id}: {e}", exc_info=True)
        raise
    return map_truck(doc.id, doc.data) if doc else None


async def check_license_plate_exists(store: DocumentStore, license_plate: str) -> bool:
    plate = format_license_plate(license_plate)
    try:
        return bool(store.list(TRUCKS, where={"licensePlate": plate}, limit=1))
    except Exception as e:
        logger.error(f"[TRUCKS] Failed to check license plate {plate}: {e}", exc_info=True)
        raise


async def create_truck(store: DocumentStore, form: TruckForm, user_id: str) -> str:
    """Persist a validated truck. Raises DuplicateKeyError when the plate is taken."""
    data = _strip_none(form.to_document())
    data.update(createdBy=user_id, createdAt=SERVER_TIMESTAMP, updatedAt=SERVER_TIMESTAMP)
    try:
        truck_id = store.create(TRUCKS, data, unique=UNIQUE_FIELDS)
    except Exception as e:
        logger.error(f"[TRUCKS] ❌ Failed to save truck {data.get('licensePlate')}: {e}")
        raise
    logger.info(f"[TRUCKS] ✅ Truck {truck_id} ({data['licensePlate']}) created by {user_id}")
    return truck_id


async def update_truck(store: DocumentStore, truck_id: str, form: TruckForm, user_id: str) -> None:
    data = _strip_none(form.to_document())
    data.update(updatedAt=SERVER_TIMESTAMP, updatedBy=user_id)
    try:
        store.update(TRUCKS, truck_id, data, unique=UNIQUE_FIELDS)
    except Exception as e:
        logger.error(f"[TRUCKS] ❌ Failed to update truck {truck_id}: {e}")
        raise
    logger.info(f"[TRUCKS] ✅ Truck {truck_id} updated by {user_id}")


def watch_trucks(store: DocumentStore, on_change: Callable[[list[Truck]], None]) -> Subscription:
    """Live truck list, newest first. `on_change` gets the full list on every change."""

    def deliver(docs):
        on_change([map_truck(doc.id, doc.data) for doc in docs])

    try:
        return store.watch(TRUCKS, deliver, order_by="createdAt", descending=True)
    except Exception as e:
        logger.error(f"[TRUCKS] Failed to subscribe to trucks: {e}", exc_info=True)
        raise


async def upload_truck_file(storage: StorageProvider, data: bytes, folder: str, filename: str,
                            content_type: str = "application/octet-stream") -> str:
    path = build_path("trucks", folder, filename)
    try:
        url = storage.upload(data, path, content_type)
    except Exception as e:
        logger.error(f"[TRUCKS] Failed to upload {path}: {e}", exc_info=True)
        raise
    logger.info(f"[TRUCKS] Uploaded {path}")
    return url
