# logitrack/services/subcontractor_service.py

from typing import Optional

from logitrack.schemas.subcontractor import SubcontractorForm
from logitrack.services.mappers import Subcontractor, map_subcontractor
from logitrack.storage.provider import StorageProvider, build_path
from logitrack.store.base import SERVER_TIMESTAMP, SUBCONTRACTORS, DocumentStore
from logitrack.utils.logger import get_logger

logger = get_logger(__name__)


async def list_subcontractors(store: DocumentStore) -> list[Subcontractor]:
    try:
        docs = store.list(SUBCONTRACTORS, order_by="createdAt", descending=True)
    except Exception as e:
        logger.error(f"[SUBCONTRACTORS] Failed to list subcontractors: {e}", exc_info=True)
        raise
    return [map_subcontractor(doc.id, doc.data) for doc in docs]


async def get_subcontractor(store: DocumentStore, subcontractor_id: str) -> Optional[Subcontractor]:
    try:
        doc = store.get(SUBCONTRACTORS, subcontractor_id)
    except Exception as e:
        logger.error(f"[SUBCONTRACTORS] Failed to fetch {subcontractor_id}: {e}", exc_info=True)
        raise
    return map_subcontractor(doc.id, doc.data) if doc else None


async def create_subcontractor(store: DocumentStore, form: SubcontractorForm) -> str:
    data = form.to_document()
    data.update(createdAt=SERVER_TIMESTAMP, updatedAt=SERVER_TIMESTAMP)
    try:
        subcontractor_id = store.create(SUBCONTRACTORS, data)
    except Exception as e:
        logger.error(f"[SUBCONTRACTORS] Failed to create {form.name}: {e}", exc_info=True)
        raise
    logger.info(f"[SUBCONTRACTORS] Created {subcontractor_id} ({form.name}, {form.type})")
    return subcontractor_id


async def update_subcontractor(store: DocumentStore, subcontractor_id: str, form: SubcontractorForm) -> None:
    data = form.to_document()
    data["updatedAt"] = SERVER_TIMESTAMP
    try:
        store.update(SUBCONTRACTORS, subcontractor_id, data)
    except Exception as e:
        logger.error(f"[SUBCONTRACTORS] Failed to update {subcontractor_id}: {e}", exc_info=True)
        raise
    logger.info(f"[SUBCONTRACTORS] Updated {subcontractor_id}")


async def upload_subcontractor_file(storage: StorageProvider, data: bytes, folder: str, filename: str,
                                    content_type: str = "application/octet-stream") -> str:
    path = build_path("subcontractors", folder, filename)
    try:
        return storage.upload(data, path, content_type)
    except Exception as e:
        logger.error(f"[SUBCONTRACTORS] Failed to upload {path}: {e}", exc_info=True)
        raise
