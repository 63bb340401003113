# logitrack/routers/files.py
"""Serves files saved by LocalStorageProvider. Always 404 when storage is Firebase."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from logitrack.routers.deps import get_storage
from logitrack.storage.local_provider import LocalStorageProvider
from logitrack.storage.provider import StorageProvider

router = APIRouter()


@router.get("/files/{path:path}", summary="Download a locally stored file")
async def get_file(path: str, storage: StorageProvider = Depends(get_storage)):
    if not isinstance(storage, LocalStorageProvider):
        raise HTTPException(status_code=404, detail="File not found")
    try:
        target = storage.resolve(path)
    except ValueError:
        raise HTTPException(status_code=404, detail="File not found")
    if not target.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(target)
