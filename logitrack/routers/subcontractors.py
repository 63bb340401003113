# logitrack/routers/subcontractors.py

from typing import Optional

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, UploadFile, status

from logitrack.routers.deps import get_admin, get_storage, get_store
from logitrack.schemas.subcontractor import validate_subcontractor
from logitrack.services import subcontractor_service
from logitrack.services.mappers import Subcontractor
from logitrack.services.view_state import SUBCONTRACTOR_SEARCH_FIELDS, Direction, ListView, SortState
from logitrack.storage.provider import StorageProvider
from logitrack.store.base import DocumentStore

router = APIRouter()


@router.get("/subcontractors", response_model=list[Subcontractor], summary="List subcontractors")
async def list_subcontractors(
    q: str = "",
    sort: Optional[str] = None,
    direction: Direction = "asc",
    store: DocumentStore = Depends(get_store),
    caller: dict = Depends(get_admin),
):
    subcontractors = await subcontractor_service.list_subcontractors(store)
    return ListView(SUBCONTRACTOR_SEARCH_FIELDS, q, SortState(sort, direction)).apply(subcontractors)


@router.get("/subcontractors/{subcontractor_id}", response_model=Subcontractor, summary="Get one subcontractor")
async def get_subcontractor(subcontractor_id: str, store: DocumentStore = Depends(get_store),
                            caller: dict = Depends(get_admin)):
    subcontractor = await subcontractor_service.get_subcontractor(store, subcontractor_id)
    if subcontractor is None:
        raise HTTPException(status_code=404, detail="Subcontractor not found")
    return subcontractor


@router.post("/subcontractors", status_code=status.HTTP_201_CREATED, summary="Create a subcontractor")
async def create_subcontractor(payload: dict = Body(...), store: DocumentStore = Depends(get_store),
                               caller: dict = Depends(get_admin)):
    form = validate_subcontractor(payload)
    subcontractor_id = await subcontractor_service.create_subcontractor(store, form)
    return {"success": True, "id": subcontractor_id}


@router.put("/subcontractors/{subcontractor_id}", summary="Update a subcontractor")
async def update_subcontractor(subcontractor_id: str, payload: dict = Body(...),
                               store: DocumentStore = Depends(get_store), caller: dict = Depends(get_admin)):
    form = validate_subcontractor(payload)
    await subcontractor_service.update_subcontractor(store, subcontractor_id, form)
    return {"success": True, "id": subcontractor_id}


@router.post("/subcontractors/files", status_code=status.HTTP_201_CREATED, summary="Upload a subcontractor document")
async def upload_subcontractor_file(
    file: UploadFile = File(...),
    folder: str = Form(...),
    storage: StorageProvider = Depends(get_storage),
    caller: dict = Depends(get_admin),
):
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty upload")
    url = await subcontractor_service.upload_subcontractor_file(
        storage, data, folder, file.filename or "upload", file.content_type or "application/octet-stream"
    )
    return {"url": url}
