# logitrack/routers/trucks.py
"""Truck records: list with view state, CRUD, plate check, live list and uploads."""

import asyncio
from typing import Optional

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, UploadFile, WebSocket, status
from fastapi.encoders import jsonable_encoder

from logitrack.errors import AuthorizationError
from logitrack.routers.deps import SESSION_COOKIE, get_admin, get_storage, get_store
from logitrack.schemas.truck import validate_truck
from logitrack.services import truck_service
from logitrack.services.mappers import Truck
from logitrack.services.user_admin_service import require_admin
from logitrack.services.view_state import Direction, SortState, TruckView, truck_view
from logitrack.storage.provider import StorageProvider
from logitrack.store.base import DocumentStore
from logitrack.utils.logger import get_logger
from logitrack.utils.plates import format_license_plate

logger = get_logger(__name__)

router = APIRouter()


@router.get("/trucks", response_model=list[Truck], summary="List trucks")
async def list_trucks(
    view: TruckView = "all",
    q: str = "",
    sort: Optional[str] = None,
    direction: Direction = "asc",
    store: DocumentStore = Depends(get_store),
    caller: dict = Depends(get_admin),
):
    """Newest first, then partitioned by ownership, searched and sorted."""
    trucks = await truck_service.list_trucks(store)
    return truck_view(view, q, SortState(sort, direction)).apply(trucks)


@router.get("/trucks/plates/{plate}", summary="Check whether a license plate is taken")
async def check_plate(plate: str, store: DocumentStore = Depends(get_store), caller: dict = Depends(get_admin)):
    exists = await truck_service.check_license_plate_exists(store, plate)
    return {"plate": format_license_plate(plate), "exists": exists}


@router.get("/trucks/{truck_id}", response_model=Truck, summary="Get one truck")
async def get_truck(truck_id: str, store: DocumentStore = Depends(get_store), caller: dict = Depends(get_admin)):
    truck = await truck_service.get_truck(store, truck_id)
    if truck is None:
        raise HTTPException(status_code=404, detail="Truck not found")
    return truck


@router.post("/trucks", status_code=status.HTTP_201_CREATED, summary="Register a truck")
async def create_truck(
    payload: dict = Body(...),
    store: DocumentStore = Depends(get_store),
    caller: dict = Depends(get_admin),
):
    form = validate_truck(payload)
    truck_id = await truck_service.create_truck(store, form, caller.get("uid", ""))
    return {"success": True, "truckId": truck_id}


@router.put("/trucks/{truck_id}", summary="Update a truck")
async def update_truck(
    truck_id: str,
    payload: dict = Body(...),
    store: DocumentStore = Depends(get_store),
    caller: dict = Depends(get_admin),
):
    form = validate_truck(payload)
    await truck_service.update_truck(store, truck_id, form, caller.get("uid", ""))
    return {"success": True, "truckId": truck_id}


@router.post("/trucks/files", status_code=status.HTTP_201_CREATED, summary="Upload a truck photo or document")
async def upload_truck_file(
    file: UploadFile = File(...),
    folder: str = Form(...),
    storage: StorageProvider = Depends(get_storage),
    caller: dict = Depends(get_admin),
):
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty upload")
    url = await truck_service.upload_truck_file(
        storage, data, folder, file.filename or "upload", file.content_type or "application/octet-stream"
    )
    return {"url": url}


@router.websocket("/trucks/live")
async def trucks_live(websocket: WebSocket):
    """
    Pushes the full truck list (newest first) on connect and after every change.
    Authenticate with ?token=<id token> or the session cookie.
    """
    clients = websocket.app.state.clients
    token = websocket.query_params.get("token") or websocket.cookies.get(SESSION_COOKIE)
    try:
        require_admin(clients.auth.verify_id_token(token) if token else None)
    except AuthorizationError as e:
        logger.warning(f"[TRUCKS] Live list refused: {e}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    except Exception as e:
        logger.error(f"[TRUCKS] Live list token check failed: {e}", exc_info=True)
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return

    await websocket.accept()
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()
    # Firestore listeners call back on their own thread
    subscription = truck_service.watch_trucks(
        clients.store, lambda trucks: loop.call_soon_threadsafe(queue.put_nowait, trucks)
    )

    async def pump():
        while True:
            trucks = await queue.get()
            await websocket.send_json(jsonable_encoder(trucks))

    sender = asyncio.create_task(pump())
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        sender.cancel()
        subscription.unsubscribe()
        logger.info("[TRUCKS] Live list client disconnected")
