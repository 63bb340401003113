# logitrack/routers/waitlist.py

from fastapi import APIRouter, Depends, status

from logitrack.routers.deps import get_admin, get_store
from logitrack.schemas.waitlist import WaitlistJoin
from logitrack.services import waitlist_service
from logitrack.services.mappers import WaitlistEntry
from logitrack.services.view_state import WAITLIST_SEARCH_FIELDS, ListView
from logitrack.store.base import DocumentStore

router = APIRouter()


@router.get("/waitlist", response_model=list[WaitlistEntry], summary="List waitlist sign-ups")
async def list_waitlist(q: str = "", store: DocumentStore = Depends(get_store), caller: dict = Depends(get_admin)):
    entries = await waitlist_service.list_waitlist(store)
    return ListView(WAITLIST_SEARCH_FIELDS, q).apply(entries)


@router.post("/waitlist", status_code=status.HTTP_201_CREATED, summary="Join the waitlist (public)")
async def join_waitlist(body: WaitlistJoin, store: DocumentStore = Depends(get_store)):
    entry_id = await waitlist_service.join_waitlist(store, body.email)
    return {"success": True, "id": entry_id}


@router.delete("/waitlist/{entry_id}", summary="Remove a waitlist entry")
async def delete_waitlist_entry(entry_id: str, store: DocumentStore = Depends(get_store),
                                caller: dict = Depends(get_admin)):
    await waitlist_service.delete_waitlist_entry(store, entry_id)
    return {"success": True, "id": entry_id}
