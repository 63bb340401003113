# logitrack/routers/users.py
"""
Users screen plus the privileged user-administration calls.
Admin checks for the privileged calls happen in user_admin_service.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from logitrack.auth.provider import AuthProvider, AuthUser
from logitrack.config import settings
from logitrack.routers.deps import get_admin, get_auth, get_caller, get_store
from logitrack.schemas.user import CreateUserRequest, RoleUpdateRequest
from logitrack.services import user_admin_service, user_service
from logitrack.services.mappers import UserRecord
from logitrack.services.view_state import Direction, SortState, user_view
from logitrack.store.base import DocumentStore

router = APIRouter()


@router.get("/users", response_model=list[UserRecord], summary="List users (most recent sign-in first)")
async def list_users(
    q: str = "",
    sort: Optional[str] = None,
    direction: Direction = "asc",
    limit: int = Query(settings.USERS_PAGE_LIMIT, ge=1, le=1000),
    store: DocumentStore = Depends(get_store),
    caller: dict = Depends(get_admin),
):
    users = await user_service.list_users(store, limit=limit)
    return user_view(q, SortState(sort, direction)).apply(users)


@router.get("/users/auth", response_model=list[AuthUser], summary="List accounts straight from the auth service")
async def list_auth_users(auth: AuthProvider = Depends(get_auth), caller: Optional[dict] = Depends(get_caller)):
    return await user_admin_service.list_auth_users(auth, caller)


@router.post("/users", status_code=status.HTTP_201_CREATED, summary="Create a user account")
async def create_user(
    body: CreateUserRequest,
    auth: AuthProvider = Depends(get_auth),
    store: DocumentStore = Depends(get_store),
    caller: Optional[dict] = Depends(get_caller),
):
    created = await user_admin_service.create_user(
        auth, store, caller, body.email, body.password, body.display_name, body.role
    )
    return {"success": True, "uid": created.uid, "role": created.role,
            "mirrored": created.mirrored, "message": "User created successfully"}


@router.put("/users/{uid}/role", summary="Change a user's role")
async def update_user_role(
    uid: str,
    body: RoleUpdateRequest,
    auth: AuthProvider = Depends(get_auth),
    store: DocumentStore = Depends(get_store),
    caller: Optional[dict] = Depends(get_caller),
):
    result = await user_admin_service.update_user_role(auth, store, caller, uid, body.role, body.is_admin)
    return {"success": True, "uid": result.uid, "role": result.role, "admin": result.admin,
            "mirrored": result.mirrored,
            "message": f"User role updated successfully to {result.role}"}


@router.post("/users/sync", summary="Mirror every auth account into the users collection")
async def sync_users(
    auth: AuthProvider = Depends(get_auth),
    store: DocumentStore = Depends(get_store),
    caller: Optional[dict] = Depends(get_caller),
):
    count = await user_admin_service.sync_users(auth, store, caller)
    return {"success": True, "count": count, "message": f"Synced {count} users"}
