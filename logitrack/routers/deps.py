# logitrack/routers/deps.py
"""
Request dependencies: client handles from app.state and the calling user.

A caller is identified by a Firebase ID token, sent either as
`Authorization: Bearer <token>` or in the `firebase_token` session cookie.
"""

from typing import Optional

from fastapi import Cookie, Depends, Header, Request

from logitrack.auth.provider import AuthProvider
from logitrack.clients import Clients
from logitrack.services.user_admin_service import require_admin
from logitrack.storage.provider import StorageProvider
from logitrack.store.base import DocumentStore

SESSION_COOKIE = "firebase_token"
REFRESH_COOKIE = "firebase_refresh_token"


def get_clients(request: Request) -> Clients:
    return request.app.state.clients


def get_store(clients: Clients = Depends(get_clients)) -> DocumentStore:
    return clients.store


def get_auth(clients: Clients = Depends(get_clients)) -> AuthProvider:
    return clients.auth


def get_storage(clients: Clients = Depends(get_clients)) -> StorageProvider:
    return clients.storage


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def get_caller(
    authorization: Optional[str] = Header(None),
    firebase_token: Optional[str] = Cookie(None),
    auth: AuthProvider = Depends(get_auth),
) -> Optional[dict]:
    """Decoded token claims of the caller, or None when no token was sent."""
    token = bearer_token(authorization) or firebase_token
    if not token:
        return None
    return auth.verify_id_token(token)


def get_admin(caller: Optional[dict] = Depends(get_caller)) -> dict:
    require_admin(caller)
    return caller
