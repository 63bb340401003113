# logitrack/routers/session.py
"""
Session cookies. Signing in verifies the ID token, promotes ADMIN_EMAILS
accounts to admin, and stores the tokens in http-only cookies.
"""

from fastapi import APIRouter, Depends, Response

from logitrack.auth.provider import AuthProvider
from logitrack.config import settings
from logitrack.routers.deps import REFRESH_COOKIE, SESSION_COOKIE, get_auth, get_store
from logitrack.schemas.user import SessionRequest
from logitrack.services.user_admin_service import bootstrap_admin
from logitrack.store.base import DocumentStore
from logitrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _set_cookie(response: Response, name: str, value: str):
    response.set_cookie(
        name,
        value,
        httponly=True,
        secure=settings.PUBLIC_BASE_URL.startswith("https"),
        samesite="lax",
        path="/",
    )


@router.post("/session", summary="Start a session from a Firebase ID token")
async def start_session(
    body: SessionRequest,
    response: Response,
    auth: AuthProvider = Depends(get_auth),
    store: DocumentStore = Depends(get_store),
):
    claims = auth.verify_id_token(body.token)
    promoted = await bootstrap_admin(auth, store, claims["uid"])
    _set_cookie(response, SESSION_COOKIE, body.token)
    _set_cookie(response, REFRESH_COOKIE, body.refresh_token)
    logger.info(f"[SESSION] Session started for {claims['uid']}")
    # Claim changes only show up in a refreshed ID token
    return {"uid": claims["uid"], "promoted": promoted, "refreshRequired": promoted}


@router.delete("/session", summary="End the session")
async def end_session(response: Response):
    response.delete_cookie(SESSION_COOKIE, path="/")
    response.delete_cookie(REFRESH_COOKIE, path="/")
    return {"success": True}
