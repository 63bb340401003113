# logitrack/routers/health.py
"""
System health check endpoint.
Returns status of backend + document store.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from logitrack.clients import Clients
from logitrack.config import settings
from logitrack.routers.deps import get_clients
from logitrack.store.base import WAITLIST

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(clients: Clients = Depends(get_clients)):
    result = {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "backend": "ok",
        "store": "unknown",
        "store_backend": settings.STORE_BACKEND,
        "storage_backend": settings.STORAGE_BACKEND,
    }

    try:
        clients.store.list(WAITLIST, limit=1)
        result["store"] = "ok"
    except Exception as e:
        result["store"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
