# logitrack/main.py
"""
FastAPI application entry point.
Includes request timing, error handlers for the logitrack error taxonomy, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from logitrack.routers import files, health, session, subcontractors, trucks, users, waitlist
from logitrack.clients import build_clients
from logitrack.config import settings
from logitrack.errors import (
    AuthorizationError,
    DocumentNotFoundError,
    DuplicateKeyError,
    FormValidationError,
    InvalidArgumentError,
)
from logitrack.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="LogiTrack Fleet Admin API",
    description="Trucks, subcontractors, users and waitlist for the LogiTrack admin console.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (session cookies need explicit origins in production) ───────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Error Handlers ───────────────────────────────────────────────────────────
@app.exception_handler(FormValidationError)
async def form_validation_handler(request: Request, exc: FormValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Validation failed", "errors": exc.errors},
    )


@app.exception_handler(DuplicateKeyError)
async def duplicate_key_handler(request: Request, exc: DuplicateKeyError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc), "field": exc.field, "value": exc.value},
    )


@app.exception_handler(DocumentNotFoundError)
async def not_found_handler(request: Request, exc: DocumentNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(AuthorizationError)
async def authorization_handler(request: Request, exc: AuthorizationError):
    code = status.HTTP_401_UNAUTHORIZED if exc.code == "unauthenticated" else status.HTTP_403_FORBIDDEN
    return JSONResponse(status_code=code, content={"detail": str(exc), "code": exc.code})


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(trucks.router,         prefix="/api/v1", tags=["🚚 Trucks"])
app.include_router(subcontractors.router, prefix="/api/v1", tags=["🤝 Subcontractors"])
app.include_router(users.router,          prefix="/api/v1", tags=["👤 Users"])
app.include_router(waitlist.router,       prefix="/api/v1", tags=["📝 Waitlist"])
app.include_router(session.router,        prefix="/api/v1", tags=["🔑 Session"])
app.include_router(files.router,          prefix="/api/v1", tags=["📁 Files"])
app.include_router(health.router,         prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 LogiTrack Backend starting up...")
    app.state.clients = build_clients(settings)
    logger.info("✅ Clients ready")
    if settings.admin_email_list:
        logger.info(f"👑 Admin bootstrap emails: {settings.admin_email_list}")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 LogiTrack Backend shutting down...")
