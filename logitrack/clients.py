# logitrack/clients.py
"""
Client handles (store, auth, storage), built once at startup and passed
explicitly to services. The FastAPI app keeps them on app.state.clients.
"""

from dataclasses import dataclass

import firebase_admin
from firebase_admin import credentials, firestore

from logitrack.auth.firebase_provider import FirebaseAuthProvider
from logitrack.auth.provider import AuthProvider
from logitrack.config import Settings
from logitrack.database import SessionLocal, create_tables
from logitrack.storage.firebase_provider import FirebaseStorageProvider
from logitrack.storage.local_provider import LocalStorageProvider
from logitrack.storage.provider import StorageProvider
from logitrack.store.base import DocumentStore
from logitrack.store.firestore_store import FirestoreDocumentStore
from logitrack.store.sql_store import SqlDocumentStore
from logitrack.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class Clients:
    store: DocumentStore
    auth: AuthProvider
    storage: StorageProvider


def init_firebase(settings: Settings) -> firebase_admin.App:
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass
    if settings.FIREBASE_CREDENTIALS_FILE:
        cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS_FILE)
    else:
        cred = credentials.ApplicationDefault()
    app = firebase_admin.initialize_app(cred, {
        "projectId": settings.FIREBASE_PROJECT_ID,
        "storageBucket": settings.storage_bucket,
    })
    logger.info(f"🔥 Firebase initialized for project {settings.FIREBASE_PROJECT_ID}")
    return app


def build_clients(settings: Settings) -> Clients:
    app = init_firebase(settings)

    if settings.STORE_BACKEND == "firestore":
        store = FirestoreDocumentStore(firestore.client(app))
    elif settings.STORE_BACKEND == "sql":
        create_tables()
        store = SqlDocumentStore(SessionLocal)
    else:
        raise ValueError(f"Unknown STORE_BACKEND '{settings.STORE_BACKEND}' (expected sql or firestore)")

    if settings.STORAGE_BACKEND == "firebase":
        storage = FirebaseStorageProvider(settings.storage_bucket, app=app)
    elif settings.STORAGE_BACKEND == "local":
        storage = LocalStorageProvider(settings.LOCAL_STORAGE_DIR, settings.PUBLIC_BASE_URL)
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND '{settings.STORAGE_BACKEND}' (expected local or firebase)")

    logger.info(f"📦 Store: {settings.STORE_BACKEND} | Storage: {settings.STORAGE_BACKEND}")
    return Clients(store=store, auth=FirebaseAuthProvider(app), storage=storage)
