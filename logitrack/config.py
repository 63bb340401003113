# logitrack/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Document Store ────────────────────────────────────────────────────
    STORE_BACKEND: str = "sql"                # sql | firestore
    DATABASE_URL: str = "sqlite:///./logitrack.db"

    # ── Firebase ──────────────────────────────────────────────────────────
    FIREBASE_PROJECT_ID: str = "logi-track-wrt-dev"
    FIREBASE_CREDENTIALS_FILE: Optional[str] = None   # service account JSON
    FIREBASE_STORAGE_BUCKET: Optional[str] = None     # defaults to <project>.firebasestorage.app

    # ── File Storage ──────────────────────────────────────────────────────
    STORAGE_BACKEND: str = "local"            # local | firebase
    LOCAL_STORAGE_DIR: str = "var/storage"
    PUBLIC_BASE_URL: str = "http://localhost:8080"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 8080

    # ── Access ────────────────────────────────────────────────────────────
    ADMIN_EMAILS: str = ""                    # comma separated, promoted to admin on sign-in
    USERS_PAGE_LIMIT: int = 50
    AUTH_LIST_MAX_RESULTS: int = 1000

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    @property
    def admin_email_list(self) -> list[str]:
        return [email.strip() for email in self.ADMIN_EMAILS.split(",") if email.strip()]

    @property
    def storage_bucket(self) -> str:
        return self.FIREBASE_STORAGE_BUCKET or f"{self.FIREBASE_PROJECT_ID}.firebasestorage.app"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
