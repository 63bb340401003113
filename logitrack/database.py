# logitrack/database.py
"""
Database connection, session management, and table creation.
Backs the SQL document store: every collection lives in the `documents`
table as JSON field-bags, with plate-style uniqueness in `unique_keys`.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from logitrack.config import settings


def make_engine(url: str):
    """SQLite gets a thread-safe connect arg, everything else a sized pool."""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False}, echo=False)
    return create_engine(
        url,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        pool_size=10,
        max_overflow=20,
        echo=False,                  # Set True to log all SQL queries (debug only)
    )


engine = make_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def create_tables(bind=None):
    """
    Creates all DB tables. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from logitrack.models.document import Document      # noqa
    from logitrack.models.unique_key import UniqueKey   # noqa

    Base.metadata.create_all(bind=bind or engine)
