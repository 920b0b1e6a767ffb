# carwash/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy; the only table is the key-value slot store that backs the
persistence gateway. Models are imported in create_tables() so one call
creates everything.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from carwash.config import settings


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # Sync endpoints run on a thread pool
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,   # Auto-reconnect if DB connection drops
        "pool_size": 5,
        "max_overflow": 10,
    }


engine = create_engine(
    settings.DATABASE_URL,
    echo=False,                  # Set True to log all SQL queries (debug only)
    **_engine_kwargs(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """
    Creates all DB tables. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from carwash.models.storage_slot import StorageSlot   # noqa

    Base.metadata.create_all(bind=bind or engine)
