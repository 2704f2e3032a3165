import os
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from core.config import DATABASE_URL

# Base class for all models
Base = declarative_base()


def make_engine(url: str = DATABASE_URL):
    """Create an engine; SQLite files get their parent folder created."""
    if url.startswith("sqlite:///"):
        folder = os.path.dirname(url[len("sqlite:///"):])
        if folder:
            os.makedirs(folder, exist_ok=True)
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url)


def make_session_factory(bind):
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


def init_db(bind) -> None:
    """Create every table registered on Base."""
    # Register models on Base.metadata
    import models.storage_entry  # noqa: F401

    Base.metadata.create_all(bind=bind)


# Create engine
engine = make_engine()

# Session factory
SessionLocal = make_session_factory(engine)


@contextmanager
def get_db_context(session_factory=SessionLocal):
    """
    Context manager for database sessions.
    Automatically closes session when done.

    Usage:
        with get_db_context() as db:
            entry = db.get(StorageEntry, key)
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
