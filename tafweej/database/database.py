"""
Database Configuration and Session Management

This module provides the SQLAlchemy store client: engine, session factory
and table initialization. One StoreClient is built by the application
lifespan and handed to the stores that need it.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Base class for ORM models
Base = declarative_base()


def utc_now() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Attach UTC to naive datetimes

    SQLite drops timezone information, so values read back from it
    come out naive even though they were written as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class StoreClient:
    """
    Row store client backed by SQLAlchemy

    Usage:
        client = StoreClient("sqlite:///./data/tafweej.db")
        client.init_db()

        with client.session() as db:
            db.query(CrowdDensityRecord).all()
    """

    def __init__(self, database_url: str, echo: bool = False):
        """
        Initialize the client

        Args:
            database_url: SQLAlchemy database URL
            echo: Log emitted SQL (debugging only)
        """
        self.database_url = database_url

        engine_kwargs = {"echo": echo}
        if database_url.startswith("sqlite"):
            # SQLite specific: sessions are used from FastAPI worker threads
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            db_path = make_url(database_url).database
            if not db_path or db_path == ":memory:":
                # Share the single in-memory database between sessions
                engine_kwargs["poolclass"] = StaticPool
            else:
                # Ensure data directory exists
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(database_url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Open a session and close it when the block exits"""
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def init_db(self):
        """
        Initialize database - create all tables

        Called on application startup to ensure all tables exist.
        """
        # Import all models to ensure they're registered with Base
        from tafweej.database import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

        print(f"[OK] Database initialized at: {self.database_url}")

    def dispose(self):
        """Release pooled connections"""
        self.engine.dispose()


def create_store_client(database_url: Optional[str]) -> Optional[StoreClient]:
    """
    Build a store client for the given URL

    Returns None when no URL is configured; the API then answers
    store-backed requests with a configuration error.
    """
    if not database_url:
        print("[WARN] DATABASE_URL not set - row store unavailable")
        return None

    client = StoreClient(database_url)
    client.init_db()
    return client
