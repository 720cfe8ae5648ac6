"""
Database engine and session management.

A single Database object is built by the application factory and handed to
everything that needs persistence; nothing here is created at import time.
"""

import logging
from typing import Generator, Dict, Any

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    def __init__(self, url: str, echo: bool = False):
        self.url = url
        engine_kwargs: Dict[str, Any] = {"echo": echo}

        if url.startswith("sqlite"):
            # Sessions are used from FastAPI's threadpool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_pre_ping"] = True

        self.engine: Engine = create_engine(url, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)

    def init_db(self) -> None:
        """Create all tables. Safe to call on every startup."""
        # Register models on Base.metadata
        from timesheet_tracker import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables ensured")

    def get_session(self) -> Session:
        return self.SessionLocal()

    def health(self) -> Dict[str, Any]:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {"status": "healthy", "dialect": self.engine.dialect.name}
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {"status": "unhealthy", "error": str(e)}

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding a session from the app's Database.

    Example:
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            ...
    """
    db = request.app.state.database.get_session()
    try:
        yield db
    finally:
        db.close()
