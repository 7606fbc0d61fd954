"""Database engine, session management and store error translation."""

import logging
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DisconnectionError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from gatekeeper.core.config import Settings, settings

logger = logging.getLogger(__name__)

# Errors that mean the store is unreachable or too slow; rendered as 503.
STORE_UNAVAILABLE_ERRORS = (OperationalError, DisconnectionError, PoolTimeoutError)


def _engine_options(settings: Settings) -> dict[str, Any]:
    """Bound connect, statement and pool checkout time for the configured backend."""
    url = settings.DATABASE_URL
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False, "timeout": settings.DB_TIMEOUT_SEC}}
    timeout_ms = int(settings.DB_TIMEOUT_SEC * 1000)
    return {
        "connect_args": {
            "connect_timeout": max(1, int(settings.DB_TIMEOUT_SEC)),
            "options": f"-c statement_timeout={timeout_ms}",
        },
        "pool_timeout": settings.DB_POOL_TIMEOUT_SEC,
    }


def build_engine(settings: Settings) -> Engine:
    """Create an engine for settings.DATABASE_URL with bounded timeouts."""
    safe_url = settings.DATABASE_URL.split("@")[-1]
    logger.info("Configuring database engine: %s", safe_url)
    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        echo=settings.DEBUG,
        **_engine_options(settings),
    )


engine = build_engine(settings)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except STORE_UNAVAILABLE_ERRORS:
        logger.warning("Database connectivity check failed", exc_info=True)
        return False
