"""Database engine, session factory and unit-of-work scope.

The engine is created lazily on first use (or explicitly through
``init_engine``) and torn down by ``dispose_engine``. Request handlers get a
session from ``get_db`` and hand it to the services, which wrap every
business operation in ``transaction``.
"""
import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()

_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_engine(database_url: Optional[str] = None, **engine_kwargs) -> Engine:
    """Create the engine and session factory, replacing any previous ones."""
    global _engine, _SessionFactory

    url = database_url or settings.DATABASE_URL
    if _engine is not None:
        dispose_engine()

    if url.startswith("sqlite"):
        engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
    _engine = create_engine(url, **engine_kwargs)
    if url.startswith("sqlite"):
        event.listen(_engine, "connect", _enable_sqlite_foreign_keys)

    _SessionFactory = sessionmaker(bind=_engine, autoflush=False, expire_on_commit=False)
    logger.info(f"Database engine initialized ({_engine.dialect.name})")
    return _engine


def get_engine() -> Engine:
    """Return the current engine, initializing it from settings if needed."""
    if _engine is None:
        init_engine()
    return _engine


def get_session_factory() -> sessionmaker:
    if _SessionFactory is None:
        init_engine()
    return _SessionFactory


def dispose_engine() -> None:
    """Close every pooled connection and forget the engine."""
    global _engine, _SessionFactory
    if _engine is not None:
        _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None
    _SessionFactory = None


def create_tables() -> None:
    # Register every model on Base.metadata
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency - one session per request."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Generator[Session, None, None]:
    """Commit everything done inside the block, or nothing at all."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
