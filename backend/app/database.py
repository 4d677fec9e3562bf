"""SQLAlchemy database engine, session factory, and connection management.

Provides the shared engine, session factory, and declarative base for all
ORM models. SQLite connections enable WAL mode and foreign keys via an
event listener so that ``ON DELETE CASCADE`` is honoured.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from app.config import get_settings


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""
    pass


def enable_sqlite_pragmas(engine: Engine, wal: bool = True) -> None:
    """Turn on foreign keys (and WAL for file databases) for every connection."""
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        if wal:
            cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.close()


def _get_engine():
    settings = get_settings()
    connect_args = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(
        settings.DATABASE_URL,
        connect_args=connect_args,
        echo=settings.DEBUG,
    )
    if settings.DATABASE_URL.startswith("sqlite"):
        enable_sqlite_pragmas(engine, wal=settings.sqlite_path is not None)
    return engine


engine = _get_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """FastAPI dependency that yields a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Create all tables from ORM metadata (dev convenience)."""
    import app.models  # noqa: F401  (registers mappers)
    Base.metadata.create_all(bind=engine)
