"""Database configuration and session management for SQLite.

This module configures the SQLite database engine with the settings the
registration services depend on: WAL mode for concurrent access, foreign key
enforcement, and a busy timeout so that concurrent writers queue up instead
of failing.

SQLite Configuration Choices:
    - **WAL (Write-Ahead Logging)**: Readers never block on the writer. Team
      joins, roster inserts and inbox deliveries arrive from many requests at
      once, and only the short conditional writes need to serialize.

    - **Foreign Keys**: Disabled by default in SQLite. Roster entries, scan
      edges, team memberships and inbox entries all reference attendees and
      events, so the references must be enforced.

    - **Busy timeout**: A writer waiting on another writer's lock retries for
      up to ``database_busy_timeout_seconds`` before raising.

    - **check_same_thread=False**: Required for FastAPI, whose dependency
      injection may pass sessions between threads.
"""

from sqlalchemy import event as sa_event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings


def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite pragmas on each new connection.

    These settings are connection-level, not database-level, so they must
    be set each time a new connection is established from the pool.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def configure_engine(engine: Engine) -> Engine:
    """Attach the SQLite connection pragmas to an engine."""
    if engine.dialect.name == "sqlite":
        sa_event.listen(engine, "connect", _set_sqlite_pragma)
    return engine


def create_db_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine for ``database_url`` with the SQLite pragmas applied."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {
            "check_same_thread": False,
            "timeout": settings.database_busy_timeout_seconds,
        }
    return configure_engine(
        create_engine(database_url, connect_args=connect_args, **kwargs)
    )


engine = create_db_engine(
    settings.database_url,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)


def create_db_and_tables():
    """Create all database tables."""
    # Table models must be imported so they register on the metadata
    import app.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session
