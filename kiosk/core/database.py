"""Database configuration and session management.

The kiosk keeps its roster in a single ``attendee`` table. SQLite is the
default backend, but any SQLAlchemy URL works, e.g. a hosted Postgres.

SQLite Configuration Choices:
    - **WAL (Write-Ahead Logging)**: Allows concurrent readers while writing.
      Several kiosks search the roster while another one checks someone in;
      without WAL every check-in would block all searches.

    - **Foreign Keys**: Disabled by default in SQLite. Enabled so any future
      related tables get referential integrity for free.

    - **check_same_thread=False**: Required for FastAPI. Sessions may be used
      from a different worker thread than the one that opened the connection.
"""

from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine

from kiosk.core.config import settings


def is_sqlite_url(url: str) -> bool:
    """Return True if the database URL points at SQLite."""
    return url.startswith("sqlite")


def build_engine(url: str, *, echo: bool = False):
    """Create an engine for ``url`` with the SQLite pragmas applied."""
    connect_args = {"check_same_thread": False} if is_sqlite_url(url) else {}
    new_engine = create_engine(url, connect_args=connect_args, echo=echo)

    if is_sqlite_url(url):
        sa_event.listen(new_engine, "connect", set_sqlite_pragma)

    return new_engine


def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite pragmas on each new connection.

    These settings are connection-level, not database-level, so they must
    be set each time a new connection is established from the pool.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = build_engine(settings.database_url, echo=settings.debug)


def create_db_and_tables():
    """Create all database tables."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session
