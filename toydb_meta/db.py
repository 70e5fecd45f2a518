"""Metadata store connections."""

import logging
import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from toydb_meta.models import Base

log = logging.getLogger()

DEFAULT_DATABASE_URI = "sqlite:///./toydb.sqlite"

TOYDB_SQL_ECHO = bool(os.environ.get("TOYDB_SQL_ECHO", False))

db_url = os.getenv("TOYDB_DATABASE_URI", DEFAULT_DATABASE_URI)
if os.getenv("TOYDB_RUN_TESTS"):
    db_url = os.getenv("TOYDB_TEST_DATABASE_URI", db_url)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE clauses unless this is set per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: str | None = None, echo: bool = TOYDB_SQL_ECHO) -> Engine:
    """Creates an engine for the metadata store.

    Cascade and restrict rules live in foreign keys, so SQLite connections get
    foreign key enforcement switched on as they are opened.
    """
    engine = create_engine(url or db_url, echo=echo)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def init_schema(engine: Engine) -> None:
    """Creates all catalog tables that do not exist yet (idempotent)."""
    Base.metadata.create_all(engine)
    log.debug("Catalog schema initialized on %s", engine.url)


def reset_schema(engine: Engine) -> None:
    """Drops and recreates all catalog tables (dangerous)."""
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
