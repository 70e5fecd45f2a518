"""Test configuration for the toydb catalog."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from toydb_meta import models
from toydb_meta.db import init_schema, make_engine
from toydb_meta.session import CatalogSession

CATALOG_MODELS = (
    models.Database,
    models.SchemaObject,
    models.DataTable,
    models.DataView,
    models.DataColumn,
    models.ViewDependency,
)


@pytest.fixture
def db_uri(tmp_path):
    """URI of a scratch SQLite metadata store."""
    return f"sqlite:///{tmp_path / 'catalog.sqlite'}"


@pytest.fixture
def db_engine(db_uri):
    """SQLAlchemy engine with foreign key enforcement."""
    engine = make_engine(db_uri)
    yield engine
    engine.dispose()


@pytest.fixture
def db_schema(db_engine):
    """SQLAlchemy ORM session maker with the catalog schema initialized."""
    init_schema(db_engine)
    return sessionmaker(db_engine)


@pytest.fixture
def db(db_schema):
    """SQLAlchemy ORM session (rolls back on cleanup)."""
    session = db_schema()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def catalog(db_schema):
    """A catalog session with no database selected."""
    return CatalogSession(db_schema)


@pytest.fixture
def row_counts(db_schema):
    """Returns a snapshot of the number of rows in every catalog table."""

    def snapshot() -> dict[str, int]:
        with db_schema() as session:
            return {
                model.__tablename__: session.scalar(
                    select(func.count()).select_from(model.__table__)
                )
                for model in CATALOG_MODELS
            }

    return snapshot
