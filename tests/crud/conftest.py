"""Fixtures for catalog store (CRUD) tests."""

import pytest

from toydb_meta import crud, schemas


@pytest.fixture
def db_with_database(db):
    """SQLAlchemy ORM session with one user database."""
    database = crud.database.create(db, name="shop")
    yield db, database


@pytest.fixture
def db_with_table(db_with_database):
    """SQLAlchemy ORM session with a `users` table in the `shop` database."""
    db, database = db_with_database
    table = crud.schema_object.create_table(
        db,
        name="users",
        database_id=database.database_id,
        columns=[
            schemas.ColumnDef(name="id", data_type="INT", is_primary_key=True),
            schemas.ColumnDef(name="name", data_type="TEXT"),
        ],
    )
    yield db, database, table
