"""Catalog session: applies parsed DDL statements to the catalog store."""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from sqlalchemy import exc
from sqlalchemy.orm import Session, sessionmaker

from toydb_meta import crud, schemas
from toydb_meta.enums import AlterOperationKind, ObjectKind, StatementKind
from toydb_meta.exceptions import (
    ConstraintViolation,
    NoDatabaseSelected,
    NotFound,
    StoreUnavailable,
    Unsupported,
)

log = logging.getLogger()

PRIMARY_KEY_MARKER = "PRI"

Row = tuple[str, ...]
RelationVisitor = Callable[[schemas.Query], Iterable[str]]


@dataclass(frozen=True)
class CurrentDatabase:
    """Cached copy of the selected `Database` row."""

    database_id: int
    name: str


class CatalogSession:
    """One caller's view of the catalog.

    A session owns only its current-database pointer; any number of sessions
    may share one store. Statements are handled one at a time, and each runs
    in its own transaction: either all of its changes commit or none do.
    """

    def __init__(
        self,
        store: sessionmaker,
        *,
        relation_visitor: RelationVisitor = schemas.visit_relations,
    ):
        """
        Args:
            store: Session factory bound to the metadata store.
            relation_visitor: Lists the object names a view's query reads from.
        """
        self.store = store
        self.relation_visitor = relation_visitor
        self.current_database: Optional[CurrentDatabase] = None

    def current_database_name(self) -> str | None:
        return None if self.current_database is None else self.current_database.name

    def handle(self, stmt) -> list[Row] | None:
        """Applies one parsed statement.

        Returns:
            Display rows for `SHOW TABLES` and `EXPLAIN TABLE`; `None` otherwise.

        Raises:
            CatalogError: A typed failure. The statement's transaction has been
                rolled back and the session is still usable.
        """
        kind = _statement_kind(stmt)
        try:
            if kind == StatementKind.CREATE_DATABASE:
                self.create_database(stmt.name)
            elif kind == StatementKind.USE:
                self.use_database(stmt.name)
            elif kind == StatementKind.DROP_DATABASE:
                self.drop_database(stmt.name)
            elif kind == StatementKind.CREATE_TABLE:
                self.create_table(stmt.name, stmt.columns)
            elif kind == StatementKind.DROP:
                self.drop_objects(stmt.object_kind, stmt.names)
            elif kind == StatementKind.ALTER_TABLE:
                self.alter_table(stmt.name, stmt.operations)
            elif kind == StatementKind.SHOW_TABLES:
                return self.show_tables()
            elif kind == StatementKind.EXPLAIN_TABLE:
                return self.explain_table(stmt.name)
            elif kind == StatementKind.CREATE_VIEW:
                self.create_view(stmt.name, stmt.query)
            else:
                raise Unsupported(f"statement {kind.value}")
        except exc.IntegrityError as ex:
            log.exception("Integrity error while handling %s.", kind.value)
            raise ConstraintViolation(str(ex.orig)) from ex
        except exc.DBAPIError as ex:
            log.exception("Metadata store error while handling %s.", kind.value)
            raise StoreUnavailable(str(ex.orig)) from ex
        except exc.SQLAlchemyError as ex:
            # Pool checkout timeouts and the like never reach the DBAPI.
            log.exception("Metadata store error while handling %s.", kind.value)
            raise StoreUnavailable(str(ex)) from ex
        return None

    def _selected_database(self, db: Session) -> CurrentDatabase:
        """Returns the current database, checking that it still exists."""
        if self.current_database is None:
            raise NoDatabaseSelected()
        if crud.database.get_by_id(db, self.current_database.database_id) is None:
            raise NotFound("database", self.current_database.name)
        return self.current_database

    def create_database(self, name: str) -> None:
        with self.store.begin() as db:
            database = crud.database.create(db, name=name)
            created = CurrentDatabase(database.database_id, database.name)

        if self.current_database is None:
            self.current_database = created

    def use_database(self, name: str) -> None:
        with self.store.begin() as db:
            database = crud.database.get(db, name)
            if database is None:
                raise NotFound("database", name)
            selected = CurrentDatabase(database.database_id, database.name)

        self.current_database = selected

    def drop_database(self, name: str) -> None:
        with self.store.begin() as db:
            database = crud.database.get(db, name)
            if database is None:
                raise NotFound("database", name)
            dropped_id = database.database_id
            crud.database.delete(db, database=database)

        if (
            self.current_database is not None
            and self.current_database.database_id == dropped_id
        ):
            self.current_database = None

    def create_table(self, name: str, columns: list[schemas.ColumnDef]) -> None:
        if self.current_database is None:
            raise NoDatabaseSelected()

        with self.store.begin() as db:
            database = self._selected_database(db)
            crud.schema_object.create_table(
                db, name=name, database_id=database.database_id, columns=columns
            )

    def drop_objects(self, kind: ObjectKind, names: list[str]) -> None:
        """Drops tables or views by name; all of them or none of them."""
        if self.current_database is None:
            raise NoDatabaseSelected()

        with self.store.begin() as db:
            database = self._selected_database(db)
            for name in names:
                deleted = crud.schema_object.delete(
                    db, name=name, database_id=database.database_id, kind=kind
                )
                if deleted == 0:
                    raise NotFound(str(kind), name)

    def alter_table(self, name: str, operations: list) -> None:
        if self.current_database is None:
            raise NoDatabaseSelected()

        with self.store.begin() as db:
            database = self._selected_database(db)
            table = crud.schema_object.get_table(
                db, name=name, database_id=database.database_id, with_columns=True
            )
            if table is None:
                raise NotFound("table", name)

            # Columns as of the start of the statement; columns added by an
            # earlier operation are not visible to a later DROP COLUMN.
            column_ids = {col.name: col.column_id for col in table.columns}

            for op in operations:
                op_kind = getattr(op, "op", None)
                if op_kind == AlterOperationKind.ADD_COLUMN:
                    crud.column.create(
                        db, table_id=table.object_id, obj_in=op.column_def
                    )
                elif op_kind == AlterOperationKind.DROP_COLUMN:
                    if op.name not in column_ids:
                        raise NotFound("column", op.name)
                    crud.column.delete(db, column_id=column_ids[op.name])
                else:
                    raise Unsupported(
                        f"ALTER TABLE operation {op_kind or type(op).__name__}"
                    )

    def show_tables(self) -> list[Row]:
        if self.current_database is None:
            raise NoDatabaseSelected()

        with self.store.begin() as db:
            database = self._selected_database(db)
            names = crud.schema_object.list_names(
                db, database_id=database.database_id, kind=ObjectKind.TABLE
            )
        return [(name,) for name in names]

    def explain_table(self, name: str) -> list[Row]:
        if self.current_database is None:
            raise NoDatabaseSelected()

        with self.store.begin() as db:
            database = self._selected_database(db)
            table = crud.schema_object.get_table(
                db, name=name, database_id=database.database_id
            )
            if table is None:
                raise NotFound("table", name)

            return [
                (
                    col.name,
                    col.data_type,
                    PRIMARY_KEY_MARKER if col.is_primary_key else "",
                )
                for col in crud.column.for_table(db, table.object_id)
            ]

    def create_view(self, name: str, query: schemas.Query) -> None:
        if self.current_database is None:
            raise NoDatabaseSelected()

        references = list(self.relation_visitor(query))

        with self.store.begin() as db:
            database = self._selected_database(db)

            # References resolve across the whole store, not just the
            # current database.
            dependency_ids = []
            for reference in references:
                obj = crud.schema_object.get_any(db, reference)
                if obj is None:
                    raise NotFound("referenced object", reference)
                dependency_ids.append(obj.object_id)

            crud.schema_object.create_view(
                db,
                name=name,
                database_id=database.database_id,
                definition=str(query),
                dependency_ids=dependency_ids,
            )


def _statement_kind(stmt) -> StatementKind:
    try:
        return StatementKind(getattr(stmt, "kind", None))
    except ValueError:
        raise Unsupported(f"statement {type(stmt).__name__}")
