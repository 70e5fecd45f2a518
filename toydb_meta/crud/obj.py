"""Catalog store operations for named schema objects (tables and views)."""

import logging
from collections import Counter
from typing import Iterable

from sqlalchemy import exc
from sqlalchemy.orm import Session, selectinload

from toydb_meta import models, schemas
from toydb_meta.crud.base import DatabaseScopedCRBase
from toydb_meta.enums import ObjectKind
from toydb_meta.exceptions import AlreadyExists, ConstraintViolation

log = logging.getLogger()


class CRSchemaObject(DatabaseScopedCRBase[models.SchemaObject]):
    def get(
        self, db: Session, *, name: str, database_id: int
    ) -> models.SchemaObject | None:
        """Retrieves a table or view by name within a database."""
        return (
            db.query(self.model)
            .filter(self.model.database_id == database_id, self.model.name == name)
            .first()
        )

    def get_any(self, db: Session, name: str) -> models.SchemaObject | None:
        """Retrieves the oldest object named `name` in *any* database."""
        return (
            db.query(self.model)
            .filter(self.model.name == name)
            .order_by(self.model.object_id)
            .first()
        )

    def get_table(
        self, db: Session, *, name: str, database_id: int, with_columns: bool = False
    ) -> models.DataTable | None:
        """Retrieves a table (joined to its object row) by name.

        Args:
            with_columns: Eagerly load the table's columns.
        """
        query = db.query(models.DataTable).filter(
            models.DataTable.database_id == database_id,
            models.DataTable.name == name,
        )
        if with_columns:
            query = query.options(selectinload(models.DataTable.columns))
        return query.first()

    def list_names(
        self, db: Session, *, database_id: int, kind: ObjectKind
    ) -> list[str]:
        """Lists the names of all objects of `kind` in a database, sorted by name."""
        rows = (
            db.query(self.model.name)
            .filter(self.model.database_id == database_id, self.model.kind == kind)
            .order_by(self.model.name)
            .all()
        )
        return [row.name for row in rows]

    def _check_name_free(self, db: Session, *, name: str, database_id: int) -> None:
        existing = self.get(db, name=name, database_id=database_id)
        if existing is not None:
            raise AlreadyExists(str(existing.kind), name)

    def create_table(
        self,
        db: Session,
        *,
        name: str,
        database_id: int,
        columns: list[schemas.ColumnDef],
    ) -> models.DataTable:
        """Creates a table (object row, table row and one row per column).

        Raises:
            AlreadyExists: If the name is taken or two columns share a name.
        """
        self._check_name_free(db, name=name, database_id=database_id)
        duplicates = [
            col_name
            for col_name, count in Counter(col.name for col in columns).items()
            if count > 1
        ]
        if duplicates:
            raise AlreadyExists("column", duplicates[0])

        table = models.DataTable(
            name=name,
            database_id=database_id,
            columns=[
                models.DataColumn(
                    name=col.name,
                    data_type=col.data_type,
                    is_primary_key=col.is_primary_key,
                )
                for col in columns
            ],
        )
        db.add(table)
        try:
            db.flush()
        except exc.IntegrityError:
            log.exception("Failed to create table '%s'.", name)
            raise AlreadyExists(str(ObjectKind.TABLE), name)

        log.debug("Created table '%s' with %d column(s).", name, len(columns))
        return table

    def create_view(
        self,
        db: Session,
        *,
        name: str,
        database_id: int,
        definition: str,
        dependency_ids: Iterable[int],
    ) -> models.DataView:
        """Creates a view and one dependency edge per distinct object it reads.

        Raises:
            AlreadyExists: If the name is taken.
        """
        self._check_name_free(db, name=name, database_id=database_id)

        view = models.DataView(
            name=name,
            database_id=database_id,
            definition=definition,
            dependencies=[
                models.ViewDependency(dependent_object_id=object_id)
                for object_id in dict.fromkeys(dependency_ids)
            ],
        )
        db.add(view)
        try:
            db.flush()
        except exc.IntegrityError:
            log.exception("Failed to create view '%s'.", name)
            raise AlreadyExists(str(ObjectKind.VIEW), name)

        log.debug(
            "Created view '%s' with %d dependency edge(s).",
            name,
            len(view.dependencies),
        )
        return view

    def delete(
        self, db: Session, *, name: str, database_id: int, kind: ObjectKind
    ) -> int:
        """Deletes the object matching (database, kind, name).

        The object's extension row, a table's columns and a view's dependency
        edges are removed by cascading foreign keys.

        Returns:
            The number of object rows deleted (0 or 1).

        Raises:
            ConstraintViolation: If a view still depends on the object.
        """
        try:
            deleted = (
                db.query(self.model)
                .filter(
                    self.model.database_id == database_id,
                    self.model.kind == kind,
                    self.model.name == name,
                )
                .delete(synchronize_session=False)
            )
        except exc.IntegrityError:
            log.exception("Failed to drop %s '%s'.", kind, name)
            raise ConstraintViolation(
                f"cannot drop {kind} `{name}`: a view depends on it"
            )
        return deleted


schema_object = CRSchemaObject(models.SchemaObject)
