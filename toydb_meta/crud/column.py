"""Catalog store operations for table columns."""

import logging

from sqlalchemy import exc
from sqlalchemy.orm import Session

from toydb_meta import models, schemas
from toydb_meta.crud.base import CRBase
from toydb_meta.exceptions import AlreadyExists

log = logging.getLogger()


class CRColumn(CRBase[models.DataColumn]):
    def create(
        self, db: Session, *, table_id: int, obj_in: schemas.ColumnDef
    ) -> models.DataColumn:
        """Adds a column to an existing table.

        Raises:
            AlreadyExists: If the table already has a column with that name.
        """
        col = models.DataColumn(
            table_id=table_id,
            name=obj_in.name,
            data_type=obj_in.data_type,
            is_primary_key=obj_in.is_primary_key,
        )
        db.add(col)
        try:
            db.flush()
        except exc.IntegrityError:
            log.exception("Failed to add column '%s'.", obj_in.name)
            raise AlreadyExists("column", obj_in.name)
        return col

    def for_table(self, db: Session, table_id: int) -> list[models.DataColumn]:
        """Lists a table's columns in creation order."""
        return (
            db.query(self.model)
            .filter(self.model.table_id == table_id)
            .order_by(self.model.column_id)
            .all()
        )

    def delete(self, db: Session, *, column_id: int) -> int:
        """Deletes a column by id; returns the number of rows deleted."""
        return (
            db.query(self.model)
            .filter(self.model.column_id == column_id)
            .delete(synchronize_session=False)
        )


column = CRColumn(models.DataColumn)
