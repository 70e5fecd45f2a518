"""Catalog store operations for user databases."""

import logging

from sqlalchemy import exc
from sqlalchemy.orm import Session

from toydb_meta import models
from toydb_meta.crud.base import CRBase
from toydb_meta.exceptions import AlreadyExists, ConstraintViolation

log = logging.getLogger()


class CRDatabase(CRBase[models.Database]):
    def create(self, db: Session, *, name: str) -> models.Database:
        """Creates a new (empty) database."""
        database = models.Database(name=name)
        db.add(database)
        try:
            db.flush()
        except exc.IntegrityError:
            log.exception("Failed to create database '%s'.", name)
            raise AlreadyExists("database", name)
        log.debug("Created database '%s' (id=%d).", name, database.database_id)
        return database

    def get(self, db: Session, name: str) -> models.Database | None:
        return db.query(self.model).filter(self.model.name == name).first()

    def get_by_id(self, db: Session, database_id: int) -> models.Database | None:
        return db.get(self.model, database_id)

    def delete(self, db: Session, *, database: models.Database) -> None:
        """Deletes a database along with every table and view in it.

        Objects go newest first: a view is always created after everything it
        reads from, so its dependency edges are gone before their targets are
        deleted. A view in *another* database that still reads from one of
        these objects makes the delete fail.

        Raises:
            ConstraintViolation: If an object is still referenced from outside.
        """
        objects = (
            db.query(models.SchemaObject)
            .filter(models.SchemaObject.database_id == database.database_id)
            .order_by(models.SchemaObject.object_id.desc())
            .all()
        )
        for obj in objects:
            try:
                db.query(models.SchemaObject).filter(
                    models.SchemaObject.object_id == obj.object_id
                ).delete(synchronize_session=False)
            except exc.IntegrityError:
                log.exception("Failed to drop %s '%s'.", obj.kind, obj.name)
                raise ConstraintViolation(
                    f"cannot drop database `{database.name}`: {obj.kind} "
                    f"`{obj.name}` is referenced by a view in another database"
                )

        db.query(self.model).filter(
            self.model.database_id == database.database_id
        ).delete(synchronize_session=False)
        log.debug("Dropped database '%s' (%d objects).", database.name, len(objects))


database = CRDatabase(models.Database)
