"""SQL table definitions for the toydb catalog."""

from sqlalchemy import Boolean
from sqlalchemy import Enum as SqlEnum
from sqlalchemy import ForeignKey, Integer, MetaData, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from toydb_meta.enums import ObjectKind

TABLE_PREFIX = "catalog_"
metadata_obj = MetaData()


class Base(DeclarativeBase):
    metadata = metadata_obj


class Database(Base):
    __tablename__ = f"{TABLE_PREFIX}database"
    __table_args__ = {"sqlite_autoincrement": True}

    database_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    def __repr__(self):
        return f"Database(name={self.name})"


class SchemaObject(Base):
    """Unified identity of a named schema object (a table or a view).

    Tables and views are joined-table subclasses: each row here has exactly one
    matching row in `catalog_table` or `catalog_view` with the same `object_id`,
    and both rows are written by a single `db.add()`.
    """

    __tablename__ = f"{TABLE_PREFIX}object"
    # (database_id, name) is stricter than (database_id, kind, name): a table
    # and a view cannot share a name within one database either.
    __table_args__ = (
        UniqueConstraint("database_id", "name"),
        {"sqlite_autoincrement": True},
    )

    object_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    kind: Mapped[ObjectKind] = mapped_column(SqlEnum(ObjectKind), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    database_id: Mapped[int] = mapped_column(
        Integer, ForeignKey(f"{TABLE_PREFIX}database.database_id"), nullable=False
    )

    database: Mapped[Database] = relationship("Database")

    __mapper_args__ = {"polymorphic_on": "kind"}

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name}, database_id={self.database_id})"


class DataTable(SchemaObject):
    __tablename__ = f"{TABLE_PREFIX}table"

    object_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey(
            f"{TABLE_PREFIX}object.object_id", ondelete="CASCADE", onupdate="CASCADE"
        ),
        primary_key=True,
    )

    columns: Mapped[list["DataColumn"]] = relationship(
        "DataColumn",
        back_populates="table",
        order_by="DataColumn.column_id",
        passive_deletes=True,
    )

    __mapper_args__ = {"polymorphic_identity": ObjectKind.TABLE}


class DataView(SchemaObject):
    __tablename__ = f"{TABLE_PREFIX}view"

    object_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey(
            f"{TABLE_PREFIX}object.object_id", ondelete="CASCADE", onupdate="CASCADE"
        ),
        primary_key=True,
    )
    definition: Mapped[str] = mapped_column(Text, nullable=False)

    dependencies: Mapped[list["ViewDependency"]] = relationship(
        "ViewDependency",
        foreign_keys="ViewDependency.view_id",
        back_populates="view",
        passive_deletes=True,
    )

    __mapper_args__ = {"polymorphic_identity": ObjectKind.VIEW}


class DataColumn(Base):
    __tablename__ = f"{TABLE_PREFIX}column"
    __table_args__ = (
        UniqueConstraint("table_id", "name"),
        {"sqlite_autoincrement": True},
    )

    column_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    table_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey(
            f"{TABLE_PREFIX}table.object_id", ondelete="CASCADE", onupdate="CASCADE"
        ),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    data_type: Mapped[str] = mapped_column(Text, nullable=False)
    is_primary_key: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    table: Mapped[DataTable] = relationship("DataTable", back_populates="columns")

    def __repr__(self):
        return (
            f"DataColumn(name={self.name}, data_type={self.data_type}, "
            f"is_primary_key={self.is_primary_key})"
        )


class ViewDependency(Base):
    """An edge from a view to an object it reads from.

    Deleting the view removes the edge; deleting the object it points at is
    restricted while the edge exists.
    """

    __tablename__ = f"{TABLE_PREFIX}view_dependency"

    view_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey(
            f"{TABLE_PREFIX}view.object_id", ondelete="CASCADE", onupdate="CASCADE"
        ),
        primary_key=True,
    )
    dependent_object_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey(
            f"{TABLE_PREFIX}object.object_id", ondelete="RESTRICT", onupdate="CASCADE"
        ),
        primary_key=True,
    )

    view: Mapped[DataView] = relationship(
        "DataView", foreign_keys=[view_id], back_populates="dependencies"
    )
    dependent_object: Mapped[SchemaObject] = relationship(
        "SchemaObject", foreign_keys=[dependent_object_id]
    )
