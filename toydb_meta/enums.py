"""Enumerations common between database models and parsed statements."""
from enum import Enum


class ObjectKind(str, Enum):
    """Kind of a named schema object within a database."""

    TABLE = "table"
    VIEW = "view"

    def __str__(self):
        return self.value


class StatementKind(str, Enum):
    """Kind of a parsed DDL statement."""

    CREATE_DATABASE = "create_database"
    USE = "use"
    DROP_DATABASE = "drop_database"
    CREATE_TABLE = "create_table"
    DROP = "drop"
    ALTER_TABLE = "alter_table"
    SHOW_TABLES = "show_tables"
    EXPLAIN_TABLE = "explain_table"
    CREATE_VIEW = "create_view"


class AlterOperationKind(str, Enum):
    """Kind of a single `ALTER TABLE` operation."""

    ADD_COLUMN = "add_column"
    DROP_COLUMN = "drop_column"
    RENAME_COLUMN = "rename_column"
