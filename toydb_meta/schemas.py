"""Parsed statement shapes consumed by the catalog session.

These are produced by the SQL parser (an external collaborator); the catalog
never parses SQL text itself. Every statement carries a `kind` tag drawn from
`StatementKind`.
"""

from typing import Annotated, Iterator, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from toydb_meta.enums import AlterOperationKind, ObjectKind, StatementKind

# Identifier value as handed over by the parser, already unquoted
# (`"order items"` arrives as `order items`).
Identifier = Annotated[str, Field(min_length=1)]
# Rendered data type, e.g. `INT` or `VARCHAR(20)`.
DataTypeStr = Annotated[str, Field(min_length=1)]


class ColumnDef(BaseModel):
    """A column definition from `CREATE TABLE` or `ALTER TABLE ... ADD COLUMN`."""

    name: Identifier
    data_type: DataTypeStr
    is_primary_key: bool = False


class Query(BaseModel):
    """A structured query body.

    `text` is the canonical rendering of the query; `relations` are the object
    names it reads from directly, in the order they appear, and `subqueries`
    are nested query bodies (derived tables, `IN (SELECT ...)`, CTEs).
    """

    text: str = Field(min_length=1)
    relations: list[Identifier] = []
    subqueries: list["Query"] = []

    def __str__(self):
        return self.text


def visit_relations(query: Query) -> Iterator[str]:
    """Yields every relation name `query` reads from, depth-first, in encounter
    order. Names are not deduplicated."""
    yield from query.relations
    for subquery in query.subqueries:
        yield from visit_relations(subquery)


class AddColumn(BaseModel):
    op: Literal["add_column"] = AlterOperationKind.ADD_COLUMN.value
    column_def: ColumnDef


class DropColumn(BaseModel):
    op: Literal["drop_column"] = AlterOperationKind.DROP_COLUMN.value
    name: Identifier


class RenameColumn(BaseModel):
    op: Literal["rename_column"] = AlterOperationKind.RENAME_COLUMN.value
    old_name: Identifier
    new_name: Identifier


AlterTableOperation = Annotated[
    Union[AddColumn, DropColumn, RenameColumn], Field(discriminator="op")
]


class CreateDatabase(BaseModel):
    kind: Literal["create_database"] = StatementKind.CREATE_DATABASE.value
    name: Identifier


class Use(BaseModel):
    kind: Literal["use"] = StatementKind.USE.value
    name: Identifier


class DropDatabase(BaseModel):
    kind: Literal["drop_database"] = StatementKind.DROP_DATABASE.value
    name: Identifier


class CreateTable(BaseModel):
    kind: Literal["create_table"] = StatementKind.CREATE_TABLE.value
    name: Identifier
    columns: list[ColumnDef] = []


class Drop(BaseModel):
    """`DROP TABLE a, b, ...` or `DROP VIEW a, b, ...`."""

    kind: Literal["drop"] = StatementKind.DROP.value
    object_kind: ObjectKind
    names: list[Identifier] = Field(min_length=1)


class AlterTable(BaseModel):
    kind: Literal["alter_table"] = StatementKind.ALTER_TABLE.value
    name: Identifier
    operations: list[AlterTableOperation] = Field(min_length=1)


class ShowTables(BaseModel):
    kind: Literal["show_tables"] = StatementKind.SHOW_TABLES.value


class ExplainTable(BaseModel):
    kind: Literal["explain_table"] = StatementKind.EXPLAIN_TABLE.value
    name: Identifier


class CreateView(BaseModel):
    kind: Literal["create_view"] = StatementKind.CREATE_VIEW.value
    name: Identifier
    query: Query


Statement = Annotated[
    Union[
        CreateDatabase,
        Use,
        DropDatabase,
        CreateTable,
        Drop,
        AlterTable,
        ShowTables,
        ExplainTable,
        CreateView,
    ],
    Field(discriminator="kind"),
]

_statement_adapter = TypeAdapter(Statement)


def parse_statement(data: dict) -> BaseModel:
    """Validates a JSON-like mapping (e.g. `{"kind": "use", "name": "shop"}`)
    into the matching statement model.

    Raises:
        pydantic.ValidationError: If `data` is not a recognized statement.
    """
    return _statement_adapter.validate_python(data)


def parse_statement_json(raw: str | bytes) -> BaseModel:
    """Like `parse_statement`, but from a JSON document."""
    return _statement_adapter.validate_json(raw)
