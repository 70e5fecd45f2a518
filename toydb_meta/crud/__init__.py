"""Internal catalog store operations."""
from toydb_meta.crud.column import column
from toydb_meta.crud.database import database
from toydb_meta.crud.obj import schema_object
