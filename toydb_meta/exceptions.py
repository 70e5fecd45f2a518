"""Global exceptions (largely related to catalog operations/data integrity)."""

from dataclasses import dataclass


class CatalogError(Exception):
    """Base toydb catalog error."""


class NoDatabaseSelected(CatalogError):
    """Raised when a table or view statement runs with no database selected."""

    def __init__(self):
        super().__init__("no database selected")


@dataclass(eq=False)
class NotFound(CatalogError):
    """Raised when a database, table, view, column or referenced object is missing."""

    kind: str
    identifier: str

    def __str__(self):
        return f"{self.kind} `{self.identifier}` not found"


@dataclass(eq=False)
class AlreadyExists(CatalogError):
    """Raised when a create collides with an existing name."""

    kind: str
    identifier: str

    def __str__(self):
        return f"{self.kind} `{self.identifier}` already exists"


@dataclass(eq=False)
class Unsupported(CatalogError):
    """Raised for statements or `ALTER TABLE` operations with no handler."""

    what: str

    def __str__(self):
        return f"unsupported: {self.what}"


class StoreUnavailable(CatalogError):
    """Raised on an I/O or connectivity fault in the metadata store."""


class ConstraintViolation(CatalogError):
    """Raised when an integrity rule rejects a change (e.g. a restricted delete)."""
