"""Generic catalog store operations."""
from abc import ABC, abstractmethod
from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from toydb_meta.models import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRBase(Generic[ModelType]):
    model: Type[ModelType]

    def __init__(self, model: Type[ModelType]):
        """
        Catalog store object bound to one model.

        Args:
            model: A SQLAlchemy model class.
        """
        self.model = model


class DatabaseScopedCRBase(CRBase[ModelType], ABC):
    """Catalog store object whose rows live inside one user database."""

    @abstractmethod
    def get(
        self, db: Session, *, name: str, database_id: int
    ) -> Optional[ModelType]:  # pragma: no cover
        pass
