"""
Base repository for the SQLAlchemy data access layer.
Services talk to repositories; repositories own the session commits.
"""

from typing import Generic, TypeVar, Optional, Type
from uuid import UUID
from sqlalchemy.orm import Session
from abc import ABC, abstractmethod

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """Commit-and-refresh helpers shared by every NutriCoach repository."""

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    @abstractmethod
    def get_by_id(self, entity_id: UUID) -> Optional[ModelType]:
        """Look up a row by its own id column (user_id, dish_id, thread_id...)"""

    def create(self, entity: ModelType) -> ModelType:
        self.db.add(entity)
        return self._commit(entity)

    def update(self, entity: ModelType) -> ModelType:
        """Persist attribute changes made on an already loaded row"""
        return self._commit(entity)

    def delete(self, entity_id: UUID) -> bool:
        entity = self.get_by_id(entity_id)
        if entity is None:
            return False
        self.db.delete(entity)
        self.db.commit()
        return True

    def _commit(self, entity: ModelType) -> ModelType:
        self.db.commit()
        self.db.refresh(entity)
        return entity
