"""
Dish Repository - Data access for specialist-owned dishes
"""

from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Dish
from domain.enums import DishCategory

# keeps IN (...) lists well under driver parameter limits
ID_CHUNK_SIZE = 100


class DishRepository(BaseRepository[Dish]):
    """Repository for dish data access. Every query is scoped to the owning specialist."""

    def __init__(self, db: Session):
        super().__init__(db, Dish)

    def get_by_id(self, dish_id: UUID) -> Optional[Dish]:
        return self.db.query(Dish).filter(Dish.dish_id == dish_id).first()

    def get_owned(self, specialist_id: UUID, dish_id: UUID) -> Optional[Dish]:
        return (
            self.db.query(Dish)
            .filter(Dish.dish_id == dish_id, Dish.specialist_id == specialist_id)
            .first()
        )

    def list_by_specialist(
        self, specialist_id: UUID, category: Optional[DishCategory] = None
    ) -> List[Dish]:
        """Dishes of a specialist, newest first"""
        q = self.db.query(Dish).filter(Dish.specialist_id == specialist_id)
        if category is not None:
            q = q.filter(Dish.category == category)
        return q.order_by(Dish.created_at.desc()).all()

    def get_many_owned(self, specialist_id: UUID, dish_ids: Iterable[UUID]) -> List[Dish]:
        """Fetch dishes by id in chunks; ids that don't exist or belong to someone else are skipped"""
        ids = list(dict.fromkeys(dish_ids))
        found: List[Dish] = []
        for start in range(0, len(ids), ID_CHUNK_SIZE):
            chunk = ids[start:start + ID_CHUNK_SIZE]
            found.extend(
                self.db.query(Dish)
                .filter(Dish.specialist_id == specialist_id, Dish.dish_id.in_(chunk))
                .all()
            )
        return found
