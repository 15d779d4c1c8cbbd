from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.enums import DishCategory, DishTag
from domain.mappers.dish_mapper import read_tags
from domain.models import AppUser, Dish
from domain.schemas import DishCreate, DishUpdate
from repositories import DishRepository
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("nutricoach.services.dish")


def _dump_json_fields(fields: dict) -> dict:
    """Convert nested pydantic values into JSON-ready column values"""
    out = dict(fields)
    if "ingredients" in out and out["ingredients"] is not None:
        out["ingredients"] = [i.model_dump(mode="json") for i in out["ingredients"]]
    if "macros" in out and out["macros"] is not None:
        out["macros"] = out["macros"].model_dump(mode="json")
    if "tags" in out and out["tags"] is not None:
        out["tags"] = [t.value for t in dict.fromkeys(out["tags"])]
    return out


class DishService:
    """Business logic for a specialist's dish library"""

    @staticmethod
    def list_dishes(
        db: Session,
        specialist: AppUser,
        category: Optional[DishCategory] = None,
        tag: Optional[DishTag] = None,
    ) -> List[Dish]:
        dishes = DishRepository(db).list_by_specialist(specialist.user_id, category)
        if tag is not None:
            dishes = [d for d in dishes if tag in read_tags(d.tags)]
        logger.info(
            f"dishes_listed specialist_id={specialist.user_id} count={len(dishes)} "
            f"category={category.value if category else None} tag={tag.value if tag else None}"
        )
        return dishes

    @staticmethod
    def get_dish(db: Session, specialist: AppUser, dish_id: UUID) -> Dish:
        dish = DishRepository(db).get_owned(specialist.user_id, dish_id)
        if not dish:
            raise NotFoundError(f"Dish {dish_id} not found")
        return dish

    @staticmethod
    def create_dish(db: Session, specialist: AppUser, data: DishCreate) -> Dish:
        fields = _dump_json_fields({name: getattr(data, name) for name in DishCreate.model_fields})
        dish = DishRepository(db).create(Dish(specialist_id=specialist.user_id, **fields))
        logger.info(f"dish_created dish_id={dish.dish_id} specialist_id={specialist.user_id}")
        return dish

    @staticmethod
    def update_dish(
        db: Session, specialist: AppUser, dish_id: UUID, data: DishUpdate
    ) -> Dish:
        dish = DishService.get_dish(db, specialist, dish_id)
        fields = {name: getattr(data, name) for name in data.model_fields_set}
        if "title" in fields and fields["title"] is None:
            raise ServiceValidationError("title cannot be empty")
        if "category" in fields and fields["category"] is None:
            fields.pop("category")

        for key, value in _dump_json_fields(fields).items():
            setattr(dish, key, value)
        dish = DishRepository(db).update(dish)
        logger.info(f"dish_updated dish_id={dish_id} fields={sorted(fields)}")
        return dish

    @staticmethod
    def delete_dish(db: Session, specialist: AppUser, dish_id: UUID) -> None:
        dish = DishService.get_dish(db, specialist, dish_id)
        db.delete(dish)
        db.commit()
        logger.info(f"dish_deleted dish_id={dish_id} specialist_id={specialist.user_id}")
