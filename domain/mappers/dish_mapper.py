"""
Dish and menu domain mappers.

Stored JSON columns (ingredients, macros, tags, days) may have been written by
older clients of the shared database, so reading them is tolerant: rows that
do not validate are dropped instead of failing the whole response.
"""

import logging
import math
from typing import Any, Dict, List

from pydantic import ValidationError

from domain.enums import DishCategory, DishTag
from domain.models import Dish, Menu
from domain.schemas.dish_schemas import DishResponse, IngredientItem, Macros, MACRO_KEYS
from domain.schemas.menu_schemas import MenuDay, MenuResponse

logger = logging.getLogger("nutricoach.mappers")

_KNOWN_TAGS = {t.value for t in DishTag}


def _finite_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def read_ingredients(raw: Any) -> List[IngredientItem]:
    if not isinstance(raw, list):
        return []
    out: List[IngredientItem] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        try:
            out.append(IngredientItem.model_validate(item))
        except ValidationError:
            logger.debug("dropping invalid ingredient row %r", item)
    return out


def read_macros(raw: Any) -> Macros:
    if not isinstance(raw, dict):
        return Macros()
    values = {
        k: float(raw[k]) for k in MACRO_KEYS if _finite_number(raw.get(k)) and raw[k] >= 0
    }
    return Macros(**values)


def read_tags(raw: Any) -> List[DishTag]:
    if not isinstance(raw, list):
        return []
    names = [t for t in raw if isinstance(t, str) and t in _KNOWN_TAGS]
    return [DishTag(t) for t in dict.fromkeys(names)]


def read_days(raw: Any) -> List[MenuDay]:
    if not isinstance(raw, list):
        return []
    days: List[MenuDay] = []
    for item in raw:
        try:
            days.append(MenuDay.model_validate(item))
        except ValidationError:
            logger.debug("dropping invalid menu day %r", item)
    return sorted(days, key=lambda d: d.index)


class DishMapper:
    """Mapper for dish and menu transformations."""

    @staticmethod
    def to_response(dish: Dish) -> DishResponse:
        category = dish.category if dish.category is not None else DishCategory.BREAKFAST
        return DishResponse(
            dish_id=dish.dish_id,
            specialist_id=dish.specialist_id,
            title=dish.title,
            category=category,
            time_minutes=dish.time_minutes,
            difficulty=dish.difficulty,
            ingredients=read_ingredients(dish.ingredients),
            macros=read_macros(dish.macros),
            tags=read_tags(dish.tags),
            instructions=dish.instructions,
            notes=dish.notes,
            image_url=dish.image_url,
            created_at=dish.created_at,
            updated_at=dish.updated_at,
        )

    @staticmethod
    def to_snapshot(dish: Dish) -> Dict[str, Any]:
        """JSON-ready copy of a dish for embedding in an assignment snapshot"""
        return DishMapper.to_response(dish).model_dump(mode="json")

    @staticmethod
    def menu_to_response(menu: Menu) -> MenuResponse:
        return MenuResponse(
            menu_id=menu.menu_id,
            specialist_id=menu.specialist_id,
            title=menu.title,
            goal=menu.goal,
            days_count=menu.days_count or 0,
            target_calories=menu.target_calories,
            description=menu.description,
            days=read_days(menu.days),
            created_at=menu.created_at,
            updated_at=menu.updated_at,
        )
