"""Dish library routes (specialist only)"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_db, require_specialist
from api.responses import ERROR_RESPONSES, DeletedResponse
from domain.enums import DishCategory, DishTag
from domain.models import AppUser
from domain.schemas import DishCreate, DishUpdate, DishResponse
from domain.mappers import DishMapper
from services.dish_service import DishService

router = APIRouter(prefix="/dishes", tags=["Dishes"], responses=ERROR_RESPONSES)
logger = logging.getLogger("nutricoach.api.dishes")


@router.get("", response_model=List[DishResponse])
def list_dishes(
    category: Optional[DishCategory] = None,
    tag: Optional[DishTag] = None,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    """Caller's dishes, newest first, optionally filtered by category and tag"""
    dishes = DishService.list_dishes(db, specialist, category, tag)
    return [DishMapper.to_response(d) for d in dishes]


@router.post("", response_model=DishResponse, status_code=status.HTTP_201_CREATED)
def create_dish(
    payload: DishCreate,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    return DishMapper.to_response(DishService.create_dish(db, specialist, payload))


@router.get("/{dish_id}", response_model=DishResponse)
def get_dish(
    dish_id: UUID,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    return DishMapper.to_response(DishService.get_dish(db, specialist, dish_id))


@router.patch("/{dish_id}", response_model=DishResponse)
def update_dish(
    dish_id: UUID,
    payload: DishUpdate,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    """Partial update: only fields present in the body are changed"""
    return DishMapper.to_response(DishService.update_dish(db, specialist, dish_id, payload))


@router.delete("/{dish_id}", response_model=DeletedResponse)
def delete_dish(
    dish_id: UUID,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    DishService.delete_dish(db, specialist, dish_id)
    return DeletedResponse(deleted=str(dish_id))
