"""Menu (meal plan) routes (specialist only)"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_db, require_specialist
from api.responses import ERROR_RESPONSES, DeletedResponse
from domain.models import AppUser
from domain.schemas import MenuCreate, MenuUpdate, MenuResponse, MenuPreviewResponse
from domain.mappers import DishMapper
from services.menu_service import MenuService

router = APIRouter(prefix="/menus", tags=["Menus"], responses=ERROR_RESPONSES)
logger = logging.getLogger("nutricoach.api.menus")


@router.get("", response_model=List[MenuResponse])
def list_menus(specialist: AppUser = Depends(require_specialist), db: Session = Depends(get_db)):
    return [DishMapper.menu_to_response(m) for m in MenuService.list_menus(db, specialist)]


@router.post("", response_model=MenuResponse, status_code=status.HTTP_201_CREATED)
def create_menu(
    payload: MenuCreate,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    """Create a menu; every referenced dish must belong to the caller"""
    return DishMapper.menu_to_response(MenuService.create_menu(db, specialist, payload))


@router.get("/{menu_id}", response_model=MenuResponse)
def get_menu(
    menu_id: UUID,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    return DishMapper.menu_to_response(MenuService.get_menu(db, specialist, menu_id))


@router.put("/{menu_id}", response_model=MenuResponse)
def update_menu(
    menu_id: UUID,
    payload: MenuUpdate,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    return DishMapper.menu_to_response(MenuService.update_menu(db, specialist, menu_id, payload))


@router.delete("/{menu_id}", response_model=DeletedResponse)
def delete_menu(
    menu_id: UUID,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    MenuService.delete_menu(db, specialist, menu_id)
    return DeletedResponse(deleted=str(menu_id))


@router.get("/{menu_id}/preview", response_model=MenuPreviewResponse)
def preview_menu(
    menu_id: UUID,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    """Menu with resolved dishes, per-day macro totals and the daily average"""
    return MenuService.preview(db, specialist, menu_id)
