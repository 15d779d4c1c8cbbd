from typing import Dict, List, Optional, Tuple
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.enums import LinkStatus, MealSlot
from domain.mappers import DishMapper
from domain.mappers.dish_mapper import read_days, read_macros
from domain.models import AppUser, Dish, Menu, MenuAssignment
from domain.schemas import (
    MenuCreate,
    MenuUpdate,
    MenuDay,
    MenuPreviewDay,
    MenuPreviewResponse,
    Macros,
    AssignmentCreate,
    AssignmentUpdate,
)
from domain.schemas.dish_schemas import MACRO_KEYS
from repositories import DishRepository, MenuRepository, AssignmentRepository
from services.profile_service import ProfileService
from app.exceptions import ForbiddenError, NotFoundError, ServiceValidationError

logger = logging.getLogger("nutricoach.services.menu")

SLOTS = [slot.value for slot in MealSlot]


def collect_dish_ids(days: List[MenuDay]) -> List[UUID]:
    """Unique dish ids referenced by the days, in first-seen order"""
    ids: List[UUID] = []
    for day in days:
        ids.extend(day.meals.dish_ids())
    return list(dict.fromkeys(ids))


def sum_macros(dishes: List[Dish]) -> Macros:
    """Per-key sum; a key stays None when no dish has a value for it"""
    totals: Dict[str, Optional[float]] = {k: None for k in MACRO_KEYS}
    for dish in dishes:
        macros = read_macros(dish.macros)
        for key in MACRO_KEYS:
            value = getattr(macros, key)
            if value is not None:
                totals[key] = round((totals[key] or 0.0) + value, 1)
    return Macros(**totals)


def average_macros(day_totals: List[Macros]) -> Macros:
    out: Dict[str, Optional[float]] = {}
    for key in MACRO_KEYS:
        values = [getattr(t, key) for t in day_totals if getattr(t, key) is not None]
        out[key] = round(sum(values) / len(values), 1) if values else None
    return Macros(**out)


class MenuService:
    """Business logic for menus and their assignment to clients"""

    @staticmethod
    def _check_dishes(db: Session, specialist_id: UUID, days: List[MenuDay]) -> None:
        ids = collect_dish_ids(days)
        if not ids:
            return
        found = {d.dish_id for d in DishRepository(db).get_many_owned(specialist_id, ids)}
        missing = [str(i) for i in ids if i not in found]
        if missing:
            raise ServiceValidationError(
                "Menu references dishes that do not exist or belong to another specialist",
                details={"dish_ids": missing},
            )

    @staticmethod
    def _resolve_dishes(db: Session, specialist_id: UUID, days: List[MenuDay]) -> Dict[UUID, Dish]:
        ids = collect_dish_ids(days)
        return {d.dish_id: d for d in DishRepository(db).get_many_owned(specialist_id, ids)}

    # ------------------------------------------------------------------
    # Menus
    # ------------------------------------------------------------------

    @staticmethod
    def list_menus(db: Session, specialist: AppUser) -> List[Menu]:
        return MenuRepository(db).list_by_specialist(specialist.user_id)

    @staticmethod
    def get_menu(db: Session, specialist: AppUser, menu_id: UUID) -> Menu:
        menu = MenuRepository(db).get_owned(specialist.user_id, menu_id)
        if not menu:
            raise NotFoundError(f"Menu {menu_id} not found")
        return menu

    @staticmethod
    def create_menu(db: Session, specialist: AppUser, data: MenuCreate) -> Menu:
        MenuService._check_dishes(db, specialist.user_id, data.days)
        menu = Menu(
            specialist_id=specialist.user_id,
            title=data.title,
            goal=data.goal,
            target_calories=data.target_calories,
            description=data.description,
            days=[d.model_dump(mode="json") for d in data.days],
            days_count=len(data.days),
        )
        menu = MenuRepository(db).create(menu)
        logger.info(
            f"menu_created menu_id={menu.menu_id} specialist_id={specialist.user_id} "
            f"days={menu.days_count}"
        )
        return menu

    @staticmethod
    def update_menu(
        db: Session, specialist: AppUser, menu_id: UUID, data: MenuUpdate
    ) -> Menu:
        menu = MenuService.get_menu(db, specialist, menu_id)
        fields = data.model_fields_set
        if "title" in fields:
            if not data.title:
                raise ServiceValidationError("title cannot be empty")
            menu.title = data.title
        for name in ("goal", "target_calories", "description"):
            if name in fields:
                setattr(menu, name, getattr(data, name))
        if "days" in fields and data.days is not None:
            MenuService._check_dishes(db, specialist.user_id, data.days)
            menu.days = [d.model_dump(mode="json") for d in data.days]
            menu.days_count = len(data.days)
        menu = MenuRepository(db).update(menu)
        logger.info(f"menu_updated menu_id={menu_id} fields={sorted(fields)}")
        return menu

    @staticmethod
    def delete_menu(db: Session, specialist: AppUser, menu_id: UUID) -> None:
        menu = MenuService.get_menu(db, specialist, menu_id)
        db.delete(menu)
        db.commit()
        logger.info(f"menu_deleted menu_id={menu_id}")

    @staticmethod
    def preview(db: Session, specialist: AppUser, menu_id: UUID) -> MenuPreviewResponse:
        """
        Menu with every slot resolved to its dish and per-day macro totals.

        Dishes deleted after the menu was saved show up as empty slots and
        are listed in missing_dish_ids of their day.
        """
        menu = MenuService.get_menu(db, specialist, menu_id)
        days = read_days(menu.days)
        dishes = MenuService._resolve_dishes(db, specialist.user_id, days)

        preview_days: List[MenuPreviewDay] = []
        for day in days:
            meals = {}
            present: List[Dish] = []
            missing: List[UUID] = []
            for slot in SLOTS:
                dish_id = getattr(day.meals, slot)
                dish = dishes.get(dish_id) if dish_id else None
                if dish_id and dish is None:
                    missing.append(dish_id)
                if dish is not None:
                    present.append(dish)
                meals[slot] = DishMapper.to_response(dish) if dish else None
            preview_days.append(
                MenuPreviewDay(
                    index=day.index,
                    label=day.label,
                    note=day.note,
                    meals=meals,
                    totals=sum_macros(present),
                    missing_dish_ids=missing,
                )
            )

        return MenuPreviewResponse(
            menu=DishMapper.menu_to_response(menu),
            days=preview_days,
            average_daily=average_macros([d.totals for d in preview_days]),
        )

    # ------------------------------------------------------------------
    # Assignments
    # ------------------------------------------------------------------

    @staticmethod
    def assign_menu(
        db: Session, specialist: AppUser, client_id: UUID, data: AssignmentCreate
    ) -> Tuple[MenuAssignment, Optional[str]]:
        """
        Assign a menu to a linked client.

        The assignment keeps a snapshot of the menu together with a dish_index
        of the referenced dishes, so later edits of the library do not change
        what the client sees. Returns (assignment, warning).
        """
        ProfileService.get_client(db, client_id)
        ProfileService.require_linked(db, specialist.user_id, client_id)
        menu = MenuService.get_menu(db, specialist, data.menu_id)

        days = read_days(menu.days)
        wanted = collect_dish_ids(days)
        dishes = MenuService._resolve_dishes(db, specialist.user_id, days)
        missing = [str(i) for i in wanted if i not in dishes]

        snapshot = DishMapper.menu_to_response(menu).model_dump(mode="json")
        snapshot["dish_index"] = {
            str(dish_id): DishMapper.to_snapshot(dish) for dish_id, dish in dishes.items()
        }

        warning = None
        if missing:
            warning = (
                f"{len(missing)} dish(es) referenced by the menu no longer exist; "
                "the menu was assigned without their details"
            )

        assignment = MenuAssignment(
            client_id=client_id,
            specialist_id=specialist.user_id,
            menu_id=menu.menu_id,
            title=menu.title,
            notes=data.notes,
            status=LinkStatus.ACTIVE,
            start_date=data.start_date,
            end_date=data.end_date,
            days_count=menu.days_count,
            menu_data=snapshot,
        )
        assignment = AssignmentRepository(db).create(assignment)
        logger.info(
            f"menu_assigned assignment_id={assignment.assignment_id} menu_id={menu.menu_id} "
            f"client_id={client_id} dishes={len(dishes)} missing={len(missing)}"
        )
        return assignment, warning

    @staticmethod
    def list_client_assignments(
        db: Session, specialist: AppUser, client_id: UUID
    ) -> List[MenuAssignment]:
        ProfileService.require_linked(db, specialist.user_id, client_id)
        return AssignmentRepository(db).list_for_client(client_id, specialist.user_id)

    @staticmethod
    def my_assignments(db: Session, client: AppUser) -> List[MenuAssignment]:
        return AssignmentRepository(db).list_for_client(client.user_id)

    @staticmethod
    def get_assignment(db: Session, user: AppUser, assignment_id: UUID) -> MenuAssignment:
        """Visible to the client it was assigned to and to the specialist who made it"""
        assignment = AssignmentRepository(db).get_by_id(assignment_id)
        if not assignment:
            raise NotFoundError(f"Assignment {assignment_id} not found")
        if user.user_id not in (assignment.client_id, assignment.specialist_id):
            raise ForbiddenError("Not your assignment")
        return assignment

    @staticmethod
    def update_assignment(
        db: Session, specialist: AppUser, assignment_id: UUID, data: AssignmentUpdate
    ) -> MenuAssignment:
        assignment = AssignmentRepository(db).get_by_id(assignment_id)
        if not assignment:
            raise NotFoundError(f"Assignment {assignment_id} not found")
        if assignment.specialist_id != specialist.user_id:
            raise ForbiddenError("Only the specialist who assigned the menu can change it")

        fields = data.model_fields_set
        if "status" in fields and data.status is not None:
            assignment.status = data.status
        for name in ("notes", "start_date", "end_date"):
            if name in fields:
                setattr(assignment, name, getattr(data, name))
        if (
            assignment.start_date
            and assignment.end_date
            and assignment.end_date < assignment.start_date
        ):
            db.rollback()
            raise ServiceValidationError("end_date must not be before start_date")

        assignment = AssignmentRepository(db).update(assignment)
        logger.info(f"assignment_updated assignment_id={assignment_id} fields={sorted(fields)}")
        return assignment
