"""
Client routes.

Self-service routes under /clients/me are declared before the
/clients/{client_id} routes a specialist uses, so "me" is never read as an id.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from datetime import date
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_db, require_client, require_specialist
from api.responses import ERROR_RESPONSES
from domain.models import AppUser
from domain.schemas import (
    ClientProfileUpdate,
    ClientProfileResponse,
    ClientSummary,
    ClientDetailResponse,
    LinkResponse,
    SpecialistSummary,
    FoodRulesUpdate,
    FoodRulesResponse,
    AssignmentCreate,
    AssignmentResponse,
    AssignmentCreatedResponse,
    JournalEntryResponse,
)
from services.profile_service import ProfileService
from services.menu_service import MenuService
from services.journal_service import JournalService

router = APIRouter(prefix="/clients", tags=["Clients"], responses=ERROR_RESPONSES)
logger = logging.getLogger("nutricoach.api.clients")


# ============================================================================
# Client self-service
# ============================================================================


@router.get("/me/profile", response_model=ClientProfileResponse)
def get_my_profile(client: AppUser = Depends(require_client), db: Session = Depends(get_db)):
    return ProfileService.get_client_profile(db, client)


@router.put("/me/profile", response_model=ClientProfileResponse)
def update_my_profile(
    payload: ClientProfileUpdate,
    client: AppUser = Depends(require_client),
    db: Session = Depends(get_db),
):
    return ProfileService.update_client_profile(db, client, payload)


@router.put("/me/specialist/{specialist_id}", response_model=ClientProfileResponse)
def select_specialist(
    specialist_id: UUID,
    client: AppUser = Depends(require_client),
    db: Session = Depends(get_db),
):
    """Choose the primary specialist; creates or reactivates the link"""
    return ProfileService.select_specialist(db, client, specialist_id)


@router.get("/me/specialists", response_model=List[SpecialistSummary])
def my_specialists(client: AppUser = Depends(require_client), db: Session = Depends(get_db)):
    return ProfileService.my_specialists(db, client)


@router.get("/me/food-rules", response_model=Optional[FoodRulesResponse])
def my_food_rules(client: AppUser = Depends(require_client), db: Session = Depends(get_db)):
    """Most recently updated rules, or null when no specialist has set any"""
    return ProfileService.my_food_rules(db, client)


# ============================================================================
# Specialist view of clients
# ============================================================================


@router.get("", response_model=List[ClientSummary])
def list_clients(specialist: AppUser = Depends(require_specialist), db: Session = Depends(get_db)):
    return ProfileService.list_clients(db, specialist)


@router.post("/{client_id}/link", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
def link_client(
    client_id: UUID,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    return ProfileService.link_client(db, specialist, client_id)


@router.get("/{client_id}", response_model=ClientDetailResponse)
def get_client(
    client_id: UUID,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    """Basic and extended profile of a linked client"""
    return ProfileService.get_client_detail(db, specialist, client_id)


@router.get("/{client_id}/food-rules", response_model=Optional[FoodRulesResponse])
def get_food_rules(
    client_id: UUID,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    return ProfileService.get_food_rules(db, specialist, client_id)


@router.put("/{client_id}/food-rules", response_model=FoodRulesResponse)
def put_food_rules(
    client_id: UUID,
    payload: FoodRulesUpdate,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    return ProfileService.put_food_rules(db, specialist, client_id, payload)


@router.post(
    "/{client_id}/assignments",
    response_model=AssignmentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def assign_menu(
    client_id: UUID,
    payload: AssignmentCreate,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    """
    Assign one of the caller's menus to a linked client.

    The menu is copied together with its dishes; `warning` is set when some
    referenced dishes no longer exist.
    """
    assignment, warning = MenuService.assign_menu(db, specialist, client_id, payload)
    response = AssignmentResponse.model_validate(assignment)
    return AssignmentCreatedResponse(**response.model_dump(), warning=warning)


@router.get("/{client_id}/assignments", response_model=List[AssignmentResponse])
def list_client_assignments(
    client_id: UUID,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    return MenuService.list_client_assignments(db, specialist, client_id)


@router.get("/{client_id}/journal", response_model=List[JournalEntryResponse])
def client_journal(
    client_id: UUID,
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    return JournalService.client_entries(db, specialist, client_id, date_from, date_to)
