"""Menu assignment routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_db, get_current_user, require_client, require_specialist
from api.responses import ERROR_RESPONSES
from domain.models import AppUser
from domain.schemas import AssignmentUpdate, AssignmentResponse
from services.menu_service import MenuService

router = APIRouter(prefix="/assignments", tags=["Assignments"], responses=ERROR_RESPONSES)
logger = logging.getLogger("nutricoach.api.assignments")


@router.get("/mine", response_model=List[AssignmentResponse])
def my_assignments(client: AppUser = Depends(require_client), db: Session = Depends(get_db)):
    """Menus assigned to the calling client, newest first"""
    return MenuService.my_assignments(db, client)


@router.get("/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(
    assignment_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return MenuService.get_assignment(db, user, assignment_id)


@router.patch("/{assignment_id}", response_model=AssignmentResponse)
def update_assignment(
    assignment_id: UUID,
    payload: AssignmentUpdate,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    """Change status (active/archived), dates or notes"""
    return MenuService.update_assignment(db, specialist, assignment_id, payload)
