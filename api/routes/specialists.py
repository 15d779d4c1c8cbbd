"""Specialist profile and directory routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from adapters.storage_adapter import StorageClient
from api.dependencies import (
    get_db,
    get_current_user,
    get_storage,
    require_client,
    require_specialist,
)
from api.responses import ERROR_RESPONSES
from domain.models import AppUser
from domain.schemas import (
    SpecialistProfileUpdate,
    SpecialistProfileResponse,
    SpecialistSummary,
    SpecialistDocuments,
)
from services.profile_service import ProfileService

router = APIRouter(prefix="/specialists", tags=["Specialists"], responses=ERROR_RESPONSES)
logger = logging.getLogger("nutricoach.api.specialists")


@router.get("/me/profile", response_model=SpecialistProfileResponse)
def get_my_profile(
    specialist: AppUser = Depends(require_specialist), db: Session = Depends(get_db)
):
    return ProfileService.get_specialist_profile(db, specialist)


@router.put("/me/profile", response_model=SpecialistProfileResponse)
def update_my_profile(
    payload: SpecialistProfileUpdate,
    specialist: AppUser = Depends(require_specialist),
    db: Session = Depends(get_db),
):
    """Save the public card; fields left out of the payload keep their value"""
    return ProfileService.update_specialist_profile(db, specialist, payload)


@router.get("", response_model=List[SpecialistSummary])
def list_specialists(client: AppUser = Depends(require_client), db: Session = Depends(get_db)):
    """Directory of specialists, flagged with the caller's links and primary choice"""
    return ProfileService.list_specialists(db, client)


@router.get("/{specialist_id}", response_model=SpecialistProfileResponse)
def get_specialist(
    specialist_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ProfileService.get_specialist_card(db, specialist_id)


@router.get("/{specialist_id}/documents", response_model=SpecialistDocuments)
def get_specialist_documents(
    specialist_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
):
    """Avatar, certificates, diplomas, other documents and portfolio with public URLs"""
    return ProfileService.specialist_documents(db, storage, specialist_id)
