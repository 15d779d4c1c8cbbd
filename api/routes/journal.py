"""Client journal routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from datetime import date
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_db, require_client
from api.responses import ERROR_RESPONSES, DeletedResponse
from domain.models import AppUser
from domain.schemas import JournalEntryCreate, JournalEntryResponse, JournalSummaryResponse
from services.journal_service import JournalService

router = APIRouter(prefix="/journal", tags=["Journal"], responses=ERROR_RESPONSES)
logger = logging.getLogger("nutricoach.api.journal")


@router.post("", response_model=JournalEntryResponse, status_code=status.HTTP_201_CREATED)
def add_entry(
    payload: JournalEntryCreate,
    client: AppUser = Depends(require_client),
    db: Session = Depends(get_db),
):
    return JournalService.add_entry(db, client, payload)


@router.get("", response_model=List[JournalEntryResponse])
def list_entries(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    client: AppUser = Depends(require_client),
    db: Session = Depends(get_db),
):
    """Entries ordered by date ascending"""
    return JournalService.list_entries(db, client, date_from, date_to)


@router.get("/summary", response_model=JournalSummaryResponse)
def summary(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    client: AppUser = Depends(require_client),
    db: Session = Depends(get_db),
):
    return JournalService.summary(db, client, date_from, date_to)


@router.delete("/{entry_id}", response_model=DeletedResponse)
def delete_entry(
    entry_id: UUID,
    client: AppUser = Depends(require_client),
    db: Session = Depends(get_db),
):
    JournalService.delete_entry(db, client, entry_id)
    return DeletedResponse(deleted=str(entry_id))
