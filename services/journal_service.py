from datetime import date
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.models import AppUser, JournalEntry
from domain.schemas import JournalEntryCreate, JournalSummaryResponse
from repositories import JournalRepository
from services.profile_service import ProfileService
from app.exceptions import ForbiddenError, NotFoundError, ServiceValidationError

logger = logging.getLogger("nutricoach.services.journal")


def _mean(values: List[float]) -> Optional[float]:
    return round(sum(values) / len(values), 2) if values else None


def summarize(entries: List[JournalEntry]) -> JournalSummaryResponse:
    """Aggregate entries that are already ordered oldest first"""
    if not entries:
        return JournalSummaryResponse(entries=0)

    weights = [float(e.weight_kg) for e in entries if e.weight_kg is not None]
    return JournalSummaryResponse(
        entries=len(entries),
        first_date=entries[0].entry_date,
        last_date=entries[-1].entry_date,
        min_weight_kg=min(weights) if weights else None,
        max_weight_kg=max(weights) if weights else None,
        latest_weight_kg=weights[-1] if weights else None,
        weight_change_kg=round(weights[-1] - weights[0], 2) if len(weights) > 1 else None,
        avg_energy=_mean([e.energy_level for e in entries if e.energy_level is not None]),
        avg_mood=_mean([e.mood for e in entries if e.mood is not None]),
    )


class JournalService:
    """Business logic for the client self-report journal"""

    @staticmethod
    def _check_range(date_from: Optional[date], date_to: Optional[date]) -> None:
        if date_from and date_to and date_to < date_from:
            raise ServiceValidationError("'to' must not be before 'from'")

    @staticmethod
    def add_entry(db: Session, client: AppUser, data: JournalEntryCreate) -> JournalEntry:
        if data.weight_kg is None and data.energy_level is None and data.mood is None and not data.notes:
            raise ServiceValidationError("Journal entry is empty")
        entry = JournalEntry(
            user_id=client.user_id,
            entry_date=data.entry_date,
            weight_kg=data.weight_kg,
            energy_level=data.energy_level,
            mood=data.mood,
            notes=data.notes,
        )
        entry = JournalRepository(db).create(entry)
        logger.info(
            f"journal_entry_added entry_id={entry.entry_id} user_id={client.user_id} "
            f"date={entry.entry_date}"
        )
        return entry

    @staticmethod
    def list_entries(
        db: Session,
        client: AppUser,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[JournalEntry]:
        JournalService._check_range(date_from, date_to)
        return JournalRepository(db).list_by_user(client.user_id, date_from, date_to)

    @staticmethod
    def delete_entry(db: Session, client: AppUser, entry_id: UUID) -> None:
        repo = JournalRepository(db)
        entry = repo.get_by_id(entry_id)
        if not entry:
            raise NotFoundError(f"Journal entry {entry_id} not found")
        if entry.user_id != client.user_id:
            raise ForbiddenError("Not your journal entry")
        repo.delete(entry_id)
        logger.info(f"journal_entry_deleted entry_id={entry_id}")

    @staticmethod
    def summary(
        db: Session,
        client: AppUser,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> JournalSummaryResponse:
        return summarize(JournalService.list_entries(db, client, date_from, date_to))

    @staticmethod
    def client_entries(
        db: Session,
        specialist: AppUser,
        client_id: UUID,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[JournalEntry]:
        """Journal of a linked client, for the specialist"""
        ProfileService.get_client(db, client_id)
        ProfileService.require_linked(db, specialist.user_id, client_id)
        JournalService._check_range(date_from, date_to)
        return JournalRepository(db).list_by_user(client_id, date_from, date_to)
