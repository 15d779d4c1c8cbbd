"""
Journal Repository - Data access for client journal entries
"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import JournalEntry


class JournalRepository(BaseRepository[JournalEntry]):
    def __init__(self, db: Session):
        super().__init__(db, JournalEntry)

    def get_by_id(self, entry_id: UUID) -> Optional[JournalEntry]:
        return self.db.query(JournalEntry).filter(JournalEntry.entry_id == entry_id).first()

    def list_by_user(
        self,
        user_id: UUID,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[JournalEntry]:
        """Entries ordered oldest first, as the weight chart reads them"""
        q = self.db.query(JournalEntry).filter(JournalEntry.user_id == user_id)
        if date_from is not None:
            q = q.filter(JournalEntry.entry_date >= date_from)
        if date_to is not None:
            q = q.filter(JournalEntry.entry_date <= date_to)
        return q.order_by(JournalEntry.entry_date.asc(), JournalEntry.created_at.asc()).all()
