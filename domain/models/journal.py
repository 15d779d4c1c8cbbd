"""
Client journal model.
"""

from sqlalchemy import Column, Text, DateTime, Date, ForeignKey, Integer, Numeric, UUID
from sqlalchemy import CheckConstraint
import uuid

from domain.models.database import Base, utcnow


class JournalEntry(Base):
    """Daily self-report of a client"""

    __tablename__ = "journal_entry"
    __table_args__ = (
        CheckConstraint("weight_kg IS NULL OR weight_kg > 0", name="ck_journal_weight_positive"),
        CheckConstraint(
            "energy_level IS NULL OR (energy_level BETWEEN 1 AND 10)",
            name="ck_journal_energy_range",
        ),
        CheckConstraint("mood IS NULL OR (mood BETWEEN 1 AND 10)", name="ck_journal_mood_range"),
    )

    entry_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    entry_date = Column(Date, nullable=False)
    weight_kg = Column(Numeric(5, 2))
    energy_level = Column(Integer)
    mood = Column(Integer)
    notes = Column(Text)
    created_at = Column(DateTime, default=utcnow)
