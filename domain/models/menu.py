"""
Menu (meal plan) and assignment models.
"""

from sqlalchemy import Column, Text, DateTime, Date, ForeignKey, Integer, UUID, JSON
from sqlalchemy import Enum as SQLEnum
import uuid

from domain.models.database import Base, utcnow
from domain.enums import MenuGoal, LinkStatus


class Menu(Base):
    """Multi-day plan; every day maps meal slots to dish ids"""

    __tablename__ = "menu"

    menu_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    specialist_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(Text, nullable=False)
    goal = Column(SQLEnum(MenuGoal))
    days_count = Column(Integer, nullable=False, default=0)
    target_calories = Column(Integer)
    description = Column(Text)
    days = Column(JSON, default=list)  # [{index, label, meals: {slot: dish_id}, note}]
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class MenuAssignment(Base):
    """A menu handed to a client. menu_data keeps a snapshot so later edits don't leak."""

    __tablename__ = "menu_assignment"

    assignment_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    specialist_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    menu_id = Column(
        UUID(as_uuid=True), ForeignKey("menu.menu_id", ondelete="SET NULL")
    )
    title = Column(Text, nullable=False)
    notes = Column(Text)
    status = Column(SQLEnum(LinkStatus), nullable=False, default=LinkStatus.ACTIVE)
    start_date = Column(Date)
    end_date = Column(Date)
    days_count = Column(Integer)
    menu_data = Column(JSON)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
