"""
Dish (recipe) model owned by a specialist.
"""

from sqlalchemy import Column, Text, DateTime, ForeignKey, Integer, UUID, JSON
from sqlalchemy import Enum as SQLEnum
import uuid

from domain.models.database import Base, utcnow
from domain.enums import DishCategory, Difficulty


class Dish(Base):
    """A dish with ingredients, cooking steps and macro estimates"""

    __tablename__ = "dish"

    dish_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    specialist_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(Text, nullable=False)
    category = Column(SQLEnum(DishCategory), nullable=False, default=DishCategory.BREAKFAST)
    time_minutes = Column(Integer)
    difficulty = Column(SQLEnum(Difficulty))
    ingredients = Column(JSON, default=list)  # [{id, name, amount, calories?, basis?}]
    macros = Column(JSON, default=dict)  # {calories, protein, fat, carbs, fiber}
    tags = Column(JSON, default=list)
    instructions = Column(Text)
    notes = Column(Text)
    image_url = Column(Text)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
