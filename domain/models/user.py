"""
User-related database models.
"""

from sqlalchemy import (
    Column,
    Text,
    DateTime,
    ForeignKey,
    UUID,
    Enum as SQLEnum,
    Numeric,
    JSON,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
import uuid

from domain.models.database import Base, utcnow
from domain.enums import UserRole, LinkStatus


class AppUser(Base):
    """User account model. Identity itself is managed by the upstream auth service."""

    __tablename__ = "app_user"

    user_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(Text, unique=True, nullable=False)
    full_name = Column(Text)
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.CLIENT)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    specialist_profile = relationship(
        "SpecialistProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    client_profile = relationship(
        "ClientProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        foreign_keys="ClientProfile.user_id",
    )

    @property
    def is_specialist(self) -> bool:
        return self.role == UserRole.SPECIALIST


class SpecialistProfile(Base):
    """Public card of a nutritionist"""

    __tablename__ = "specialist_profile"

    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        primary_key=True,
    )
    headline = Column(Text)
    badges = Column(Text)  # comma / newline separated
    about = Column(Text)
    regalia = Column(Text)
    education = Column(Text)
    experience = Column(Text)
    services = Column(Text)
    contacts = Column(Text)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("AppUser", back_populates="specialist_profile")


class ClientProfile(Base):
    """Extended client profile: goals, restrictions and budget"""

    __tablename__ = "client_profile"

    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        primary_key=True,
    )
    main_goal = Column(Text)
    goal_description = Column(Text)
    allergies = Column(Text)
    banned_foods = Column(Text)
    preferences = Column(Text)
    monthly_budget = Column(Numeric(10, 2))
    selected_specialist_id = Column(
        UUID(as_uuid=True), ForeignKey("app_user.user_id", ondelete="SET NULL")
    )
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship(
        "AppUser", back_populates="client_profile", foreign_keys=[user_id]
    )


class ClientSpecialistLink(Base):
    """Relationship between a client and a specialist"""

    __tablename__ = "client_specialist_link"
    __table_args__ = (
        UniqueConstraint("client_id", "specialist_id", name="uq_link_client_specialist"),
    )

    link_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    specialist_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    status = Column(SQLEnum(LinkStatus), nullable=False, default=LinkStatus.ACTIVE)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    client = relationship("AppUser", foreign_keys=[client_id])
    specialist = relationship("AppUser", foreign_keys=[specialist_id])


class FoodRules(Base):
    """Allowed / banned products a specialist sets for a client"""

    __tablename__ = "client_food_rules"

    rules_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    specialist_id = Column(
        UUID(as_uuid=True), ForeignKey("app_user.user_id", ondelete="SET NULL")
    )
    allowed_products = Column(JSON, default=list)
    banned_products = Column(JSON, default=list)
    notes = Column(Text)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
