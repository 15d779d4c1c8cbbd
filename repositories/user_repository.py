"""
User Repository - Data access layer for accounts, profiles and client/specialist links
"""

from typing import Optional, List, Tuple
from uuid import UUID
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError

from repositories.base import BaseRepository
from domain.models import (
    AppUser,
    SpecialistProfile,
    ClientProfile,
    ClientSpecialistLink,
    FoodRules,
)
from domain.enums import UserRole, LinkStatus
from app.exceptions import ConflictError


class UserRepository(BaseRepository[AppUser]):
    """Repository for user data access"""

    def __init__(self, db: Session):
        super().__init__(db, AppUser)

    def get_by_id(self, user_id: UUID) -> Optional[AppUser]:
        return self.db.query(AppUser).filter(AppUser.user_id == user_id).first()

    def get_by_email(self, email: str) -> Optional[AppUser]:
        return (
            self.db.query(AppUser)
            .filter(AppUser.email == email.strip().lower())
            .first()
        )

    def create_user(
        self, email: str, full_name: str = None, role: UserRole = UserRole.CLIENT
    ) -> AppUser:
        """Create a new user. Emails are stored lower-cased."""
        user = AppUser(email=email.strip().lower(), full_name=full_name, role=role)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"User with email {email} already exists")

    def list_by_role(self, role: UserRole) -> List[AppUser]:
        return (
            self.db.query(AppUser)
            .options(joinedload(AppUser.specialist_profile))
            .filter(AppUser.role == role)
            .order_by(AppUser.full_name, AppUser.created_at)
            .all()
        )


class SpecialistProfileRepository(BaseRepository[SpecialistProfile]):
    """Repository for specialist profile data access"""

    def __init__(self, db: Session):
        super().__init__(db, SpecialistProfile)

    def get_by_id(self, user_id: UUID) -> Optional[SpecialistProfile]:
        return self.get_by_user_id(user_id)

    def get_by_user_id(self, user_id: UUID) -> Optional[SpecialistProfile]:
        return (
            self.db.query(SpecialistProfile)
            .filter(SpecialistProfile.user_id == user_id)
            .first()
        )

    def upsert(self, user_id: UUID, **kwargs) -> SpecialistProfile:
        """Create or update specialist profile"""
        profile = self.get_by_user_id(user_id)
        if profile:
            for key, value in kwargs.items():
                if hasattr(profile, key):
                    setattr(profile, key, value)
        else:
            profile = SpecialistProfile(user_id=user_id, **kwargs)
            self.db.add(profile)
        self.db.flush()
        return profile


class ClientProfileRepository(BaseRepository[ClientProfile]):
    """Repository for extended client profile data access"""

    def __init__(self, db: Session):
        super().__init__(db, ClientProfile)

    def get_by_id(self, user_id: UUID) -> Optional[ClientProfile]:
        return self.get_by_user_id(user_id)

    def get_by_user_id(self, user_id: UUID) -> Optional[ClientProfile]:
        return (
            self.db.query(ClientProfile)
            .filter(ClientProfile.user_id == user_id)
            .first()
        )

    def upsert(self, user_id: UUID, **kwargs) -> ClientProfile:
        """Create or update client profile"""
        profile = self.get_by_user_id(user_id)
        if profile:
            for key, value in kwargs.items():
                if hasattr(profile, key):
                    setattr(profile, key, value)
        else:
            profile = ClientProfile(user_id=user_id, **kwargs)
            self.db.add(profile)
        self.db.flush()
        return profile


class LinkRepository(BaseRepository[ClientSpecialistLink]):
    """Repository for client/specialist relationships"""

    def __init__(self, db: Session):
        super().__init__(db, ClientSpecialistLink)

    def get_by_id(self, link_id: UUID) -> Optional[ClientSpecialistLink]:
        return (
            self.db.query(ClientSpecialistLink)
            .filter(ClientSpecialistLink.link_id == link_id)
            .first()
        )

    def get_link(self, client_id: UUID, specialist_id: UUID) -> Optional[ClientSpecialistLink]:
        return (
            self.db.query(ClientSpecialistLink)
            .filter(
                ClientSpecialistLink.client_id == client_id,
                ClientSpecialistLink.specialist_id == specialist_id,
            )
            .first()
        )

    def is_active(self, client_id: UUID, specialist_id: UUID) -> bool:
        link = self.get_link(client_id, specialist_id)
        return link is not None and link.status == LinkStatus.ACTIVE

    def ensure_active(self, client_id: UUID, specialist_id: UUID) -> ClientSpecialistLink:
        """Create the link or reactivate an archived one (flush only)"""
        link = self.get_link(client_id, specialist_id)
        if link is None:
            link = ClientSpecialistLink(
                client_id=client_id, specialist_id=specialist_id, status=LinkStatus.ACTIVE
            )
            self.db.add(link)
        elif link.status != LinkStatus.ACTIVE:
            link.status = LinkStatus.ACTIVE
        self.db.flush()
        return link

    def list_clients(self, specialist_id: UUID) -> List[Tuple[ClientSpecialistLink, AppUser, Optional[ClientProfile]]]:
        """Linked clients of a specialist, newest link first"""
        return (
            self.db.query(ClientSpecialistLink, AppUser, ClientProfile)
            .join(AppUser, AppUser.user_id == ClientSpecialistLink.client_id)
            .outerjoin(ClientProfile, ClientProfile.user_id == AppUser.user_id)
            .filter(ClientSpecialistLink.specialist_id == specialist_id)
            .order_by(ClientSpecialistLink.created_at.desc())
            .all()
        )

    def list_specialist_ids(self, client_id: UUID, active_only: bool = True) -> List[UUID]:
        q = self.db.query(ClientSpecialistLink.specialist_id).filter(
            ClientSpecialistLink.client_id == client_id
        )
        if active_only:
            q = q.filter(ClientSpecialistLink.status == LinkStatus.ACTIVE)
        return [row[0] for row in q.all()]


class FoodRulesRepository(BaseRepository[FoodRules]):
    """Repository for per-client product rules"""

    def __init__(self, db: Session):
        super().__init__(db, FoodRules)

    def get_by_id(self, rules_id: UUID) -> Optional[FoodRules]:
        return self.db.query(FoodRules).filter(FoodRules.rules_id == rules_id).first()

    def get_latest(self, client_id: UUID) -> Optional[FoodRules]:
        """Most recently updated rules for a client"""
        return (
            self.db.query(FoodRules)
            .filter(FoodRules.client_id == client_id)
            .order_by(FoodRules.updated_at.desc(), FoodRules.created_at.desc())
            .first()
        )

    def get_for_specialist(self, client_id: UUID, specialist_id: UUID) -> Optional[FoodRules]:
        return (
            self.db.query(FoodRules)
            .filter(
                FoodRules.client_id == client_id,
                FoodRules.specialist_id == specialist_id,
            )
            .first()
        )
