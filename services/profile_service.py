from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from adapters.storage_adapter import StorageClient
from app.config import settings
from domain.enums import UserRole, LinkStatus
from domain.mappers import UserMapper
from domain.models import AppUser, ClientSpecialistLink, FoodRules
from domain.schemas import (
    UserCreate,
    SpecialistProfileUpdate,
    SpecialistProfileResponse,
    ClientProfileUpdate,
    ClientProfileResponse,
    LinkResponse,
    ClientSummary,
    ClientDetailResponse,
    SpecialistSummary,
    FoodRulesUpdate,
    FoodRulesResponse,
    SpecialistDocuments,
)
from repositories import (
    UserRepository,
    SpecialistProfileRepository,
    ClientProfileRepository,
    LinkRepository,
    FoodRulesRepository,
)
from app.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServiceValidationError,
)

logger = logging.getLogger("nutricoach.services.profile")

DOCUMENT_FOLDERS = ("certificates", "diplomas", "other", "portfolio")


class ProfileService:
    """Business logic for accounts, profiles and client/specialist links"""

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    @staticmethod
    def register_user(db: Session, data: UserCreate) -> AppUser:
        user_repo = UserRepository(db)
        if user_repo.get_by_email(data.email):
            raise ConflictError(f"User with email {data.email} already exists")
        user = user_repo.create_user(
            email=data.email, full_name=data.full_name, role=data.role
        )
        logger.info(f"user_registered user_id={user.user_id} role={user.role.value}")
        return user

    @staticmethod
    def get_user(db: Session, user_id: UUID) -> AppUser:
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    @staticmethod
    def get_specialist(db: Session, specialist_id: UUID) -> AppUser:
        user = UserRepository(db).get_by_id(specialist_id)
        if not user or user.role != UserRole.SPECIALIST:
            raise NotFoundError(f"Specialist {specialist_id} not found")
        return user

    @staticmethod
    def get_client(db: Session, client_id: UUID) -> AppUser:
        user = UserRepository(db).get_by_id(client_id)
        if not user or user.role != UserRole.CLIENT:
            raise NotFoundError(f"Client {client_id} not found")
        return user

    @staticmethod
    def require_linked(db: Session, specialist_id: UUID, client_id: UUID) -> ClientSpecialistLink:
        """Raise unless the client is actively linked to the specialist"""
        link = LinkRepository(db).get_link(client_id, specialist_id)
        if not link or link.status != LinkStatus.ACTIVE:
            logger.warning(
                f"link_required specialist_id={specialist_id} client_id={client_id}"
            )
            raise ForbiddenError("Client is not linked to this specialist")
        return link

    # ------------------------------------------------------------------
    # Specialist profile
    # ------------------------------------------------------------------

    @staticmethod
    def get_specialist_profile(db: Session, specialist: AppUser) -> SpecialistProfileResponse:
        profile = SpecialistProfileRepository(db).get_by_user_id(specialist.user_id)
        return UserMapper.specialist_profile_to_response(specialist, profile)

    @staticmethod
    def update_specialist_profile(
        db: Session, specialist: AppUser, data: SpecialistProfileUpdate
    ) -> SpecialistProfileResponse:
        fields = data.model_dump(exclude_unset=True)
        profile = SpecialistProfileRepository(db).upsert(specialist.user_id, **fields)
        db.commit()
        db.refresh(profile)
        logger.info(
            f"specialist_profile_saved user_id={specialist.user_id} fields={sorted(fields)}"
        )
        return UserMapper.specialist_profile_to_response(specialist, profile)

    @staticmethod
    def get_specialist_card(db: Session, specialist_id: UUID) -> SpecialistProfileResponse:
        specialist = ProfileService.get_specialist(db, specialist_id)
        return ProfileService.get_specialist_profile(db, specialist)

    @staticmethod
    def list_specialists(db: Session, client: AppUser) -> List[SpecialistSummary]:
        """Directory of all specialists, flagged with the caller's links"""
        linked = set(LinkRepository(db).list_specialist_ids(client.user_id))
        profile = ClientProfileRepository(db).get_by_user_id(client.user_id)
        selected = profile.selected_specialist_id if profile else None
        return [
            UserMapper.specialist_summary(
                user,
                is_linked=user.user_id in linked,
                is_selected=user.user_id == selected,
            )
            for user in UserRepository(db).list_by_role(UserRole.SPECIALIST)
        ]

    @staticmethod
    def specialist_documents(
        db: Session, storage: StorageClient, specialist_id: UUID
    ) -> SpecialistDocuments:
        """Avatar and document folders of a specialist from the hosted storage"""
        ProfileService.get_specialist(db, specialist_id)
        root = str(specialist_id)

        avatars = [
            item
            for item in storage.list_folder(settings.storage_media_bucket, f"{root}/avatar", limit=10)
            if item.is_image
        ]
        folders = {
            folder: storage.list_folder(settings.storage_docs_bucket, f"{root}/{folder}")
            for folder in DOCUMENT_FOLDERS
        }
        logger.info(
            f"documents_listed specialist_id={specialist_id} "
            + " ".join(f"{k}={len(v)}" for k, v in folders.items())
        )
        return SpecialistDocuments(
            avatar_url=avatars[0].public_url if avatars else None,
            **folders,
        )

    # ------------------------------------------------------------------
    # Client profile
    # ------------------------------------------------------------------

    @staticmethod
    def get_client_profile(db: Session, client: AppUser) -> ClientProfileResponse:
        profile = ClientProfileRepository(db).get_by_user_id(client.user_id)
        if not profile:
            return ClientProfileResponse(user_id=client.user_id)
        return UserMapper.client_profile_to_response(profile)

    @staticmethod
    def update_client_profile(
        db: Session, client: AppUser, data: ClientProfileUpdate
    ) -> ClientProfileResponse:
        fields = data.model_dump(exclude_unset=True)
        profile = ClientProfileRepository(db).upsert(client.user_id, **fields)
        db.commit()
        db.refresh(profile)
        logger.info(f"client_profile_saved user_id={client.user_id} fields={sorted(fields)}")
        return UserMapper.client_profile_to_response(profile)

    @staticmethod
    def select_specialist(
        db: Session, client: AppUser, specialist_id: UUID
    ) -> ClientProfileResponse:
        """Make a specialist the client's primary one; links them when needed"""
        ProfileService.get_specialist(db, specialist_id)
        try:
            LinkRepository(db).ensure_active(client.user_id, specialist_id)
            profile = ClientProfileRepository(db).upsert(
                client.user_id, selected_specialist_id=specialist_id
            )
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ServiceValidationError(f"Could not select specialist: {e.orig}")
        db.refresh(profile)
        logger.info(
            f"specialist_selected client_id={client.user_id} specialist_id={specialist_id}"
        )
        return UserMapper.client_profile_to_response(profile)

    @staticmethod
    def my_specialists(db: Session, client: AppUser) -> List[SpecialistSummary]:
        ids = LinkRepository(db).list_specialist_ids(client.user_id)
        profile = ClientProfileRepository(db).get_by_user_id(client.user_id)
        selected = profile.selected_specialist_id if profile else None
        user_repo = UserRepository(db)
        out = []
        for specialist_id in ids:
            user = user_repo.get_by_id(specialist_id)
            if user:
                out.append(
                    UserMapper.specialist_summary(
                        user, is_linked=True, is_selected=specialist_id == selected
                    )
                )
        return out

    # ------------------------------------------------------------------
    # Specialist view of clients
    # ------------------------------------------------------------------

    @staticmethod
    def list_clients(db: Session, specialist: AppUser) -> List[ClientSummary]:
        rows = LinkRepository(db).list_clients(specialist.user_id)
        return [
            ClientSummary(
                user_id=user.user_id,
                email=user.email,
                full_name=user.full_name,
                main_goal=profile.main_goal if profile else None,
                link_status=link.status,
                linked_at=link.created_at,
            )
            for link, user, profile in rows
        ]

    @staticmethod
    def link_client(db: Session, specialist: AppUser, client_id: UUID) -> LinkResponse:
        ProfileService.get_client(db, client_id)
        try:
            link = LinkRepository(db).ensure_active(client_id, specialist.user_id)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ConflictError(f"Could not link client: {e.orig}")
        db.refresh(link)
        logger.info(f"client_linked specialist_id={specialist.user_id} client_id={client_id}")
        return LinkResponse.model_validate(link)

    @staticmethod
    def get_client_detail(
        db: Session, specialist: AppUser, client_id: UUID
    ) -> ClientDetailResponse:
        client = ProfileService.get_client(db, client_id)
        link = ProfileService.require_linked(db, specialist.user_id, client_id)
        profile = ClientProfileRepository(db).get_by_user_id(client_id)
        return ClientDetailResponse(
            user=UserMapper.to_response(client),
            profile=UserMapper.client_profile_to_response(profile) if profile else None,
            link_status=link.status,
        )

    # ------------------------------------------------------------------
    # Food rules
    # ------------------------------------------------------------------

    @staticmethod
    def get_food_rules(
        db: Session, specialist: AppUser, client_id: UUID
    ) -> Optional[FoodRulesResponse]:
        ProfileService.require_linked(db, specialist.user_id, client_id)
        rules = FoodRulesRepository(db).get_for_specialist(client_id, specialist.user_id)
        return FoodRulesResponse.model_validate(rules) if rules else None

    @staticmethod
    def put_food_rules(
        db: Session, specialist: AppUser, client_id: UUID, data: FoodRulesUpdate
    ) -> FoodRulesResponse:
        ProfileService.require_linked(db, specialist.user_id, client_id)
        repo = FoodRulesRepository(db)
        rules = repo.get_for_specialist(client_id, specialist.user_id)
        if rules is None:
            rules = FoodRules(client_id=client_id, specialist_id=specialist.user_id)
            db.add(rules)
        rules.allowed_products = data.allowed_products
        rules.banned_products = data.banned_products
        rules.notes = data.notes
        db.commit()
        db.refresh(rules)
        logger.info(
            f"food_rules_saved client_id={client_id} specialist_id={specialist.user_id} "
            f"allowed={len(data.allowed_products)} banned={len(data.banned_products)}"
        )
        return FoodRulesResponse.model_validate(rules)

    @staticmethod
    def my_food_rules(db: Session, client: AppUser) -> Optional[FoodRulesResponse]:
        rules = FoodRulesRepository(db).get_latest(client.user_id)
        return FoodRulesResponse.model_validate(rules) if rules else None
