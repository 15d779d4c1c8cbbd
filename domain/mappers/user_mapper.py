"""
User domain mappers.
Handles transformation between ORM models and DTOs for user-related entities.
"""

import re
from typing import List, Optional

from domain.models import AppUser, ClientProfile, SpecialistProfile
from domain.schemas.user_schemas import (
    UserResponse,
    ClientProfileResponse,
    SpecialistProfileResponse,
    SpecialistSummary,
)

MAX_BADGES = 12


def split_badges(text: Optional[str]) -> List[str]:
    """Badges are stored as one free-text field separated by commas, semicolons or newlines."""
    if not text:
        return []
    parts = [p.strip() for p in re.split(r"[,;\n]", text)]
    return [p for p in parts if p][:MAX_BADGES]


class UserMapper:
    """Mapper for user-related transformations."""

    @staticmethod
    def to_response(user: AppUser) -> UserResponse:
        return UserResponse.model_validate(user)

    @staticmethod
    def client_profile_to_response(profile: ClientProfile) -> ClientProfileResponse:
        return ClientProfileResponse(
            user_id=profile.user_id,
            main_goal=profile.main_goal,
            goal_description=profile.goal_description,
            allergies=profile.allergies,
            banned_foods=profile.banned_foods,
            preferences=profile.preferences,
            monthly_budget=(
                float(profile.monthly_budget) if profile.monthly_budget is not None else None
            ),
            selected_specialist_id=profile.selected_specialist_id,
            updated_at=profile.updated_at,
        )

    @staticmethod
    def specialist_profile_to_response(
        user: AppUser, profile: Optional[SpecialistProfile]
    ) -> SpecialistProfileResponse:
        """
        Build the public card of a specialist.

        A specialist who never filled the profile still gets a card with
        empty fields, so clients can see them in the directory.
        """
        if profile is None:
            return SpecialistProfileResponse(user_id=user.user_id, full_name=user.full_name)
        return SpecialistProfileResponse(
            user_id=user.user_id,
            full_name=user.full_name,
            headline=profile.headline,
            badges=split_badges(profile.badges),
            about=profile.about,
            regalia=profile.regalia,
            education=profile.education,
            experience=profile.experience,
            services=profile.services,
            contacts=profile.contacts,
            updated_at=profile.updated_at,
        )

    @staticmethod
    def specialist_summary(
        user: AppUser, is_linked: bool = False, is_selected: bool = False
    ) -> SpecialistSummary:
        profile = user.specialist_profile
        return SpecialistSummary(
            user_id=user.user_id,
            full_name=user.full_name,
            headline=profile.headline if profile else None,
            badges=split_badges(profile.badges) if profile else [],
            is_linked=is_linked,
            is_selected=is_selected,
        )
