from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from domain.enums import UserRole, LinkStatus


def _blank_to_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class UserCreate(BaseModel):
    email: EmailStr
    full_name: Optional[str] = Field(None, max_length=200)
    role: UserRole = UserRole.CLIENT

    @field_validator("full_name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return _blank_to_none(v)


class UserResponse(BaseModel):
    user_id: UUID
    email: str
    full_name: Optional[str]
    role: UserRole
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SpecialistProfileUpdate(BaseModel):
    headline: Optional[str] = Field(None, max_length=300)
    badges: Optional[str] = Field(None, max_length=2000)
    about: Optional[str] = Field(None, max_length=10000)
    regalia: Optional[str] = Field(None, max_length=10000)
    education: Optional[str] = Field(None, max_length=10000)
    experience: Optional[str] = Field(None, max_length=10000)
    services: Optional[str] = Field(None, max_length=10000)
    contacts: Optional[str] = Field(None, max_length=2000)

    @field_validator("*", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _blank_to_none(v)


class SpecialistProfileResponse(BaseModel):
    user_id: UUID
    full_name: Optional[str] = None
    headline: Optional[str] = None
    badges: List[str] = []
    about: Optional[str] = None
    regalia: Optional[str] = None
    education: Optional[str] = None
    experience: Optional[str] = None
    services: Optional[str] = None
    contacts: Optional[str] = None
    updated_at: Optional[datetime] = None


class ClientProfileUpdate(BaseModel):
    main_goal: Optional[str] = Field(None, max_length=300)
    goal_description: Optional[str] = Field(None, max_length=5000)
    allergies: Optional[str] = Field(None, max_length=2000)
    banned_foods: Optional[str] = Field(None, max_length=2000)
    preferences: Optional[str] = Field(None, max_length=2000)
    monthly_budget: Optional[float] = Field(None, ge=0)

    @field_validator(
        "main_goal", "goal_description", "allergies", "banned_foods", "preferences",
        mode="before",
    )
    @classmethod
    def strip_text(cls, v):
        return _blank_to_none(v)


class ClientProfileResponse(BaseModel):
    user_id: UUID
    main_goal: Optional[str] = None
    goal_description: Optional[str] = None
    allergies: Optional[str] = None
    banned_foods: Optional[str] = None
    preferences: Optional[str] = None
    monthly_budget: Optional[float] = None
    selected_specialist_id: Optional[UUID] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LinkResponse(BaseModel):
    link_id: UUID
    client_id: UUID
    specialist_id: UUID
    status: LinkStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class ClientSummary(BaseModel):
    """Row of a specialist's client list"""

    user_id: UUID
    email: str
    full_name: Optional[str]
    main_goal: Optional[str] = None
    link_status: LinkStatus
    linked_at: datetime


class ClientDetailResponse(BaseModel):
    user: UserResponse
    profile: Optional[ClientProfileResponse]
    link_status: LinkStatus


class SpecialistSummary(BaseModel):
    """Row of the specialist directory shown to clients"""

    user_id: UUID
    full_name: Optional[str]
    headline: Optional[str] = None
    badges: List[str] = []
    is_linked: bool = False
    is_selected: bool = False


class FoodRulesUpdate(BaseModel):
    allowed_products: List[str] = []
    banned_products: List[str] = []
    notes: Optional[str] = Field(None, max_length=5000)

    @field_validator("allowed_products", "banned_products")
    @classmethod
    def clean_products(cls, v):
        seen = []
        for item in v:
            item = item.strip()
            if item and item.lower() not in [s.lower() for s in seen]:
                seen.append(item)
        return seen

    @field_validator("notes", mode="before")
    @classmethod
    def strip_notes(cls, v):
        return _blank_to_none(v)


class FoodRulesResponse(BaseModel):
    rules_id: UUID
    client_id: UUID
    specialist_id: Optional[UUID]
    allowed_products: List[str]
    banned_products: List[str]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
