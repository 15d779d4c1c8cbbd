from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.enums import LinkStatus, MenuGoal
from domain.schemas.dish_schemas import DishResponse, Macros


class MenuDayMeals(BaseModel):
    breakfast: Optional[UUID] = None
    lunch: Optional[UUID] = None
    dinner: Optional[UUID] = None
    snack: Optional[UUID] = None

    def dish_ids(self) -> List[UUID]:
        return [v for v in (self.breakfast, self.lunch, self.dinner, self.snack) if v]


class MenuDay(BaseModel):
    index: int = Field(..., ge=0, le=365)
    label: str = Field("", max_length=100)
    meals: MenuDayMeals = Field(default_factory=MenuDayMeals)
    note: Optional[str] = Field(None, max_length=2000)


def _check_days(days: Optional[List[MenuDay]]) -> Optional[List[MenuDay]]:
    if days is None:
        return days
    indexes = [d.index for d in days]
    if len(indexes) != len(set(indexes)):
        raise ValueError("day indexes must be unique")
    return sorted(days, key=lambda d: d.index)


class MenuCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    goal: Optional[MenuGoal] = None
    target_calories: Optional[int] = Field(None, ge=0, le=10000)
    description: Optional[str] = Field(None, max_length=5000)
    days: List[MenuDay] = Field(default_factory=list, max_length=60)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("days")
    @classmethod
    def unique_days(cls, v):
        return _check_days(v)


class MenuUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    goal: Optional[MenuGoal] = None
    target_calories: Optional[int] = Field(None, ge=0, le=10000)
    description: Optional[str] = Field(None, max_length=5000)
    days: Optional[List[MenuDay]] = Field(None, max_length=60)

    @field_validator("days")
    @classmethod
    def unique_days(cls, v):
        return _check_days(v)


class MenuResponse(BaseModel):
    menu_id: UUID
    specialist_id: UUID
    title: str
    goal: Optional[MenuGoal]
    days_count: int
    target_calories: Optional[int]
    description: Optional[str]
    days: List[MenuDay]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MenuPreviewDay(BaseModel):
    index: int
    label: str
    note: Optional[str] = None
    meals: Dict[str, Optional[DishResponse]]
    totals: Macros
    missing_dish_ids: List[UUID] = []


class MenuPreviewResponse(BaseModel):
    menu: MenuResponse
    days: List[MenuPreviewDay]
    average_daily: Macros


class AssignmentCreate(BaseModel):
    menu_id: UUID
    notes: Optional[str] = Field(None, max_length=5000)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class AssignmentUpdate(BaseModel):
    status: Optional[LinkStatus] = None
    notes: Optional[str] = Field(None, max_length=5000)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class AssignmentResponse(BaseModel):
    assignment_id: UUID
    client_id: UUID
    specialist_id: UUID
    menu_id: Optional[UUID]
    title: str
    notes: Optional[str]
    status: LinkStatus
    start_date: Optional[date]
    end_date: Optional[date]
    days_count: Optional[int]
    menu_data: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AssignmentCreatedResponse(AssignmentResponse):
    warning: Optional[str] = None
