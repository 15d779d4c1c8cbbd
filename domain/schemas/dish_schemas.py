from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from domain.enums import DishCategory, DishTag, Difficulty, IngredientBasis

MACRO_KEYS = ("calories", "protein", "fat", "carbs", "fiber")


class IngredientItem(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex, min_length=3)
    name: str = Field(..., min_length=1, max_length=200)
    amount: str = Field(..., max_length=100)
    calories: Optional[float] = Field(None, ge=0)
    basis: Optional[IngredientBasis] = None

    @field_validator("name", "amount", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class Macros(BaseModel):
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    fat: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fiber: Optional[float] = Field(None, ge=0)


class DishCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    category: DishCategory = DishCategory.BREAKFAST
    time_minutes: Optional[int] = Field(None, ge=0, le=1440)
    difficulty: Optional[Difficulty] = None
    ingredients: List[IngredientItem] = []
    macros: Macros = Field(default_factory=Macros)
    tags: List[DishTag] = []
    instructions: Optional[str] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v):
        return list(dict.fromkeys(v))


class DishUpdate(BaseModel):
    """Partial update; only fields present in the payload are written"""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[DishCategory] = None
    time_minutes: Optional[int] = Field(None, ge=0, le=1440)
    difficulty: Optional[Difficulty] = None
    ingredients: Optional[List[IngredientItem]] = None
    macros: Optional[Macros] = None
    tags: Optional[List[DishTag]] = None
    instructions: Optional[str] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class DishResponse(BaseModel):
    dish_id: UUID
    specialist_id: UUID
    title: str
    category: DishCategory
    time_minutes: Optional[int]
    difficulty: Optional[Difficulty]
    ingredients: List[IngredientItem]
    macros: Macros
    tags: List[DishTag]
    instructions: Optional[str]
    notes: Optional[str]
    image_url: Optional[str]
    created_at: datetime
    updated_at: datetime
