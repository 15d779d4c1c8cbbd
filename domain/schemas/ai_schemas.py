"""
Request/response models of the AI drafting endpoints.

Requests validate only what is needed to shape a prompt; responses mirror the
normalized model output, so every model-provided field is optional.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.enums import LabReportDetail, Language, PlanGoal


def _required_text(v, field: str):
    if not isinstance(v, str) or not v.strip():
        raise ValueError(f"{field} is required")
    return v.strip()


def _optional_text(v):
    if isinstance(v, str):
        return v.strip() or None
    return v


def _clamp_int(v, default: int, lo: int, hi: int) -> int:
    try:
        n = math.floor(float(v))
    except (TypeError, ValueError, OverflowError):
        return default
    return max(lo, min(hi, n))


class IngredientHint(BaseModel):
    name: Optional[str] = None
    amount: Optional[str] = None

    def as_text(self) -> str:
        return f"{(self.name or '').strip()} {(self.amount or '').strip()}".strip()


class DishDraftRequest(BaseModel):
    title: str
    category: Optional[str] = None
    ingredients: List[IngredientHint] = []
    language: Optional[Language] = None

    @field_validator("title", mode="before")
    @classmethod
    def title_required(cls, v):
        return _required_text(v, "title")

    @field_validator("category", mode="before")
    @classmethod
    def strip_category(cls, v):
        return _optional_text(v)

    @field_validator("ingredients", mode="before")
    @classmethod
    def keep_objects(cls, v):
        # loosely typed input: anything that is not an object is ignored
        if not isinstance(v, list):
            return []
        return [x for x in v if isinstance(x, dict)]


class DishAutofillRequest(DishDraftRequest):
    preferences: Optional[str] = None

    @field_validator("preferences", mode="before")
    @classmethod
    def strip_preferences(cls, v):
        return _optional_text(v)


class DraftIngredient(BaseModel):
    name: str
    amount: str
    calories: Optional[float] = None


class MacroValues(BaseModel):
    calories: Optional[float] = None
    protein: Optional[float] = None
    fat: Optional[float] = None
    carbs: Optional[float] = None
    fiber: Optional[float] = None


class DishDraftResponse(BaseModel):
    title: Optional[str] = None
    ingredients: List[DraftIngredient] = []
    instructions: Optional[str] = None
    macros: Optional[Dict[str, Optional[float]]] = None
    comment: Optional[str] = None


class DishMacrosRequest(BaseModel):
    name: Optional[str] = None
    ingredients: str
    language: Optional[Language] = None

    @field_validator("ingredients", mode="before")
    @classmethod
    def ingredients_required(cls, v):
        v = _required_text(v, "ingredients")
        if len(v) < 2:
            raise ValueError("ingredients is required")
        return v

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return _optional_text(v)


class DishMacrosResponse(BaseModel):
    macros: MacroValues
    comment: str = ""


class SubstituteRequest(BaseModel):
    ingredient: str
    reason: Optional[str] = None
    language: Optional[Language] = None

    @field_validator("ingredient", mode="before")
    @classmethod
    def ingredient_required(cls, v):
        return _required_text(v, "ingredient")

    @field_validator("reason", mode="before")
    @classmethod
    def strip_reason(cls, v):
        return _optional_text(v)


class Substitute(BaseModel):
    name: str
    reason: str = ""


class SubstituteResponse(BaseModel):
    substitutes: List[Substitute]


class ClientProfileHint(BaseModel):
    main_goal: Optional[str] = None
    allergies: Optional[str] = None
    banned_foods: Optional[str] = None
    monthly_budget: Optional[float] = None


class MenuHintsRequest(BaseModel):
    menu: Dict[str, Any]
    client_profile: Optional[ClientProfileHint] = None
    language: Optional[Language] = None


class MenuHintsResponse(BaseModel):
    text: str


class GeneratePlanRequest(BaseModel):
    goal: PlanGoal
    days: int = 7
    meals_per_day: int = Field(4, alias="mealsPerDay")
    calories_target: Optional[float] = Field(None, alias="caloriesTarget")
    allergies: Optional[str] = None
    banned_foods: Optional[str] = Field(None, alias="bannedFoods")
    preferences: Optional[str] = None
    budget: Optional[float] = None
    notes: Optional[str] = None
    language: Optional[Language] = None

    model_config = {"populate_by_name": True}

    @field_validator("days", mode="before")
    @classmethod
    def clamp_days(cls, v):
        return _clamp_int(7 if v is None else v, 7, 3, 30)

    @field_validator("meals_per_day", mode="before")
    @classmethod
    def clamp_meals(cls, v):
        return _clamp_int(4 if v is None else v, 4, 3, 5)

    @field_validator("calories_target", "budget", mode="before")
    @classmethod
    def finite_or_none(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return None
        return float(v) if math.isfinite(v) else None

    @field_validator("allergies", "banned_foods", "preferences", "notes", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _optional_text(v)


class PlanMeal(BaseModel):
    title: str
    ingredients: List[str] = []
    approx_macros: Optional[Dict[str, Optional[float]]] = None
    instructions: Optional[str] = None


class PlanDay(BaseModel):
    day: int
    meals: Dict[str, PlanMeal] = {}
    notes: Optional[str] = None


class PlanResponse(BaseModel):
    summary: str = ""
    days: List[PlanDay]
    shopping_list: List[str] = []


class LabReportRequest(BaseModel):
    """
    Either text the client already recognized, or a signed URL of the scan.

    When both are given the text wins and the image is not downloaded.
    """

    ocr_text: Optional[str] = Field(None, alias="ocrText")
    signed_url: Optional[str] = Field(None, alias="signedUrl")
    ocr_lang: Optional[str] = Field(None, alias="ocrLang")
    detail: LabReportDetail = LabReportDetail.SHORT
    language: Optional[Language] = None

    model_config = {"populate_by_name": True}

    @field_validator("ocr_text", "signed_url", "ocr_lang", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _optional_text(v)

    @field_validator("detail", mode="before")
    @classmethod
    def short_unless_detailed(cls, v):
        return LabReportDetail.DETAILED if v == "detailed" else LabReportDetail.SHORT

    @model_validator(mode="after")
    def text_or_url(self):
        if not self.ocr_text and not self.signed_url:
            raise ValueError("ocr_text or signed_url is required")
        return self


class LabReportAnalysis(BaseModel):
    short_summary: str
    key_findings: List[str]
    possible_causes: List[str] = []
    nutrition_notes: List[str] = []
    questions_for_doctor: List[str] = []
    red_flags: List[str] = []
    disclaimer: str


class LabReportMeta(BaseModel):
    ocr_lang: Optional[str] = None
    detail: LabReportDetail
    content_type: Optional[str] = None
    source: str


class LabReportResponse(BaseModel):
    ocr_text: str
    analysis: Optional[LabReportAnalysis] = None
    error: Optional[str] = None
    meta: LabReportMeta
