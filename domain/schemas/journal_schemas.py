from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class JournalEntryCreate(BaseModel):
    entry_date: date = Field(default_factory=date.today)
    weight_kg: Optional[float] = Field(None, gt=0, le=500)
    energy_level: Optional[int] = Field(None, ge=1, le=10)
    mood: Optional[int] = Field(None, ge=1, le=10)
    notes: Optional[str] = Field(None, max_length=5000)

    @field_validator("weight_kg", "energy_level", "mood", mode="before")
    @classmethod
    def blank_or_decimal_comma(cls, v):
        # form fields arrive as "" when left empty and as "72,5" in some locales
        if isinstance(v, str):
            v = v.strip().replace(",", ".")
            return v or None
        return v

    @field_validator("notes", mode="before")
    @classmethod
    def strip_notes(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v


class JournalEntryResponse(BaseModel):
    entry_id: UUID
    user_id: UUID
    entry_date: date
    weight_kg: Optional[float]
    energy_level: Optional[int]
    mood: Optional[int]
    notes: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class JournalSummaryResponse(BaseModel):
    entries: int
    first_date: Optional[date] = None
    last_date: Optional[date] = None
    min_weight_kg: Optional[float] = None
    max_weight_kg: Optional[float] = None
    latest_weight_kg: Optional[float] = None
    weight_change_kg: Optional[float] = None
    avg_energy: Optional[float] = None
    avg_mood: Optional[float] = None
