from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class ThreadCreate(BaseModel):
    """Open (or reopen) the thread with the other party"""

    counterpart_id: UUID


class ThreadResponse(BaseModel):
    thread_id: UUID
    client_id: UUID
    specialist_id: UUID
    created_at: datetime
    updated_at: datetime
    last_message_at: Optional[datetime] = None
    last_message_sender_id: Optional[UUID] = None
    last_message_preview: Optional[str] = None
    has_unread: bool = False


class MessageCreate(BaseModel):
    body: str = Field(..., min_length=1, max_length=4000)

    @field_validator("body", mode="before")
    @classmethod
    def strip_body(cls, v):
        return v.strip() if isinstance(v, str) else v


class MessageResponse(BaseModel):
    message_id: UUID
    thread_id: UUID
    sender_id: UUID
    body: str
    created_at: datetime

    model_config = {"from_attributes": True}
