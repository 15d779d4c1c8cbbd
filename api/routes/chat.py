"""
Chat routes.

Messages are persisted here; pushing them to open browsers is done by the
hosted change feed. Clients that poll use the `after` cursor.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from datetime import datetime
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_db, get_current_user
from api.responses import ERROR_RESPONSES
from domain.models import AppUser
from domain.schemas import ThreadCreate, ThreadResponse, MessageCreate, MessageResponse
from services.chat_service import ChatService, thread_to_response

router = APIRouter(prefix="/chat", tags=["Chat"], responses=ERROR_RESPONSES)
logger = logging.getLogger("nutricoach.api.chat")


@router.post("/threads", response_model=ThreadResponse)
def open_thread(
    payload: ThreadCreate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get or create the thread between the caller and a linked counterpart"""
    thread = ChatService.open_thread(db, user, payload.counterpart_id)
    return thread_to_response(thread, user.user_id)


@router.get("/threads", response_model=List[ThreadResponse])
def list_threads(user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return ChatService.list_threads(db, user)


@router.get("/threads/{thread_id}/messages", response_model=List[MessageResponse])
def list_messages(
    thread_id: UUID,
    after: Optional[datetime] = None,
    after_id: Optional[UUID] = None,
    limit: int = Query(200, ge=1, le=500),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Ascending page; pass the last message's created_at and id to get the next one"""
    return ChatService.list_messages(db, user, thread_id, after, limit, after_id)


@router.post(
    "/threads/{thread_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def post_message(
    thread_id: UUID,
    payload: MessageCreate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ChatService.post_message(db, user, thread_id, payload.body)


@router.post("/threads/{thread_id}/read", response_model=ThreadResponse)
def mark_read(
    thread_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ChatService.mark_read(db, user, thread_id)
