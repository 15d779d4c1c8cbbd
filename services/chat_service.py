from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from domain.enums import UserRole
from domain.models import AppUser, ChatMessage, ChatThread, utcnow
from domain.schemas import ThreadResponse
from repositories import ChatThreadRepository, ChatMessageRepository, UserRepository
from services.profile_service import ProfileService
from app.exceptions import ForbiddenError, NotFoundError, ServiceValidationError

logger = logging.getLogger("nutricoach.services.chat")

PREVIEW_LENGTH = 140


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive UTC; bring a client cursor into the same form"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def has_unread(thread: ChatThread, user_id: UUID) -> bool:
    if thread.last_message_at is None or thread.last_message_sender_id == user_id:
        return False
    last_read = (
        thread.client_last_read_at if user_id == thread.client_id else thread.specialist_last_read_at
    )
    return last_read is None or thread.last_message_at > last_read


def thread_to_response(thread: ChatThread, user_id: UUID) -> ThreadResponse:
    return ThreadResponse(
        thread_id=thread.thread_id,
        client_id=thread.client_id,
        specialist_id=thread.specialist_id,
        created_at=thread.created_at,
        updated_at=thread.updated_at,
        last_message_at=thread.last_message_at,
        last_message_sender_id=thread.last_message_sender_id,
        last_message_preview=thread.last_message_preview,
        has_unread=has_unread(thread, user_id),
    )


class ChatService:
    """Two-party threads between a client and a linked specialist"""

    @staticmethod
    def open_thread(db: Session, user: AppUser, counterpart_id: UUID) -> ChatThread:
        """Get or create the thread between the caller and the counterpart"""
        counterpart = UserRepository(db).get_by_id(counterpart_id)
        if not counterpart:
            raise NotFoundError(f"User {counterpart_id} not found")
        if counterpart.role == user.role:
            raise ServiceValidationError("Threads connect a client with a specialist")

        if user.role == UserRole.CLIENT:
            client_id, specialist_id = user.user_id, counterpart.user_id
        else:
            client_id, specialist_id = counterpart.user_id, user.user_id
        ProfileService.require_linked(db, specialist_id, client_id)

        repo = ChatThreadRepository(db)
        thread = repo.get_pair(client_id, specialist_id)
        if thread:
            return thread
        try:
            thread = repo.create(ChatThread(client_id=client_id, specialist_id=specialist_id))
        except IntegrityError:
            # created concurrently by the other participant
            db.rollback()
            thread = repo.get_pair(client_id, specialist_id)
            if not thread:
                raise
        logger.info(
            f"thread_opened thread_id={thread.thread_id} client_id={client_id} "
            f"specialist_id={specialist_id}"
        )
        return thread

    @staticmethod
    def list_threads(db: Session, user: AppUser) -> List[ThreadResponse]:
        threads = ChatThreadRepository(db).list_for_user(user.user_id)
        return [thread_to_response(t, user.user_id) for t in threads]

    @staticmethod
    def get_thread(db: Session, user: AppUser, thread_id: UUID) -> ChatThread:
        thread = ChatThreadRepository(db).get_by_id(thread_id)
        if not thread:
            raise NotFoundError(f"Thread {thread_id} not found")
        if user.user_id not in thread.participants():
            raise ForbiddenError("Not a participant of this thread")
        return thread

    @staticmethod
    def list_messages(
        db: Session,
        user: AppUser,
        thread_id: UUID,
        after: Optional[datetime] = None,
        limit: int = 200,
        after_id: Optional[UUID] = None,
    ) -> List[ChatMessage]:
        ChatService.get_thread(db, user, thread_id)
        return ChatMessageRepository(db).list_for_thread(
            thread_id, to_naive_utc(after), limit, after_id=after_id
        )

    @staticmethod
    def post_message(db: Session, user: AppUser, thread_id: UUID, body: str) -> ChatMessage:
        thread = ChatService.get_thread(db, user, thread_id)
        body = body.strip()
        if not body:
            raise ServiceValidationError("Message body is empty")

        now = utcnow()
        message = ChatMessage(thread_id=thread_id, sender_id=user.user_id, body=body, created_at=now)
        db.add(message)
        thread.last_message_at = now
        thread.last_message_sender_id = user.user_id
        thread.last_message_preview = body[:PREVIEW_LENGTH]
        # own messages count as read
        if user.user_id == thread.client_id:
            thread.client_last_read_at = now
        else:
            thread.specialist_last_read_at = now
        db.commit()
        db.refresh(message)
        logger.info(
            f"message_posted thread_id={thread_id} sender_id={user.user_id} chars={len(body)}"
        )
        return message

    @staticmethod
    def mark_read(db: Session, user: AppUser, thread_id: UUID) -> ThreadResponse:
        thread = ChatService.get_thread(db, user, thread_id)
        now = utcnow()
        if user.user_id == thread.client_id:
            thread.client_last_read_at = now
        else:
            thread.specialist_last_read_at = now
        db.commit()
        db.refresh(thread)
        logger.info(f"thread_read thread_id={thread_id} user_id={user.user_id}")
        return thread_to_response(thread, user.user_id)
