"""
Chat Repository - Data access for threads and messages
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import ChatThread, ChatMessage


class ChatThreadRepository(BaseRepository[ChatThread]):
    def __init__(self, db: Session):
        super().__init__(db, ChatThread)

    def get_by_id(self, thread_id: UUID) -> Optional[ChatThread]:
        return self.db.query(ChatThread).filter(ChatThread.thread_id == thread_id).first()

    def get_pair(self, client_id: UUID, specialist_id: UUID) -> Optional[ChatThread]:
        return (
            self.db.query(ChatThread)
            .filter(
                ChatThread.client_id == client_id,
                ChatThread.specialist_id == specialist_id,
            )
            .first()
        )

    def list_for_user(self, user_id: UUID) -> List[ChatThread]:
        """Threads the user takes part in, most recent activity first"""
        threads = (
            self.db.query(ChatThread)
            .filter(or_(ChatThread.client_id == user_id, ChatThread.specialist_id == user_id))
            .all()
        )
        return sorted(
            threads,
            key=lambda t: t.last_message_at or t.created_at,
            reverse=True,
        )


class ChatMessageRepository(BaseRepository[ChatMessage]):
    def __init__(self, db: Session):
        super().__init__(db, ChatMessage)

    def get_by_id(self, message_id: UUID) -> Optional[ChatMessage]:
        return self.db.query(ChatMessage).filter(ChatMessage.message_id == message_id).first()

    def list_for_thread(
        self,
        thread_id: UUID,
        after: Optional[datetime] = None,
        limit: int = 200,
        after_id: Optional[UUID] = None,
    ) -> List[ChatMessage]:
        """
        Messages ordered by (created_at, message_id).

        With `after` only newer messages are returned; adding `after_id` (the
        last message of the previous page) also returns messages sharing that
        timestamp but sorting after it.
        """
        q = self.db.query(ChatMessage).filter(ChatMessage.thread_id == thread_id)
        if after is not None and after_id is not None:
            q = q.filter(
                or_(
                    ChatMessage.created_at > after,
                    and_(ChatMessage.created_at == after, ChatMessage.message_id > after_id),
                )
            )
        elif after is not None:
            q = q.filter(ChatMessage.created_at > after)
        return (
            q.order_by(ChatMessage.created_at.asc(), ChatMessage.message_id.asc())
            .limit(limit)
            .all()
        )
