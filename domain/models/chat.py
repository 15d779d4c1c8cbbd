"""
Chat thread and message models.
"""

from sqlalchemy import Column, Text, DateTime, ForeignKey, UUID, UniqueConstraint, Index
from sqlalchemy.orm import relationship
import uuid

from domain.models.database import Base, utcnow


class ChatThread(Base):
    """Two-party conversation between one client and one specialist"""

    __tablename__ = "chat_thread"
    __table_args__ = (
        UniqueConstraint("client_id", "specialist_id", name="uq_thread_client_specialist"),
    )

    thread_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    specialist_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    last_message_at = Column(DateTime)
    last_message_sender_id = Column(UUID(as_uuid=True))
    last_message_preview = Column(Text)

    client_last_read_at = Column(DateTime)
    specialist_last_read_at = Column(DateTime)

    messages = relationship(
        "ChatMessage", back_populates="thread", cascade="all, delete-orphan"
    )

    def participants(self) -> tuple:
        return (self.client_id, self.specialist_id)


class ChatMessage(Base):
    __tablename__ = "chat_message"
    __table_args__ = (Index("ix_chat_message_thread_created", "thread_id", "created_at"),)

    message_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    thread_id = Column(
        UUID(as_uuid=True),
        ForeignKey("chat_thread.thread_id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    body = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    thread = relationship("ChatThread", back_populates="messages")
