"""ChatMessage model: append-only log of support chat messages."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db import Base
from app.schemas.chat import ActorRole
from app.utils.clock import utcnow


class ChatMessage(Base):
    """
    One message in a support conversation.

    session_id is a caller-supplied key, not a foreign key: a conversation
    exists as soon as a message carries its key. Rows are never updated.
    """

    __tablename__ = "chat_messages"

    __table_args__ = (
        Index("ix_chat_messages_session_id", "session_id"),
        Index("ix_chat_messages_created_at", "created_at"),
        Index("ix_chat_messages_session_id_created_at", "session_id", "created_at"),
        Index("ix_chat_messages_author_account_id", "author_account_id"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(Text, nullable=False)
    author_account_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_staff = Column(Boolean, nullable=False, default=False)
    body = Column(Text, nullable=False)
    origin_ip = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    author = relationship("User", lazy="joined")

    @property
    def author_role(self) -> ActorRole:
        return ActorRole.from_is_staff(self.is_staff)
