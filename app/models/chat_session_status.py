"""ChatSessionStatus model: completion flag for a conversation."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Text, Uuid

from app.db import Base
from app.models.mixins import TimestampMixin


class ChatSessionStatus(Base, TimestampMixin):
    """Created on the first completion toggle; absent rows mean open."""

    __tablename__ = "chat_session_status"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(Text, unique=True, nullable=False, index=True)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    completed_by_account_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
