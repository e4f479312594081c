"""ChatReadCursor model: last-read timestamp per (session, actor)."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Text, Uuid, text

from app.db import Base
from app.models.mixins import TimestampMixin
from app.schemas.chat import ActorRole


class ChatReadCursor(Base, TimestampMixin):
    """
    Read cursor for one side of a conversation.

    Staff cursors are per staff account. Customer cursors are per account,
    or session-global when the customer is anonymous (account_id NULL).
    The two partial unique indexes back the ON CONFLICT upsert.
    """

    __tablename__ = "chat_read_cursors"

    __table_args__ = (
        Index("ix_chat_read_cursors_session_id", "session_id"),
        Index("ix_chat_read_cursors_account_id", "account_id"),
        Index(
            "uq_chat_read_cursors_session_account_role",
            "session_id",
            "account_id",
            "is_staff",
            unique=True,
            postgresql_where=text("account_id IS NOT NULL"),
            sqlite_where=text("account_id IS NOT NULL"),
        ),
        Index(
            "uq_chat_read_cursors_session_anonymous_role",
            "session_id",
            "is_staff",
            unique=True,
            postgresql_where=text("account_id IS NULL"),
            sqlite_where=text("account_id IS NULL"),
        ),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(Text, nullable=False)
    account_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
    )
    is_staff = Column(Boolean, nullable=False)
    last_read_at = Column(DateTime(timezone=True), nullable=False)

    @property
    def role(self) -> ActorRole:
        return ActorRole.from_is_staff(self.is_staff)
