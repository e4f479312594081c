"""
Message store for the support chat.

Messages are immutable; only append and read. Ordering within a session is
(created_at, id).
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config import get_settings
from app.exceptions import ValidationError
from app.models.chat_message import ChatMessage
from app.models.user import User
from app.schemas.chat import ActorRole
from app.utils.clock import Clock, as_utc, utcnow


class ChatMessageService:
    """Append and read chat messages. No update/delete."""

    def __init__(
        self,
        db: Session,
        *,
        clock: Optional[Clock] = None,
        max_length: Optional[int] = None,
    ) -> None:
        self.db = db
        self._clock = clock or utcnow
        self._max_length = max_length or get_settings().chat_message_max_length

    def validate_body(self, body: Optional[str]) -> str:
        if not body:
            raise ValidationError("Message must not be empty")
        if len(body) > self._max_length:
            raise ValidationError(
                f"Message must be at most {self._max_length} characters"
            )
        return body

    def append(
        self,
        session_id: str,
        author_account_id: Optional[UUID],
        role: ActorRole,
        body: str,
        origin_ip: Optional[str] = None,
    ) -> ChatMessage:
        """Persist a new message. Raises ValidationError for empty/oversized bodies."""
        self.validate_body(body)
        message = ChatMessage(
            session_id=session_id,
            author_account_id=author_account_id,
            is_staff=role.is_staff,
            body=body,
            origin_ip=origin_ip,
            created_at=self._clock(),
        )
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def get_message(self, message_id: UUID) -> Optional[ChatMessage]:
        return self.db.query(ChatMessage).filter(ChatMessage.id == message_id).first()

    def list_by_session(
        self,
        session_id: str,
        limit: int = 50,
        newest_first: bool = False,
    ) -> List[ChatMessage]:
        """
        Messages of a session, always returned ascending by (created_at, id).

        newest_first selects which end of the log the limit keeps: False keeps
        the oldest `limit` messages, True keeps the most recent ones.
        """
        query = self.db.query(ChatMessage).filter(ChatMessage.session_id == session_id)
        if newest_first:
            query = query.order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
        else:
            query = query.order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
        messages = query.limit(limit).all()
        if newest_first:
            messages.reverse()
        return messages

    def count_by_session(self, session_id: str) -> int:
        return (
            self.db.query(ChatMessage)
            .filter(ChatMessage.session_id == session_id)
            .count()
        )

    def list_session_identifiers(
        self, only_customer_authored: bool = False
    ) -> Set[str]:
        """Distinct session keys seen in the log."""
        query = self.db.query(ChatMessage.session_id).distinct()
        if only_customer_authored:
            query = query.filter(ChatMessage.is_staff == ActorRole.CUSTOMER.is_staff)
        return {row[0] for row in query.all()}

    def list_session_identifiers_for_account(self, account_id: UUID) -> Set[str]:
        """Sessions in which the account authored at least one message."""
        query = (
            self.db.query(ChatMessage.session_id)
            .filter(ChatMessage.author_account_id == account_id)
            .distinct()
        )
        return {row[0] for row in query.all()}

    def has_message_after(
        self,
        session_id: str,
        role: ActorRole,
        after: datetime,
    ) -> bool:
        """True if the session holds a message by `role` created strictly after `after`."""
        row = (
            self.db.query(ChatMessage.id)
            .filter(
                ChatMessage.session_id == session_id,
                ChatMessage.is_staff == role.is_staff,
                ChatMessage.created_at > after,
            )
            .limit(1)
            .first()
        )
        return row is not None

    def latest_created_at_per_session(
        self,
        session_ids: Iterable[str],
        role: Optional[ActorRole] = None,
    ) -> Dict[str, datetime]:
        """Most recent message time per session, optionally restricted to one role."""
        ids = list(session_ids)
        if not ids:
            return {}
        query = self.db.query(
            ChatMessage.session_id, func.max(ChatMessage.created_at)
        ).filter(ChatMessage.session_id.in_(ids))
        if role is not None:
            query = query.filter(ChatMessage.is_staff == role.is_staff)
        rows = query.group_by(ChatMessage.session_id).all()
        return {session_id: as_utc(latest) for session_id, latest in rows}

    def latest_message_per_session(
        self, session_ids: Iterable[str]
    ) -> Dict[str, ChatMessage]:
        """Last message of each session by (created_at, id)."""
        ids = list(session_ids)
        if not ids:
            return {}
        latest = (
            self.db.query(
                ChatMessage.session_id.label("session_id"),
                func.max(ChatMessage.created_at).label("max_created_at"),
            )
            .filter(ChatMessage.session_id.in_(ids))
            .group_by(ChatMessage.session_id)
            .subquery()
        )
        rows = (
            self.db.query(ChatMessage)
            .join(
                latest,
                (ChatMessage.session_id == latest.c.session_id)
                & (ChatMessage.created_at == latest.c.max_created_at),
            )
            .order_by(ChatMessage.id.asc())
            .all()
        )
        result: Dict[str, ChatMessage] = {}
        for message in rows:
            # Same-instant ties resolve to the highest id
            result[message.session_id] = message
        return result

    def customer_identity_per_session(
        self, session_ids: Iterable[str]
    ) -> Dict[str, User]:
        """Account behind the most recent authenticated customer message per session."""
        ids = list(session_ids)
        if not ids:
            return {}
        rows = (
            self.db.query(ChatMessage.session_id, User)
            .join(User, ChatMessage.author_account_id == User.id)
            .filter(
                ChatMessage.session_id.in_(ids),
                ChatMessage.is_staff == ActorRole.CUSTOMER.is_staff,
            )
            .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
            .all()
        )
        result: Dict[str, User] = {}
        for session_id, user in rows:
            result.setdefault(session_id, user)
        return result
