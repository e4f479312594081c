"""
Unread aggregation for chat badges and transcript read flags.

Everything is derived from read cursors and message timestamps; nothing is
denormalized. ScanUnreadAggregator recomputes on every call (one query per
customer-bearing session), which is fine for support-chat volume. Callers
depend on UnreadAggregator only, so a counter-backed implementation can
replace the scan.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.chat_message import ChatMessage
from app.schemas.chat import ActorKey, ActorRole
from app.services.chat_message_service import ChatMessageService
from app.services.chat_read_cursor_service import ChatReadCursorService
from app.utils.clock import EPOCH, as_utc


class UnreadAggregator(ABC):
    """Computes what an actor has not seen yet."""

    @abstractmethod
    def staff_unread_sessions(
        self,
        staff_account_id: UUID,
        session_ids: Optional[Iterable[str]] = None,
    ) -> Dict[str, bool]:
        """Per customer-bearing session: any customer message past this staff member's cursor."""

    @abstractmethod
    def customer_unread_count(self, account_id: Optional[UUID]) -> int:
        """Sessions of the account whose latest staff reply is newer than its cursor."""

    def staff_unread_count(self, staff_account_id: UUID) -> int:
        """Session-level badge: number of sessions with unread customer messages."""
        unread = self.staff_unread_sessions(staff_account_id)
        return sum(1 for has_unread in unread.values() if has_unread)

    @staticmethod
    def is_read(
        message: ChatMessage,
        customer_last_read: datetime,
        staff_last_read: datetime,
    ) -> bool:
        """A message is read once the other side's cursor reaches its timestamp."""
        if message.author_role is ActorRole.CUSTOMER:
            cursor = staff_last_read
        else:
            cursor = customer_last_read
        return as_utc(message.created_at) <= as_utc(cursor)

    @classmethod
    def flag_read(
        cls,
        messages: Iterable[ChatMessage],
        customer_last_read: datetime,
        staff_last_read: datetime,
    ) -> List[bool]:
        return [
            cls.is_read(m, customer_last_read, staff_last_read) for m in messages
        ]


class ScanUnreadAggregator(UnreadAggregator):
    """Full recompute over the message log and cursor table."""

    def __init__(
        self,
        db: Session,
        message_service: Optional[ChatMessageService] = None,
        cursor_service: Optional[ChatReadCursorService] = None,
    ) -> None:
        self._db = db
        self._messages = message_service or ChatMessageService(db)
        self._cursors = cursor_service or ChatReadCursorService(db)

    def staff_unread_sessions(
        self,
        staff_account_id: UUID,
        session_ids: Optional[Iterable[str]] = None,
    ) -> Dict[str, bool]:
        if session_ids is None:
            ids = self._messages.list_session_identifiers(only_customer_authored=True)
        else:
            ids = set(session_ids)
        if not ids:
            return {}
        cursors = self._cursors.get_cursors(ActorKey.staff(staff_account_id), ids)
        return {
            session_id: self._messages.has_message_after(
                session_id,
                ActorRole.CUSTOMER,
                cursors.get(session_id, EPOCH),
            )
            for session_id in ids
        }

    def customer_unread_count(self, account_id: Optional[UUID]) -> int:
        if account_id is None:
            return 0
        session_ids = self._messages.list_session_identifiers_for_account(account_id)
        if not session_ids:
            return 0
        cursors = self._cursors.get_cursors(ActorKey.customer(account_id), session_ids)
        latest_replies = self._messages.latest_created_at_per_session(
            session_ids, role=ActorRole.STAFF
        )
        return sum(
            1
            for session_id, latest in latest_replies.items()
            if latest > cursors.get(session_id, EPOCH)
        )
