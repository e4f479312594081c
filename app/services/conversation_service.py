"""ConversationService: the only writer of chat messages, read cursors and session status.

Session identifiers are caller-supplied bearer keys: anyone holding a key can
read and post to that conversation as the customer. Staff operations require
a staff identity from the identity provider.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.exceptions import ForbiddenError, SessionClosedError
from app.infra.logging_config import get_logger
from app.models.chat_message import ChatMessage
from app.schemas.chat import (
    ActorKey,
    ActorRole,
    Identity,
    InboxCounts,
    InboxFilter,
    InboxSessionSummary,
    MessageRead,
    SessionStatusRead,
)
from app.services.chat_message_service import ChatMessageService
from app.services.chat_read_cursor_service import ChatReadCursorService
from app.services.chat_session_status_service import ChatSessionStatusService
from app.services.unread_aggregator import ScanUnreadAggregator, UnreadAggregator
from app.utils.clock import EPOCH, Clock, as_utc, utcnow

logger = get_logger("conversation")

PREVIEW_LENGTH = 100


def _require_staff(identity: Identity) -> UUID:
    if not identity.is_staff or identity.account_id is None:
        raise ForbiddenError()
    return identity.account_id


def _to_message_read(
    message: ChatMessage,
    is_read: bool,
    include_audit: bool = False,
) -> MessageRead:
    data = MessageRead(
        id=message.id,
        session_id=message.session_id,
        body=message.body,
        role=message.author_role,
        is_staff=message.is_staff,
        author_account_id=message.author_account_id,
        created_at=as_utc(message.created_at),
        is_read=is_read,
    )
    if include_audit:
        author = message.author
        data.author_name = author.name if author is not None else None
        data.author_email = author.email if author is not None else None
        data.origin_ip = message.origin_ip
    return data


class ConversationService:
    def __init__(
        self,
        db: Session,
        *,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None,
        aggregator: Optional[UnreadAggregator] = None,
    ) -> None:
        self._db = db
        self._clock = clock or utcnow
        self._settings = settings or get_settings()
        self._messages = ChatMessageService(
            db,
            clock=self._clock,
            max_length=self._settings.chat_message_max_length,
        )
        self._cursors = ChatReadCursorService(db, clock=self._clock)
        self._statuses = ChatSessionStatusService(db, clock=self._clock)
        self._aggregator = aggregator or ScanUnreadAggregator(
            db, message_service=self._messages, cursor_service=self._cursors
        )

    # -------------------------------------------------------------------------
    # Sending
    # -------------------------------------------------------------------------

    def send_as_customer(
        self,
        session_id: str,
        account_id: Optional[UUID],
        body: str,
        origin_ip: Optional[str] = None,
    ) -> ChatMessage:
        """Append a customer message. Completed sessions still accept customer messages."""
        return self._messages.append(
            session_id, account_id, ActorRole.CUSTOMER, body, origin_ip
        )

    def send_as_staff(
        self,
        session_id: str,
        identity: Identity,
        body: str,
        origin_ip: Optional[str] = None,
    ) -> ChatMessage:
        staff_id = _require_staff(identity)
        if self._statuses.is_completed(session_id):
            raise SessionClosedError()
        message = self._messages.append(
            session_id, staff_id, ActorRole.STAFF, body, origin_ip
        )
        logger.info("Staff %s replied in session %s", staff_id, session_id)
        return message

    # -------------------------------------------------------------------------
    # Read tracking
    # -------------------------------------------------------------------------

    def mark_read(self, session_id: str, actor_key: ActorKey) -> datetime:
        """Move the actor's cursor to now and return the recorded time."""
        now = self._clock()
        self._cursors.mark_read(session_id, actor_key, now)
        return now

    def mark_read_as_staff(self, session_id: str, identity: Identity) -> datetime:
        staff_id = _require_staff(identity)
        return self.mark_read(session_id, ActorKey.staff(staff_id))

    def customer_unread_count(self, account_id: Optional[UUID]) -> int:
        return self._aggregator.customer_unread_count(account_id)

    def staff_unread_count(self, identity: Identity) -> int:
        staff_id = _require_staff(identity)
        return self._aggregator.staff_unread_count(staff_id)

    # -------------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------------

    def mark_completed(
        self,
        session_id: str,
        completed: bool,
        identity: Identity,
    ) -> SessionStatusRead:
        staff_id = _require_staff(identity)
        status = self._statuses.set_completed(session_id, completed, staff_id)
        logger.info(
            "Session %s marked %s by %s",
            session_id,
            "completed" if completed else "open",
            staff_id,
        )
        return status

    def get_session_status(
        self, session_id: str, identity: Identity
    ) -> SessionStatusRead:
        _require_staff(identity)
        return self._statuses.get_status(session_id)

    # -------------------------------------------------------------------------
    # Transcripts
    # -------------------------------------------------------------------------

    def customer_transcript(
        self,
        session_id: str,
        account_id: Optional[UUID] = None,
    ) -> List[MessageRead]:
        """
        Oldest-first customer view.

        Customer messages count as read once any staff member's cursor has
        reached them.
        """
        messages = self._messages.list_by_session(
            session_id,
            limit=self._settings.chat_customer_history_limit,
            newest_first=False,
        )
        customer_last_read = self._cursors.get_last_read(
            session_id, ActorKey.customer(account_id)
        )
        staff_last_read = self._cursors.get_latest_for_role(
            session_id, ActorRole.STAFF
        )
        flags = self._aggregator.flag_read(
            messages, customer_last_read, staff_last_read
        )
        return [_to_message_read(m, is_read) for m, is_read in zip(messages, flags)]

    def staff_transcript(
        self,
        session_id: str,
        identity: Identity,
        mark_read: bool = True,
    ) -> List[MessageRead]:
        """
        Latest messages of a session for the viewing staff member.

        Customer messages are flagged against where this viewer had read up to
        before opening; on a first open they all count as read. Opening then
        advances the viewer's cursor to now.
        """
        staff_id = _require_staff(identity)
        staff_key = ActorKey.staff(staff_id)
        cursor = self._cursors.get_cursor(session_id, staff_key)
        staff_last_read = as_utc(cursor.last_read_at) if cursor is not None else EPOCH
        if mark_read:
            now = self.mark_read(session_id, staff_key)
            if cursor is None:
                staff_last_read = now
        messages = self._messages.list_by_session(
            session_id,
            limit=self._settings.chat_staff_history_limit,
            newest_first=True,
        )
        customer_last_read = self._cursors.get_latest_for_role(
            session_id, ActorRole.CUSTOMER
        )
        flags = self._aggregator.flag_read(
            messages, customer_last_read, staff_last_read
        )
        return [
            _to_message_read(m, is_read, include_audit=True)
            for m, is_read in zip(messages, flags)
        ]

    # -------------------------------------------------------------------------
    # Inbox
    # -------------------------------------------------------------------------

    def list_inbox(
        self,
        identity: Identity,
        inbox_filter: InboxFilter = InboxFilter.ALL,
    ) -> List[InboxSessionSummary]:
        """One summary per customer-bearing session, most recent activity first."""
        staff_id = _require_staff(identity)
        session_ids = self._messages.list_session_identifiers(
            only_customer_authored=True
        )
        if not session_ids:
            return []
        latest = self._messages.latest_message_per_session(session_ids)
        customers = self._messages.customer_identity_per_session(session_ids)
        statuses = self._statuses.get_statuses(session_ids)
        unread = self._aggregator.staff_unread_sessions(staff_id, session_ids)

        summaries: List[InboxSessionSummary] = []
        for session_id in session_ids:
            last = latest.get(session_id)
            if last is None:
                continue
            status = statuses.get(session_id)
            if inbox_filter is InboxFilter.ACTIVE and status and status.is_completed:
                continue
            if inbox_filter is InboxFilter.COMPLETED and not (
                status and status.is_completed
            ):
                continue
            customer = customers.get(session_id)
            summaries.append(
                InboxSessionSummary(
                    session_id=session_id,
                    last_message_preview=last.body[:PREVIEW_LENGTH],
                    last_message_at=as_utc(last.created_at),
                    last_message_is_staff=last.is_staff,
                    customer_account_id=customer.id if customer else None,
                    customer_name=customer.name if customer else None,
                    customer_email=customer.email if customer else None,
                    is_anonymous=customer is None,
                    is_completed=bool(status and status.is_completed),
                    completed_at=status.completed_at if status else None,
                    has_unread=unread.get(session_id, False),
                )
            )
        summaries.sort(key=lambda s: (s.last_message_at, s.session_id), reverse=True)
        return summaries

    def inbox_counts(self, identity: Identity) -> InboxCounts:
        summaries = self.list_inbox(identity)
        completed = sum(1 for s in summaries if s.is_completed)
        return InboxCounts(
            total=len(summaries),
            active=len(summaries) - completed,
            completed=completed,
            unread=sum(1 for s in summaries if s.has_unread),
        )
